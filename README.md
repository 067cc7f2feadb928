# orphy

A small command-line client for checking your mail: letters, packages and
legacy shipment records, together with their tracking events. It only reads
from the mail service's public API.

## Installation

```
pip install .
```

## Setup

Save your API key once:

```
orphy setup YOUR_API_KEY
```

The key is written as TOML (`api_key = "..."`) to `default-config.toml` in the
user configuration directory for `orphy_hackclub_mail_client`, as chosen by
`platformdirs`. The other commands read it from there; if it is missing or
empty they tell you to run `orphy setup` first.

## Usage

List all of your mail as a table of name, type, ID, status and creation date:

```
orphy mail
```

List only one kind of mail (`legacy`, `letter` or `package`) with `-t`/`--type`:

```
orphy mail --type package
```

Show the full details of one item, including its tracking events, using an ID
from the list (`-i`/`--id`):

```
orphy view --id ITEM_ID
```

Show a short summary: your user ID, the instance you are connected to, how much
mail you have and when the first listed item was created:

```
orphy fetch
```

## Using it from Python

```python
from orphy.mail import MailClient
from orphy.cli import MailType

client = MailClient("placeholder")
for letter in client.get_mail(MailType.PACKAGE) or []:
    print(letter.id, letter.title, letter.status)
```

- `MailClient(auth_token, base=..., api_path=..., session=None)` sends each
  request with a bearer token; `base` and `api_path` choose the instance, and a
  `requests.Session` may be passed in.
- `get_mail(mail_type=None)` returns a list of `Letter` records, or `None` when
  the reply is not JSON or holds no list of the expected kind. It raises
  `ValueError` if an entry carries none of the known fields.
- `get_mail_by_path(path)` returns one `Letter` (a letter, package or legacy
  shipment record), or `None`.
- `get_id()` returns the user's id in its JSON text form, or `None` when the
  reply is not JSON.
- `letter_from_data` and `event_from_data` build `Letter` and `Event` records
  from decoded JSON; timestamps become timezone-aware UTC `datetime` values.

`orphy.cli` provides `load_config` and `store_config` for the configuration
file, and `orphy.main` holds the table and banner rendering used by the
commands.

## What it does not do

orphy cannot send mail, change the status of an item or manage your account;
it only lists and displays what the API returns. It keeps no local cache, so
every command queries the service afresh.

## Running the tests

```
pip install .[test]
pytest
```