"""Entry point of the orphy command: list, inspect and summarise mail."""

from __future__ import annotations

import sys
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from pathlib import Path

import requests
from tabulate import tabulate

from orphy.cli import Config, MailType, load_config, parse_args, store_config
from orphy.mail import Event, Letter, MailClient

MAIL_HEADERS = ["Name", "Type", "ID", "Status", "Creation Date"]
TABLE_FORMAT = "grid"

EMPTY_CONFIG_HINT = "No api key! Add one using orphy setup [api key]"
MISSING_CONFIG = "You don't have an api key! Run orphy setup [your api key] with your api key."

_FETCH_BANNER = """
⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀⣠⡤⠶⠒⠛⠉⠙⠛⠒⠶⢤⣀⠀⠀⠀⠀⠀⠀
⠀⠀⠀⠀⠀⠀⠀⠀⠀⢀⡴⠋⠁⠀⠀⠀⠀⠀⠀⠁⠀⠀⠀⠈⠙⢦⡀⠀⠀⠀
⠀⠀⠀⠀⣀⣠⠤⠤⡴⠻⢓⣶⠦⠤⣄⡀⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀⠙⢦⡀⠀
⣀⡠⠴⠊⠁⠀⠀⠀⠀⠀⠒⠽⠀⠀⠀⠉⢙⠒⢢⡄⠀⠀⠀⠀⠀⠀⠀⠈⢷⡀ {user}
⠘⢆⠉⠑⡆⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀⢆⠁⣠⠎⠀⠀⠀⠀⠀⠀⠀⠀⠀⠈⣇ instance: {instance}
⠀⠈⠓⠦⠁⢀⣀⠀⠀⠀⠀⠀⠀⣀⣀⢸⡊⠁⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀⢻ mail: {count}
⠀⠀⠀⡸⠀⠉⠀⠙⠆⠀⠀⠀⠏⠀⠈⠀⢇⠀⠀⠀⠀⠀⠀⠀⢀⠔⠀⠀⠀⣼ {last}
⠀⠀⠀⠹⣄⠀⠠⣤⡡⠪⡭⠃⡤⢤⡄⡰⠋⠀⠀⠀⣀⡠⠴⠊⠁⠀⠀⠀⢠⠇
⠀⠀⢠⢿⣠⠟⠓⠛⠉⠛⡟⠛⠛⠛⠛⠒⠒⠚⠉⠉⠁⠀⠀⠀⠀⠀⢀⡴⠋⠀
⠀⠀⠈⠛⢯⣀⣀⣀⡤⠤⠤⠤⢤⣤⣀⣀⣀⣀⣀⣀⣀⣤⠤⠴⠒⠋⠁⠀⠀⠀
"""

_CLIENT_ERRORS = (requests.RequestException, ValueError)


def _eprint(message: str) -> None:
    print(message, file=sys.stderr)


def _naive_text(value: datetime) -> str:
    """Format a datetime as UTC wall-clock time, fractions only when present."""
    utc = value.astimezone(timezone.utc)
    text = utc.strftime("%Y-%m-%d %H:%M:%S")
    if utc.microsecond:
        if utc.microsecond % 1000 == 0:
            text += f".{utc.microsecond // 1000:03d}"
        else:
            text += f".{utc.microsecond:06d}"
    return text


def _display_text(value: datetime) -> str:
    return f"{_naive_text(value)} UTC"


def letter_name(letter: Letter) -> str | None:
    """Return the title, or a name built from the tags, or None."""
    if letter.title is not None:
        return letter.title
    if letter.tags is not None:
        return "letter: " + ", ".join(letter.tags)
    return None


def mail_rows(letters: Iterable[Letter]) -> list[list[str]]:
    """Build the rows of the mail listing; unnamed mail has no name cell."""
    rows = []
    for letter in letters:
        row = []
        if (name := letter_name(letter)) is not None:
            row.append(name)
        row.append(letter.letter_type if letter.letter_type is not None else "no type")
        row.append(letter.id if letter.id is not None else "no id")
        row.append(letter.status if letter.status is not None else "no status")
        if letter.created_at is not None:
            row.append(letter.created_at.astimezone(timezone.utc).date().isoformat())
        else:
            row.append("no date")
        rows.append(row)
    return rows


def render_mail_table(letters: Iterable[Letter]) -> str:
    """Render the mail listing as a table with headers."""
    return tabulate(mail_rows(letters), headers=MAIL_HEADERS, tablefmt=TABLE_FORMAT)


def letter_rows(letter: Letter) -> list[list[str]]:
    """Build the label/value rows describing one piece of mail."""
    rows = [["ID", letter.id if letter.id is not None else "no id"]]
    name = letter_name(letter)
    rows.append(["Name", name if name is not None else "no name"])
    rows.append(["Type", letter.letter_type if letter.letter_type is not None else "no type"])
    if letter.letter_subtype is not None:
        rows.append(["Subtype", letter.letter_subtype])
    rows.append(["Status", letter.status if letter.status is not None else "no status"])
    if letter.created_at is not None:
        rows.append(["Created At", _display_text(letter.created_at)])
    else:
        rows.append(["Created At", "no creation date"])
    if letter.updated_at is not None:
        rows.append(["Updated At", _display_text(letter.updated_at)])
    if letter.public_url is not None:
        rows.append(["Public URL", letter.public_url])
    if letter.tracking_number is not None:
        rows.append(["Tracking Number", letter.tracking_number])
    if letter.tracking_link is not None:
        rows.append(["Tracking Link", letter.tracking_link])
    return rows


def event_rows(event: Event) -> list[list[str]]:
    """Build the label/value rows describing one tracking event."""
    return [
        ["Source", event.source if event.source is not None else "no source"],
        ["Facility", event.facility if event.facility is not None else "no facility"],
        ["Description", event.description if event.description is not None else "no description"],
        ["Location", event.location if event.location is not None else "no location"],
        [
            "Happened At",
            _display_text(event.happened_at) if event.happened_at is not None else "no happening date",
        ],
    ]


def render_fetch_banner(user_id: str | None, instance: str, letters: Sequence[Letter]) -> str:
    """Render the summary banner shown by the fetch command."""
    first = letters[0] if letters else None
    last = (
        f"last mailed: {_naive_text(first.created_at)}"
        if first is not None and first.created_at is not None
        else ""
    )
    return _FETCH_BANNER.format(
        user=f"id: {user_id}" if user_id is not None else "",
        instance=instance,
        count=len(letters),
        last=last,
    )


def run_setup(api_key: str, path: Path | str | None = None) -> None:
    """Store the API key in the configuration file."""
    try:
        store_config(Config(api_key=api_key), path)
    except OSError:
        _eprint("There was an error! [4]")
    else:
        print("Saved your api key!")


def run_mail(client: MailClient, mail_type: MailType | None = None) -> None:
    """List mail as a table."""
    print("Loading your mail...")
    try:
        letters = client.get_mail(mail_type)
    except _CLIENT_ERRORS:
        letters = None
    if letters is None:
        _eprint("There was an error [1]! api key might be invalid!")
        return
    if not letters:
        print("You don't have any mail!")
        return
    print(render_mail_table(letters))
    print("View more details by using orphy view --id (put the id of your letter here!)")


def run_view(client: MailClient, letter_id: str) -> None:
    """Show details and events of the mail with the given id."""
    print("Loading your mail...")
    try:
        mail_list = client.get_mail(None)
    except _CLIENT_ERRORS:
        mail_list = None

    found = False
    failed = False
    letter: Letter | None = None
    for current in mail_list or []:
        if current.id is None or current.id != letter_id:
            continue
        if current.path is None:
            _eprint("There was an error [2]! api key might be invalid!")
            continue
        try:
            letter = client.get_mail_by_path(current.path)
        except _CLIENT_ERRORS:
            failed = True
        found = True
        break

    if not found:
        _eprint("Letter doesn't exist or api key may be invalid!")
        return
    if failed:
        _eprint("There was an error [3]! api key might be invalid!")
        return
    if letter is None:
        _eprint("Your letter does not exist!")
        return

    print(tabulate(letter_rows(letter), tablefmt=TABLE_FORMAT))
    if letter.events:
        print("Events")
        for event in letter.events:
            print(tabulate(event_rows(event), tablefmt=TABLE_FORMAT))


def run_fetch(client: MailClient) -> None:
    """Print a summary of the account's mail."""
    print("Loading your stats...")
    try:
        letters = client.get_mail(None)
    except _CLIENT_ERRORS:
        return
    if letters is None:
        return
    try:
        user_id = client.get_id()
    except _CLIENT_ERRORS:
        user_id = None
    print(render_fetch_banner(user_id, client.base, letters))


def main(argv: list[str] | None = None) -> int:
    """Run the command line."""
    args = parse_args(argv)
    if args.command == "setup":
        run_setup(args.api_key)
        return 0

    try:
        config = load_config()
    except (ValueError, OSError):
        _eprint(MISSING_CONFIG)
        return 0
    if not config.api_key:
        print(EMPTY_CONFIG_HINT)
        return 0

    client = MailClient(config.api_key)
    if args.command == "mail":
        run_mail(client, args.mail_type)
    elif args.command == "view":
        run_view(client, args.id)
    elif args.command == "fetch":
        run_fetch(client)
    return 0


if __name__ == "__main__":
    sys.exit(main())