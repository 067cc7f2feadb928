from datetime import datetime, timedelta, timezone

import pytest
import responses

from orphy.cli import MailType
from orphy.mail import (
    DEFAULT_BASE,
    Event,
    Letter,
    MailClient,
    event_from_data,
    letter_from_data,
    parse_timestamp,
)

BASE = "https://mail.example.com"
API = f"{BASE}/api/public/v1"


@pytest.fixture
def client():
    return MailClient("token", base=BASE)


@pytest.fixture
def mocked():
    with responses.RequestsMock() as rsps:
        yield rsps


def test_parse_timestamp_utc():
    assert parse_timestamp("2024-05-01T12:00:00Z") == datetime(2024, 5, 1, 12, tzinfo=timezone.utc)


def test_parse_timestamp_converts_offset_to_utc():
    stamp = parse_timestamp("2024-05-01T12:00:00+02:00")
    assert stamp.utcoffset() == timedelta(0)
    assert stamp == datetime(2024, 5, 1, 12, tzinfo=timezone(timedelta(hours=2)))


@pytest.mark.parametrize("value", ["not a date", "2024-05-01T12:00:00"])
def test_parse_timestamp_rejects(value):
    with pytest.raises(ValueError):
        parse_timestamp(value)


def test_event_from_data_ignores_non_strings():
    event = event_from_data({"source": "USPS", "facility": 3, "location": None})
    assert event == Event(source="USPS")


def test_event_from_data_timestamp():
    event = event_from_data({"happened_at": "2024-01-02T03:04:05Z", "description": "sent"})
    assert event.happened_at == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    assert event.description == "sent"


def test_letter_from_data_empty_is_none():
    assert letter_from_data({}) is None
    assert letter_from_data({"unknown": "x"}) is None
    assert letter_from_data([1, 2]) is None


def test_letter_from_data_fields():
    letter = letter_from_data(
        {
            "id": "ltr!1",
            "type": "letter",
            "subtype": "postcard",
            "status": "mailed",
            "path": "/api/public/v1/letters/ltr!1",
            "created_at": "2024-03-04T05:06:07Z",
            "events": [{"source": "USPS"}],
        }
    )
    assert letter.id == "ltr!1"
    assert letter.letter_type == "letter"
    assert letter.letter_subtype == "postcard"
    assert letter.status == "mailed"
    assert letter.path == "/api/public/v1/letters/ltr!1"
    assert letter.created_at == datetime(2024, 3, 4, 5, 6, 7, tzinfo=timezone.utc)
    assert letter.events == [Event(source="USPS")]
    assert letter.title is None and letter.tags is None


def test_letter_tags_keep_json_text():
    letter = letter_from_data({"tags": ["a", 2]})
    assert letter.tags == ['"a"', "2"]


def test_letter_empty_lists_still_count():
    assert letter_from_data({"events": []}) == Letter(events=[])


def test_default_base():
    assert MailClient("token").base == DEFAULT_BASE


def test_get_id_sends_bearer(client, mocked):
    mocked.get(f"{API}/me", json={"user": {"id": "usr!1"}})
    assert client.get_id() == '"usr!1"'
    assert mocked.calls[0].request.headers["Authorization"] == "Bearer token"


def test_get_id_missing_user(client, mocked):
    mocked.get(f"{API}/me", json={"error": "nope"})
    assert client.get_id() == "null"


def test_get_id_non_json(client, mocked):
    mocked.get(f"{API}/me", body="<html>")
    assert client.get_id() is None


@pytest.mark.parametrize(
    "mail_type, endpoint, key",
    [
        (None, "mail", "mail"),
        (MailType.LETTER, "letters", "letters"),
        (MailType.PACKAGE, "packages", "packages"),
        (MailType.LEGACY, "lsv", "legacy_shipment_viewer_records"),
    ],
)
def test_get_mail_endpoints(client, mocked, mail_type, endpoint, key):
    mocked.get(f"{API}/{endpoint}", json={key: [{"id": "a"}, {"id": "b", "title": "T"}]})
    mail = client.get_mail(mail_type)
    assert [letter.id for letter in mail] == ["a", "b"]
    assert mail[1].title == "T"


def test_get_mail_wrong_key_is_none(client, mocked):
    mocked.get(f"{API}/letters", json={"mail": [{"id": "a"}]})
    assert client.get_mail(MailType.LETTER) is None


def test_get_mail_non_json_is_none(client, mocked):
    mocked.get(f"{API}/mail", body="oops", status=401)
    assert client.get_mail() is None


def test_get_mail_unrecognised_entry_raises(client, mocked):
    mocked.get(f"{API}/mail", json={"mail": [{"other": 1}]})
    with pytest.raises(ValueError):
        client.get_mail()


@pytest.mark.parametrize("key", ["letter", "package", "legacy_shipment_viewer_record"])
def test_get_mail_by_path(client, mocked, key):
    mocked.get(f"{API}/letters/x", json={key: {"id": "x", "status": "sent"}})
    letter = client.get_mail_by_path("/api/public/v1/letters/x")
    assert letter == Letter(id="x", status="sent")


def test_get_mail_by_path_without_record(client, mocked):
    mocked.get(f"{API}/letters/x", json={"error": "not found"})
    assert client.get_mail_by_path("api/public/v1/letters/x") is None


def test_get_mail_by_path_empty_record(client, mocked):
    mocked.get(f"{API}/letters/x", json={"letter": {}})
    assert client.get_mail_by_path("api/public/v1/letters/x") is None