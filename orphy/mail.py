"""Client for the mail service's public API and the records it returns."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import requests

from orphy.cli import MailType

DEFAULT_BASE = "https://mail.hackclub.com"
DEFAULT_API_PATH = "/api/public/v1/"
REQUEST_TIMEOUT = 30

_ENDPOINTS = {
    MailType.LEGACY: ("lsv", "legacy_shipment_viewer_records"),
    MailType.PACKAGE: ("packages", "packages"),
    MailType.LETTER: ("letters", "letters"),
    None: ("mail", "mail"),
}

_SINGLE_KEYS = ("letter", "package", "legacy_shipment_viewer_record")

_LETTER_STRING_FIELDS = {
    "id": "id",
    "title": "title",
    "public_url": "public_url",
    "type": "letter_type",
    "subtype": "letter_subtype",
    "status": "status",
    "path": "path",
    "tracking_number": "tracking_number",
    "tracking_link": "tracking_link",
}


@dataclass
class Event:
    """One tracking event of a piece of mail."""

    happened_at: datetime | None = None
    source: str | None = None
    facility: str | None = None
    description: str | None = None
    location: str | None = None


@dataclass
class Letter:
    """A letter, package or legacy shipment; any field may be absent."""

    id: str | None = None
    title: str | None = None
    letter_type: str | None = None
    letter_subtype: str | None = None
    tracking_number: str | None = None
    tracking_link: str | None = None
    public_url: str | None = None
    status: str | None = None
    tags: list[str] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    events: list[Event] | None = None
    path: str | None = None


def parse_timestamp(value: str) -> datetime:
    """Parse an RFC 3339 timestamp into an aware UTC datetime.

    Raises ValueError when the text is not a timestamp with an offset.
    """
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        raise ValueError(f"timestamp has no offset: {value!r}")
    return parsed.astimezone(timezone.utc)


def _string(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    return value if isinstance(value, str) else None


def _timestamp(data: dict[str, Any], key: str) -> datetime | None:
    value = _string(data, key)
    return parse_timestamp(value) if value is not None else None


def _json_text(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def event_from_data(data: Any) -> Event:
    """Build an Event from a decoded JSON object, ignoring non-string fields."""
    if not isinstance(data, dict):
        return Event()
    return Event(
        happened_at=_timestamp(data, "happened_at"),
        source=_string(data, "source"),
        facility=_string(data, "facility"),
        description=_string(data, "description"),
        location=_string(data, "location"),
    )


def letter_from_data(data: Any) -> Letter | None:
    """Build a Letter from a decoded JSON object.

    Returns None when none of the known fields is present.
    Tags are kept in their JSON text form.
    """
    if not isinstance(data, dict):
        return None

    fields: dict[str, Any] = {
        attr: value
        for key, attr in _LETTER_STRING_FIELDS.items()
        if (value := _string(data, key)) is not None
    }
    for key in ("created_at", "updated_at"):
        if (stamp := _timestamp(data, key)) is not None:
            fields[key] = stamp
    if isinstance(tags := data.get("tags"), list):
        fields["tags"] = [_json_text(tag) for tag in tags]
    if isinstance(events := data.get("events"), list):
        fields["events"] = [event_from_data(event) for event in events]

    return Letter(**fields) if fields else None


class MailClient:
    """Authenticated access to the mail API."""

    def __init__(
        self,
        auth_token: str,
        base: str = DEFAULT_BASE,
        api_path: str = DEFAULT_API_PATH,
        session: requests.Session | None = None,
    ) -> None:
        self.auth_token = auth_token
        self.base = base
        self.api_path = api_path
        self.session = session if session is not None else requests.Session()

    def _api_url(self, endpoint: str) -> str:
        prefix = self.api_path.strip("/")
        parts = [self.base.rstrip("/"), prefix, endpoint] if prefix else [self.base.rstrip("/"), endpoint]
        return "/".join(parts)

    def _get_json(self, url: str) -> Any:
        """Fetch a URL; return decoded JSON, or None when the body is not JSON."""
        response = self.session.get(
            url,
            headers={"Authorization": f"Bearer {self.auth_token}"},
            timeout=REQUEST_TIMEOUT,
        )
        try:
            return json.loads(response.text)
        except ValueError:
            return None

    def get_id(self) -> str | None:
        """Return the user's id in JSON text form, or None if the reply is not JSON."""
        data = self._get_json(self._api_url("me"))
        if data is None:
            return None
        user = data.get("user") if isinstance(data, dict) else None
        user_id = user.get("id") if isinstance(user, dict) else None
        return _json_text(user_id)

    def get_mail(self, mail_type: MailType | None = None) -> list[Letter] | None:
        """List mail, optionally of one kind; None when the reply has no list.

        Raises ValueError when an entry of the list carries no known field.
        """
        endpoint, key = _ENDPOINTS[mail_type]
        data = self._get_json(self._api_url(endpoint))
        if not isinstance(data, dict) or not isinstance(entries := data.get(key), list):
            return None
        mail = []
        for entry in entries:
            letter = letter_from_data(entry)
            if letter is None:
                raise ValueError(f"unrecognised mail entry: {entry!r}")
            mail.append(letter)
        return mail

    def get_mail_by_path(self, path: str) -> Letter | None:
        """Fetch one piece of mail by its API path."""
        data = self._get_json(f"{self.base.rstrip('/')}/{path.lstrip('/')}")
        if not isinstance(data, dict):
            return None
        for key in _SINGLE_KEYS:
            if isinstance(record := data.get(key), dict):
                return letter_from_data(record)
        return None