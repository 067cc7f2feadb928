"""Command-line definitions and the stored configuration."""

from __future__ import annotations

import argparse
import tomllib
from dataclasses import asdict, dataclass
from enum import StrEnum
from pathlib import Path

import tomli_w
from platformdirs import user_config_path

APP_NAME = "orphy_hackclub_mail_client"
CONFIG_FILE = "default-config.toml"


class MailType(StrEnum):
    """Kinds of mail the service can list."""

    LEGACY = "legacy"
    LETTER = "letter"
    PACKAGE = "package"


@dataclass
class Config:
    """Persistent settings: only the API key."""

    api_key: str = ""


def config_path() -> Path:
    """Return the location of the configuration file."""
    return user_config_path(APP_NAME) / CONFIG_FILE


def load_config(path: Path | str | None = None) -> Config:
    """Read the configuration, returning defaults when the file does not exist.

    Raises ValueError when the file exists but cannot be understood.
    """
    target = Path(path) if path is not None else config_path()
    try:
        raw = target.read_bytes()
    except FileNotFoundError:
        return Config()
    try:
        data = tomllib.loads(raw.decode("utf-8"))
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
        raise ValueError(f"invalid configuration file {target}: {exc}") from exc
    api_key = data.get("api_key")
    if not isinstance(api_key, str):
        raise ValueError(f"configuration file {target} has no api_key string")
    return Config(api_key=api_key)


def store_config(config: Config, path: Path | str | None = None) -> Path:
    """Write the configuration and return the path it was written to."""
    target = Path(path) if path is not None else config_path()
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(tomli_w.dumps(asdict(config)), encoding="utf-8")
    return target


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with its four subcommands."""
    parser = argparse.ArgumentParser(prog="orphy", description="Read your mail from the terminal.")
    commands = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

    mail = commands.add_parser("mail", help="list your mail")
    mail.add_argument(
        "-t",
        "--type",
        dest="mail_type",
        type=MailType,
        choices=list(MailType),
        default=None,
        help="only list mail of this kind",
    )

    view = commands.add_parser("view", help="show details of one piece of mail")
    view.add_argument("-i", "--id", dest="id", required=True, help="id of the mail")

    commands.add_parser("fetch", help="show a summary of your mail")

    setup = commands.add_parser("setup", help="save your API key")
    setup.add_argument("api_key", help="the API key to store")

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments; exits with SystemExit on bad input."""
    return build_parser().parse_args(argv)