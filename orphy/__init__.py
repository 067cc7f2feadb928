"""Command-line client for listing and viewing mail, packages and their tracking events."""

__version__ = "0.1.0"