"""textask: turns inbound SMS messages into tasks."""

__version__ = "0.1.0"
