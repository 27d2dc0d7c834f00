"""Event logging package."""

from ledger.events.logger import EventLogger, configure_logging

__all__ = ["EventLogger", "configure_logging"]
