"""Output sinks for ledger reports."""

from zaldo.sinks.console import ConsoleSink
from zaldo.sinks.json_file import JsonFileSink

__all__ = ["ConsoleSink", "JsonFileSink"]
