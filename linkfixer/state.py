"""Monitoring state shared by the clipboard loop and the tray."""
from dataclasses import dataclass


@dataclass
class MonitorState:
    enabled: bool = True
    # Last clipboard text the loop observed or wrote itself.
    last_seen_text: str = ''
    polling_interval_ms: int = 500
