from typing import Any, Dict, List
from models import TransferEvent
from time_utils import to_rfc3339


def format_event(event: TransferEvent, symbol: str = "USDC") -> str:
    """One report line, e.g. `2024-05-01T12:00:00+00:00 | -2.500000 USDC | sent`"""
    return f"{to_rfc3339(event.timestamp)} | {event.sign}{event.amount:.6f} {symbol} | {event.direction.value}"


def format_header(account: str, window_hours: int, symbol: str = "USDC") -> str:
    return f"{symbol} transfers for wallet: {account} (last {window_hours}h)"


class TransferAggregator:
    """Collects transfer events for one backfill and orders them by time."""

    def __init__(self):
        self._events: List[TransferEvent] = []

    def __len__(self) -> int:
        return len(self._events)

    def add(self, event: TransferEvent):
        self._events.append(event)

    def extend(self, events: List[TransferEvent]):
        self._events.extend(events)

    def events(self) -> List[TransferEvent]:
        # sorted() is stable, so equal timestamps keep insertion order
        return sorted(self._events, key=lambda event: event.timestamp)

    def render_lines(self, symbol: str = "USDC") -> List[str]:
        return [format_event(event, symbol) for event in self.events()]

    def to_payload(self) -> List[Dict[str, Any]]:
        return [
            {
                'timestamp': to_rfc3339(event.timestamp),
                'amount': f"{event.amount:.6f}",
                'direction': event.direction.value,
                'signature': event.signature
            }
            for event in self.events()
        ]
