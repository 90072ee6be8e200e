from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List

from match3.events.bus import ENGINE_EVENTS, EventBus


@dataclass(frozen=True, slots=True)
class LoggedEvent:
    name: str
    payload: Dict[str, Any] = field(default_factory=dict)


class EventLog:
    """Records bus events in emission order so a cascade can be replayed or compared."""

    def __init__(self, event_bus: EventBus, names: Iterable[str] = ENGINE_EVENTS):
        self.entries: List[LoggedEvent] = []
        for name in names:
            event_bus.subscribe(name, self._recorder(name))

    def _recorder(self, name: str):
        def record(sender, **payload):
            self.entries.append(LoggedEvent(name, dict(payload)))
        return record

    def names(self) -> List[str]:
        return [entry.name for entry in self.entries]

    def of(self, name: str) -> List[Dict[str, Any]]:
        return [entry.payload for entry in self.entries if entry.name == name]

    def clear(self) -> None:
        self.entries.clear()

    def __len__(self) -> int:
        return len(self.entries)
