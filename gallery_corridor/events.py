"""Host platform input signals and the listener registry that delivers them."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List

WHEEL = "wheel"
RESIZE = "resize"


@dataclass
class WheelEvent:
    """Pointer wheel signal; only the sign of ``delta_y`` matters."""

    delta_y: float
    default_prevented: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True


@dataclass(frozen=True)
class ResizeEvent:
    width: int
    height: int


Listener = Callable[[object], None]


@dataclass
class EventHub:
    """Listener registry standing in for the window the page runs in."""

    listeners: Dict[str, List[Listener]] = field(default_factory=dict)

    def add_listener(self, kind: str, callback: Listener) -> None:
        self.listeners.setdefault(kind, []).append(callback)

    def remove_listener(self, kind: str, callback: Listener) -> None:
        callbacks = self.listeners.get(kind, [])
        if callback in callbacks:
            callbacks.remove(callback)
        if not callbacks:
            self.listeners.pop(kind, None)

    def listener_count(self, kind: str) -> int:
        return len(self.listeners.get(kind, ()))

    def dispatch(self, kind: str, event: object) -> object:
        for callback in list(self.listeners.get(kind, ())):
            callback(event)
        return event
