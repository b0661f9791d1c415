"""Change notification for observable domain objects."""

from collections.abc import Callable
from dataclasses import dataclass, field

Listener = Callable[[object, str], None]


@dataclass
class Observers:
    """Registry of listeners notified with ``(source, field_name)``."""

    _listeners: list[Listener] = field(default_factory=list)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener and return a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify(self, source: object, name: str) -> None:
        """Call every listener registered at the time of the change."""
        for listener in list(self._listeners):
            listener(source, name)

    def __len__(self) -> int:
        return len(self._listeners)
