"""Single update context for session state changes."""

import asyncio
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class UpdateContext:
    """The event loop on which all session state updates are applied.

    Provider SDK callbacks may arrive on worker threads; they are marshaled onto
    the loop with :meth:`dispatch` so subscribers only ever see changes made on a
    single thread.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    @classmethod
    def running(cls) -> "UpdateContext":
        """Create a context bound to the currently running loop."""
        return cls(asyncio.get_running_loop())

    def attach(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        """Bind the context to ``loop`` or to the running loop."""
        self._loop = loop or asyncio.get_running_loop()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            raise RuntimeError("Update context is not attached to an event loop")
        return self._loop

    @property
    def attached(self) -> bool:
        return self._loop is not None

    def is_current(self) -> bool:
        """Return whether the caller runs on the bound loop."""
        if self._loop is None:
            return False
        try:
            return asyncio.get_running_loop() is self._loop
        except RuntimeError:
            return False

    def dispatch(self, callback: Callable[..., object], *args: object) -> None:
        """Schedule ``callback`` on the loop; safe to call from any thread."""
        loop = self.loop
        if loop.is_closed():
            logger.warning("Dropping update %r: update context is closed", callback)
            return
        loop.call_soon_threadsafe(callback, *args)
