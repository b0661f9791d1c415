"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from functools import partial

from cloud_notes.adapters.supabase_provider import connect_supabase
from cloud_notes.config import Settings
from cloud_notes.domain.session import SessionState
from cloud_notes.services.backend import Backend, CloudProvider
from cloud_notes.services.notes import NotesController
from cloud_notes.update_context import UpdateContext


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    update_context: UpdateContext
    session: SessionState
    backend: Backend
    notes_controller: NotesController
    close_resources: Callable[[], Awaitable[None]]


def build_container(
    settings: Settings | None = None,
    connect: Callable[[], CloudProvider] | None = None,
) -> AppContainer:
    """Create the default dependency container.

    The provider is not contacted here; ``Backend.initialize`` connects once the
    update context is attached to a running loop.
    """
    resolved_settings = settings or Settings()
    update_context = UpdateContext()
    session = SessionState(context=update_context)
    backend = Backend(
        connect=connect or partial(connect_supabase, resolved_settings),
        session=session,
        context=update_context,
        load_notes_on_sign_in=resolved_settings.load_notes_on_sign_in,
        call_timeout=resolved_settings.provider_timeout_seconds,
    )
    notes_controller = NotesController(session=session, backend=backend)

    async def close_resources() -> None:
        await backend.close()

    return AppContainer(
        settings=resolved_settings,
        update_context=update_context,
        session=session,
        backend=backend,
        notes_controller=notes_controller,
        close_resources=close_resources,
    )
