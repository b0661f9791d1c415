"""Facade over the cloud provider's auth, storage and data services."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Protocol

from cloud_notes.domain.auth import AuthEvent
from cloud_notes.domain.errors import (
    AuthError,
    BackendError,
    ConfigurationError,
    DataError,
    StorageError,
)
from cloud_notes.domain.notes import Note, NoteData
from cloud_notes.domain.session import SessionState
from cloud_notes.update_context import UpdateContext

logger = logging.getLogger(__name__)


class AuthProvider(Protocol):
    """Interface for the hosted authentication service."""

    def subscribe(self, handler: Callable[[AuthEvent], None]) -> Callable[[], None]:
        """Register an auth event handler and return an unsubscribe callable."""

    def fetch_session(self) -> bool:
        """Return whether a signed-in session already exists."""

    def sign_in(self) -> None:
        """Start the hosted sign-in flow."""

    def complete_sign_in(self, code: str) -> None:
        """Finish the hosted sign-in flow with an authorization code."""

    def sign_out(self) -> None:
        """Sign the current user out."""


class ImageStorage(Protocol):
    """Interface for image object storage."""

    def put_object(self, key: str, payload: bytes) -> None:
        """Store image bytes under a key."""

    def get_object(self, key: str) -> bytes:
        """Return the image bytes stored under a key."""


class NoteRepository(Protocol):
    """Persistence interface for note records."""

    def create_note(self, data: NoteData) -> None:
        """Create a note record."""

    def delete_note(self, data: NoteData) -> None:
        """Delete a note record."""

    def list_notes(self) -> list[NoteData]:
        """Return all note records visible to the current user."""


@dataclass(frozen=True)
class CloudProvider:
    """The configured provider services."""

    auth: AuthProvider
    storage: ImageStorage
    notes: NoteRepository


@dataclass
class Backend:
    """Single point of contact with the cloud provider.

    Provider calls run in worker threads as fire-and-forget tasks. Their outcome
    only ever reaches the session through the update context, and failures end
    in the log rather than being raised to the caller.
    """

    connect: Callable[[], CloudProvider]
    session: SessionState
    context: UpdateContext
    load_notes_on_sign_in: bool = True
    call_timeout: float | None = None
    _provider: CloudProvider | None = field(default=None, init=False)
    _initialized: bool = field(default=False, init=False)
    _unsubscribe: Callable[[], None] | None = field(default=None, init=False)
    _pending: set[asyncio.Task] = field(default_factory=set, init=False)

    @property
    def configured(self) -> bool:
        return self._provider is not None

    def initialize(self) -> "Backend":
        """Configure the provider and start mirroring its auth state."""
        if self._initialized:
            return self
        if not self.context.attached:
            logger.error("Cannot initialize cloud provider: no update context")
            return self
        self._initialized = True
        try:
            provider = self.connect()
        except ConfigurationError:
            logger.exception("Could not initialize cloud provider")
            return self
        self._provider = provider
        self._unsubscribe = provider.auth.subscribe(self._on_auth_event)
        self._submit(
            "Fetch auth session",
            provider.auth.fetch_session,
            on_success=self._update_sign_in_status,
        )
        logger.info("Initialized cloud provider")
        return self

    def sign_in(self) -> None:
        """Start the hosted sign-in flow."""
        provider = self._require_provider("sign in")
        if provider is None:
            return
        self._submit(
            "Sign in",
            provider.auth.sign_in,
            on_success=lambda _: logger.info("Sign in started"),
        )

    def complete_sign_in(self, code: str) -> None:
        """Exchange the authorization code returned by the hosted flow."""
        provider = self._require_provider("complete sign in")
        if provider is None:
            return
        self._submit(
            "Sign in",
            provider.auth.complete_sign_in,
            code,
            on_success=lambda _: logger.info("Sign in succeeded"),
        )

    def sign_out(self) -> None:
        """Sign the current user out."""
        provider = self._require_provider("sign out")
        if provider is None:
            return
        self._submit(
            "Sign out",
            provider.auth.sign_out,
            on_success=lambda _: logger.info("Successfully signed out"),
        )

    def create_note(self, note: Note) -> None:
        """Persist a note; the session is not touched."""
        provider = self._require_provider("create note")
        if provider is None:
            return
        self._submit("Create note", provider.notes.create_note, note.data)

    def delete_note(self, note: Note) -> None:
        """Delete a note record; the session is not touched."""
        provider = self._require_provider("delete note")
        if provider is None:
            return
        self._submit("Delete note", provider.notes.delete_note, note.data)

    def store_image(self, key: str, payload: bytes) -> None:
        """Upload image bytes under ``key``."""
        provider = self._require_provider("store image")
        if provider is None:
            return
        self._submit("Store image", provider.storage.put_object, key, payload)

    def retrieve_image(self, key: str, completion: Callable[[bytes], None]) -> None:
        """Download image bytes and hand them to ``completion`` on the update context."""
        provider = self._require_provider("retrieve image")
        if provider is None:
            return
        self._submit(
            "Retrieve image",
            provider.storage.get_object,
            key,
            on_success=completion,
        )

    def query_notes(self) -> None:
        """Load the stored notes into the session."""
        provider = self._require_provider("query notes")
        if provider is None:
            return
        self._submit(
            "Query notes",
            provider.notes.list_notes,
            on_success=self._apply_notes,
        )

    async def drain(self) -> None:
        """Wait until no provider call or resulting update is in flight."""
        while True:
            await asyncio.sleep(0)
            if not self._pending:
                break
            await asyncio.gather(*tuple(self._pending), return_exceptions=True)

    async def close(self) -> None:
        """Stop listening to auth events and wait for in-flight calls."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        await self.drain()

    def _on_auth_event(self, event: AuthEvent) -> None:
        if event is AuthEvent.SIGNED_IN:
            logger.info("Auth event %s: user signed in", event)
        elif event is AuthEvent.SESSION_EXPIRED:
            logger.info("Auth event %s: session expired", event)
        else:
            logger.info("Auth event %s: user signed out", event)
        self.context.dispatch(
            self._update_sign_in_status, event is AuthEvent.SIGNED_IN
        )

    def _update_sign_in_status(self, status: bool) -> None:
        changed = self.session.set_signed_in(status)
        if not status:
            if self.session.notes:
                self.session.replace_notes([])
        elif changed and self.load_notes_on_sign_in:
            # Load only on a sign-in transition.
            self.query_notes()

    def _apply_notes(self, records: list[NoteData]) -> None:
        if not self.session.is_signed_in:
            logger.info("Discarding %d notes fetched before sign out", len(records))
            return
        self.session.replace_notes(Note.from_data(record, self) for record in records)

    def _require_provider(self, action: str) -> CloudProvider | None:
        if self._provider is None:
            logger.warning("Cloud provider unavailable, cannot %s", action)
        return self._provider

    def _submit(
        self,
        operation: str,
        call: Callable[..., object],
        *args: object,
        on_success: Callable[..., None] | None = None,
    ) -> None:
        coroutine = self._run(operation, call, args, on_success)
        if self.context.is_current():
            self._track(coroutine)
        else:
            self.context.dispatch(self._track, coroutine)

    def _track(self, coroutine: Awaitable[None]) -> None:
        task = self.context.loop.create_task(coroutine)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _run(
        self,
        operation: str,
        call: Callable[..., object],
        args: tuple[object, ...],
        on_success: Callable[..., None] | None,
    ) -> None:
        try:
            result = await asyncio.wait_for(
                asyncio.to_thread(call, *args), timeout=self.call_timeout
            )
        except AuthError as exc:
            logger.error("%s failed: %s", operation, exc)
        except (DataError, StorageError) as exc:
            logger.warning("%s failed, dropping: %s", operation, exc)
        except BackendError as exc:
            logger.error("%s failed: %s", operation, exc)
        except TimeoutError:
            logger.warning("%s timed out after %ss", operation, self.call_timeout)
        except Exception:
            logger.exception("%s failed", operation)
        else:
            if on_success is None:
                return
            try:
                on_success(result)
            except Exception:
                logger.exception("%s completion failed", operation)
