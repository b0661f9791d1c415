"""Shared test fixtures."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

import pytest

from cloud_notes.config import Settings
from cloud_notes.containers import AppContainer, build_container
from cloud_notes.domain.auth import AuthEvent
from cloud_notes.domain.errors import AuthError, DataError, StorageError
from cloud_notes.domain.notes import NoteData
from cloud_notes.domain.session import SessionState
from cloud_notes.services.backend import (
    AuthProvider,
    Backend,
    CloudProvider,
    ImageStorage,
    NoteRepository,
)
from cloud_notes.update_context import UpdateContext


@dataclass
class FakeAuthProvider(AuthProvider):
    """Fake auth provider that emits events synchronously, like the SDK."""

    signed_in: bool = False
    fail_sign_in: bool = False
    fail_sign_out: bool = False
    handlers: list[Callable[[AuthEvent], None]] = field(default_factory=list)
    subscribe_calls: int = 0
    fetch_calls: int = 0
    sign_in_calls: int = 0
    codes: list[str] = field(default_factory=list)

    def subscribe(self, handler: Callable[[AuthEvent], None]) -> Callable[[], None]:
        self.subscribe_calls += 1
        self.handlers.append(handler)
        return lambda: self.handlers.remove(handler)

    def fetch_session(self) -> bool:
        self.fetch_calls += 1
        return self.signed_in

    def sign_in(self) -> None:
        self.sign_in_calls += 1
        if self.fail_sign_in:
            raise AuthError("hosted UI unavailable")
        self.signed_in = True
        self.emit(AuthEvent.SIGNED_IN)

    def complete_sign_in(self, code: str) -> None:
        self.codes.append(code)
        self.signed_in = True
        self.emit(AuthEvent.SIGNED_IN)

    def sign_out(self) -> None:
        if self.fail_sign_out:
            raise AuthError("network down")
        self.signed_in = False
        self.emit(AuthEvent.SIGNED_OUT)

    def emit(self, event: AuthEvent) -> None:
        for handler in list(self.handlers):
            handler(event)


@dataclass
class InMemoryImageStorage(ImageStorage):
    """In-memory image storage for tests."""

    objects: dict[str, bytes] = field(default_factory=dict)
    gets: list[str] = field(default_factory=list)
    fail: bool = False

    def put_object(self, key: str, payload: bytes) -> None:
        if self.fail:
            raise StorageError(f"cannot store {key}")
        self.objects[key] = payload

    def get_object(self, key: str) -> bytes:
        self.gets.append(key)
        if self.fail:
            raise StorageError(f"cannot retrieve {key}")
        return self.objects[key]


@dataclass
class InMemoryNoteRepository(NoteRepository):
    """In-memory note repository for tests."""

    records: dict[str, NoteData] = field(default_factory=dict)
    deleted: list[str] = field(default_factory=list)
    list_calls: int = 0
    fail: bool = False

    def create_note(self, data: NoteData) -> None:
        if self.fail:
            raise DataError(f"cannot create {data.id}")
        self.records[data.id] = data

    def delete_note(self, data: NoteData) -> None:
        if self.fail:
            raise DataError(f"cannot delete {data.id}")
        self.records.pop(data.id, None)
        self.deleted.append(data.id)

    def list_notes(self) -> list[NoteData]:
        self.list_calls += 1
        if self.fail:
            raise DataError("cannot list notes")
        return list(self.records.values())


@dataclass
class RecordingImageSource:
    """Image source that holds completions until the test releases them."""

    requests: list[tuple[str, Callable[[bytes], None]]] = field(default_factory=list)

    def retrieve_image(self, key: str, completion: Callable[[bytes], None]) -> None:
        self.requests.append((key, completion))


def build_provider() -> CloudProvider:
    return CloudProvider(
        auth=FakeAuthProvider(),
        storage=InMemoryImageStorage(),
        notes=InMemoryNoteRepository(),
    )


def build_backend(
    provider: CloudProvider,
    session: SessionState | None = None,
    load_notes_on_sign_in: bool = True,
) -> Backend:
    """Build a backend bound to the running loop. Call inside a coroutine."""
    context = UpdateContext.running()
    return Backend(
        connect=lambda: provider,
        session=session or SessionState(context=context),
        context=context,
        load_notes_on_sign_in=load_notes_on_sign_in,
        call_timeout=5,
    )


@pytest.fixture(autouse=True)
def _propagate_app_logs() -> None:
    logging.getLogger("cloud_notes").propagate = True


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_anon_key="anon-key",
    )


@pytest.fixture
def provider() -> CloudProvider:
    return build_provider()


@pytest.fixture
def container(settings: Settings, provider: CloudProvider) -> AppContainer:
    return build_container(settings, connect=lambda: provider)
