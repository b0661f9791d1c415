"""Process-wide session state."""

from collections.abc import Callable, Iterable

from cloud_notes.domain.notes import Note
from cloud_notes.domain.observable import Listener, Observers
from cloud_notes.update_context import UpdateContext


class SessionState:
    """Sign-in status and the current notes, observed by the presentation layer.

    When bound to an update context every mutation must happen on it; writes from
    anywhere else raise ``RuntimeError``.
    """

    def __init__(
        self,
        is_signed_in: bool = False,
        notes: Iterable[Note] = (),
        context: UpdateContext | None = None,
    ) -> None:
        self._is_signed_in = is_signed_in
        self._notes: list[Note] = list(notes)
        self._context = context
        self._observers = Observers()

    @property
    def is_signed_in(self) -> bool:
        return self._is_signed_in

    @property
    def notes(self) -> tuple[Note, ...]:
        return tuple(self._notes)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Observe changes; listeners receive ``(state, field_name)``."""
        return self._observers.subscribe(listener)

    def find_note(self, note_id: str) -> Note | None:
        """Return the note with ``note_id``, if present."""
        for note in self._notes:
            if note.id == note_id:
                return note
        return None

    def set_signed_in(self, status: bool) -> bool:
        """Update the sign-in status and return whether it changed."""
        self._check_writer()
        if self._is_signed_in == status:
            return False
        self._is_signed_in = status
        self._observers.notify(self, "is_signed_in")
        return True

    def append_note(self, note: Note) -> None:
        """Add a note at the end of the list."""
        self._check_writer()
        self._notes.append(note)
        self._observers.notify(self, "notes")

    def remove_note_at(self, index: int) -> Note:
        """Remove and return the note at ``index``."""
        self._check_writer()
        note = self._notes.pop(index)
        self._observers.notify(self, "notes")
        return note

    def remove_note(self, note_id: str) -> Note | None:
        """Remove and return the note with ``note_id``, if present."""
        self._check_writer()
        for index, note in enumerate(self._notes):
            if note.id == note_id:
                del self._notes[index]
                self._observers.notify(self, "notes")
                return note
        return None

    def replace_notes(self, notes: Iterable[Note]) -> None:
        """Replace the whole list of notes."""
        self._check_writer()
        self._notes = list(notes)
        self._observers.notify(self, "notes")

    def _check_writer(self) -> None:
        if self._context is not None and not self._context.is_current():
            raise RuntimeError("Session state mutated outside its update context")
