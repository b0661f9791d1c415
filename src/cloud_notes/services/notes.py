"""Presentation-side note actions with optimistic local updates."""

from collections.abc import Iterable
from dataclasses import dataclass
from uuid import uuid4

from cloud_notes.domain.notes import Note
from cloud_notes.domain.session import SessionState
from cloud_notes.services.backend import Backend


@dataclass
class NotesController:
    """Applies user actions to the session and forwards them to the backend.

    Local edits are applied immediately and are never rolled back when the
    matching remote call fails.
    """

    session: SessionState
    backend: Backend

    def create_note(
        self, name: str, description: str | None = None, image: bytes | None = None
    ) -> Note:
        """Create a note, store it remotely and append it to the session."""
        note = Note(id=str(uuid4()), name=name, description=description)
        if image is not None:
            note.image_name = str(uuid4())
            note.image = image
            self.backend.store_image(note.image_name, image)
        self.backend.create_note(note)
        self.session.append_note(note)
        return note

    def delete_note_at(self, index: int) -> Note:
        """Remove the note at ``index`` and delete it remotely."""
        note = self.session.remove_note_at(index)
        self.backend.delete_note(note)
        return note

    def delete_notes_at(self, indices: Iterable[int]) -> list[Note]:
        """Remove several notes by position, as a list swipe-delete does."""
        removed = [
            self.delete_note_at(index) for index in sorted(set(indices), reverse=True)
        ]
        removed.reverse()
        return removed

    def delete_note(self, note_id: str) -> Note | None:
        """Remove the note with ``note_id`` and delete it remotely."""
        note = self.session.remove_note(note_id)
        if note is not None:
            self.backend.delete_note(note)
        return note

    def sign_in(self) -> None:
        self.backend.sign_in()

    def complete_sign_in(self, code: str) -> None:
        self.backend.complete_sign_in(code)

    def sign_out(self) -> None:
        self.backend.sign_out()
