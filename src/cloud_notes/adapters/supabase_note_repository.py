"""Supabase-backed note repository."""

from dataclasses import dataclass

from supabase import Client, PostgrestAPIError

from cloud_notes.domain.errors import DataError
from cloud_notes.domain.notes import NoteData
from cloud_notes.services.backend import NoteRepository


@dataclass
class SupabaseNoteRepository(NoteRepository):
    """Supabase implementation for note records."""

    client: Client
    table: str = "notes"

    def create_note(self, data: NoteData) -> None:
        """Insert a note row."""
        try:
            response = self.client.table(self.table).insert(data.to_row()).execute()
        except PostgrestAPIError as exc:
            raise DataError(f"Failed to create note {data.id}: {exc}") from exc
        if not response.data:
            raise DataError(f"Failed to create note {data.id}")

    def delete_note(self, data: NoteData) -> None:
        """Delete the row with the note's id."""
        try:
            self.client.table(self.table).delete().eq("id", data.id).execute()
        except PostgrestAPIError as exc:
            raise DataError(f"Failed to delete note {data.id}: {exc}") from exc

    def list_notes(self) -> list[NoteData]:
        """Return every note row."""
        try:
            response = (
                self.client.table(self.table)
                .select("id, name, description, image")
                .execute()
            )
        except PostgrestAPIError as exc:
            raise DataError(f"Failed to list notes: {exc}") from exc
        return [NoteData.from_row(row) for row in response.data or []]
