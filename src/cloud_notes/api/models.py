"""Pydantic models for the notes API."""

from pydantic import BaseModel, Field

from cloud_notes.domain.notes import Note


class NoteCreate(BaseModel):
    """Payload for creating a note."""

    name: str = Field(min_length=1)
    description: str | None = None
    image_base64: str | None = None


class NoteOut(BaseModel):
    """Note as returned to clients."""

    id: str
    name: str
    description: str | None = None
    image_name: str | None = None
    has_image: bool = False

    @classmethod
    def from_note(cls, note: Note) -> "NoteOut":
        return cls(
            id=note.id,
            name=note.name,
            description=note.description,
            image_name=note.image_name,
            has_image=note.image is not None,
        )


class SessionOut(BaseModel):
    """Current sign-in status and notes."""

    is_signed_in: bool
    notes: list[NoteOut]
