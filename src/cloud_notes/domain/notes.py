"""Domain models for notes."""

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from cloud_notes.domain.observable import Listener, Observers


class ImageSource(Protocol):
    """Interface for asynchronous image retrieval."""

    def retrieve_image(self, key: str, completion: Callable[[bytes], None]) -> None:
        """Fetch the image stored under ``key`` and pass its bytes to completion."""


@dataclass(frozen=True)
class NoteData:
    """Represents a note record as stored by the data API."""

    id: str
    name: str
    description: str | None = None
    image: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, object]) -> "NoteData":
        """Build a record from a table row."""
        description = row.get("description")
        image = row.get("image")
        return cls(
            id=str(row["id"]),
            name=str(row["name"]),
            description=str(description) if description is not None else None,
            image=str(image) if image else None,
        )

    def to_row(self) -> dict[str, object]:
        """Return the table row for this record."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "image": self.image,
        }


@dataclass(eq=False)
class Note:
    """A note as displayed by the presentation layer.

    ``image`` holds the picture bytes once they are available. Notes built from a
    fetched record download their picture in the background; locally created notes
    carry it from the start.
    """

    id: str
    name: str
    description: str | None = None
    image_name: str | None = None
    image: bytes | None = field(default=None, repr=False)
    _data: NoteData | None = field(default=None, init=False, repr=False)
    _data_lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )
    _observers: Observers = field(default_factory=Observers, init=False, repr=False)

    @classmethod
    def from_data(cls, data: NoteData, images: ImageSource) -> "Note":
        """Build a note from a fetched record and start loading its image."""
        note = cls(
            id=data.id,
            name=data.name,
            description=data.description,
            image_name=data.image,
        )
        note._data = data
        if note.image_name:
            images.retrieve_image(note.image_name, note.set_image)
        return note

    @property
    def data(self) -> NoteData:
        """Return the wire record, building and caching it on first access."""
        if self._data is None:
            with self._data_lock:
                if self._data is None:
                    self._data = NoteData(
                        id=self.id,
                        name=self.name,
                        description=self.description,
                        image=self.image_name,
                    )
        return self._data

    def set_image(self, image: bytes) -> None:
        """Attach downloaded image bytes and notify observers."""
        self.image = image
        self._observers.notify(self, "image")

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Observe changes to this note."""
        return self._observers.subscribe(listener)
