"""Supabase-backed image storage."""

from dataclasses import dataclass

from supabase import Client, StorageException

from cloud_notes.domain.errors import StorageError
from cloud_notes.services.backend import ImageStorage


@dataclass
class SupabaseImageStorage(ImageStorage):
    """Supabase Storage implementation for note images."""

    client: Client
    bucket: str = "images"
    content_type: str = "image/png"

    def put_object(self, key: str, payload: bytes) -> None:
        """Upload image bytes, replacing any object with the same key."""
        try:
            self.client.storage.from_(self.bucket).upload(
                path=key,
                file=payload,
                file_options={"content-type": self.content_type, "upsert": "true"},
            )
        except StorageException as exc:
            raise StorageError(f"Failed to store image {key}: {exc}") from exc

    def get_object(self, key: str) -> bytes:
        """Download the image bytes stored under ``key``."""
        try:
            return self.client.storage.from_(self.bucket).download(key)
        except StorageException as exc:
            raise StorageError(f"Failed to retrieve image {key}: {exc}") from exc
