"""Supabase client construction."""

from supabase import ClientOptions, create_client

from cloud_notes.adapters.supabase_auth_provider import SupabaseAuthProvider
from cloud_notes.adapters.supabase_image_storage import SupabaseImageStorage
from cloud_notes.adapters.supabase_note_repository import SupabaseNoteRepository
from cloud_notes.config import Settings
from cloud_notes.domain.errors import ConfigurationError
from cloud_notes.services.backend import CloudProvider


def connect_supabase(settings: Settings) -> CloudProvider:
    """Create a Supabase client and the provider services that share it."""
    try:
        client = create_client(
            settings.supabase_url,
            settings.supabase_anon_key,
            options=ClientOptions(flow_type="pkce"),
        )
    except Exception as exc:  # noqa: BLE001
        raise ConfigurationError(f"Could not configure Supabase: {exc}") from exc
    return CloudProvider(
        auth=SupabaseAuthProvider(
            client,
            oauth_provider=settings.oauth_provider,
            redirect_url=settings.oauth_redirect_url,
        ),
        storage=SupabaseImageStorage(
            client,
            bucket=settings.image_bucket,
            content_type=settings.image_content_type,
        ),
        notes=SupabaseNoteRepository(client, table=settings.notes_table),
    )
