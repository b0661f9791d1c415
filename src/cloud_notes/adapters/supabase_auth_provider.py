"""Supabase-backed authentication provider."""

import logging
import webbrowser
from collections.abc import Callable
from dataclasses import dataclass, field

from supabase import AuthError as SupabaseAuthError
from supabase import Client

from cloud_notes.domain.auth import AuthEvent
from cloud_notes.domain.errors import AuthError
from cloud_notes.services.backend import AuthProvider

logger = logging.getLogger(__name__)

_USER_DELETED = "USER_DELETED"


def _open_in_browser(url: str) -> None:
    webbrowser.open(url)


@dataclass
class SupabaseAuthProvider(AuthProvider):
    """Supabase implementation of the hosted sign-in flow.

    Supabase reports an expired session as a plain ``SIGNED_OUT``. A sign-out
    that was not requested through :meth:`sign_out` is therefore reported as
    :attr:`AuthEvent.SESSION_EXPIRED`.
    """

    client: Client
    oauth_provider: str = "github"
    redirect_url: str | None = None
    launcher: Callable[[str], None] = _open_in_browser
    _sign_out_requested: bool = field(default=False, init=False)

    def subscribe(self, handler: Callable[[AuthEvent], None]) -> Callable[[], None]:
        """Translate Supabase auth state changes into auth events."""

        def on_change(event: str, _session: object) -> None:
            translated = self._translate(str(event))
            if translated is None:
                logger.debug("Ignoring auth event %s", event)
                return
            handler(translated)

        subscription = self.client.auth.on_auth_state_change(on_change)
        return subscription.unsubscribe

    def fetch_session(self) -> bool:
        """Return whether a stored session is present."""
        try:
            session = self.client.auth.get_session()
        except SupabaseAuthError as exc:
            raise AuthError(f"Fetch auth session failed: {exc}") from exc
        return session is not None

    def sign_in(self) -> None:
        """Request the hosted sign-in URL and open it."""
        params: dict[str, object] = {"provider": self.oauth_provider}
        if self.redirect_url:
            params["options"] = {"redirect_to": self.redirect_url}
        try:
            response = self.client.auth.sign_in_with_oauth(params)
        except SupabaseAuthError as exc:
            raise AuthError(f"Sign in failed: {exc}") from exc
        if not response.url:
            raise AuthError("Sign in failed: no authorization URL returned")
        self.launcher(response.url)

    def complete_sign_in(self, code: str) -> None:
        """Exchange an authorization code for a session."""
        try:
            self.client.auth.exchange_code_for_session({"auth_code": code})
        except SupabaseAuthError as exc:
            raise AuthError(f"Sign in failed: {exc}") from exc

    def sign_out(self) -> None:
        """Sign out and clear the stored session."""
        self._sign_out_requested = True
        try:
            self.client.auth.sign_out()
        except SupabaseAuthError as exc:
            self._sign_out_requested = False
            raise AuthError(f"Sign out failed: {exc}") from exc

    def _translate(self, event: str) -> AuthEvent | None:
        if event == "SIGNED_IN":
            return AuthEvent.SIGNED_IN
        if event == _USER_DELETED:
            return AuthEvent.SIGNED_OUT
        if event == "SIGNED_OUT":
            requested = self._sign_out_requested
            self._sign_out_requested = False
            return AuthEvent.SIGNED_OUT if requested else AuthEvent.SESSION_EXPIRED
        return None
