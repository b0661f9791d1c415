"""FastAPI application factory."""

import base64
import binascii
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, Response, status

from cloud_notes.api.models import NoteCreate, NoteOut, SessionOut
from cloud_notes.app_logging import configure_logging
from cloud_notes.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        state_container.update_context.attach()
        state_container.backend.initialize()
        yield
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    def _require_signed_in(state_container: AppContainer) -> None:
        if not state_container.session.is_signed_in:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED, detail="Sign in required"
            )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/session")
    async def read_session(request: Request) -> SessionOut:
        """Return the sign-in status and current notes."""
        state_container: AppContainer = request.app.state.container
        session = state_container.session
        return SessionOut(
            is_signed_in=session.is_signed_in,
            notes=[NoteOut.from_note(note) for note in session.notes],
        )

    @app.post("/auth/sign-in", status_code=status.HTTP_202_ACCEPTED)
    async def sign_in(request: Request) -> dict[str, str]:
        """Start the hosted sign-in flow."""
        state_container: AppContainer = request.app.state.container
        state_container.notes_controller.sign_in()
        return {"status": "pending"}

    @app.get("/auth/callback")
    async def auth_callback(
        request: Request, code: str | None = None
    ) -> dict[str, str]:
        """Receive the authorization code from the hosted sign-in page."""
        if not code:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Missing code"
            )
        state_container: AppContainer = request.app.state.container
        state_container.notes_controller.complete_sign_in(code)
        return {"status": "ok"}

    @app.post("/auth/sign-out", status_code=status.HTTP_202_ACCEPTED)
    async def sign_out(request: Request) -> dict[str, str]:
        """Sign the current user out."""
        state_container: AppContainer = request.app.state.container
        state_container.notes_controller.sign_out()
        return {"status": "pending"}

    @app.post("/notes", status_code=status.HTTP_201_CREATED)
    async def create_note(payload: NoteCreate, request: Request) -> NoteOut:
        """Create a note; it is listed immediately."""
        state_container: AppContainer = request.app.state.container
        _require_signed_in(state_container)
        image: bytes | None = None
        if payload.image_base64:
            try:
                image = base64.b64decode(payload.image_base64, validate=True)
            except binascii.Error as exc:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Invalid image encoding",
                ) from exc
        note = state_container.notes_controller.create_note(
            name=payload.name,
            description=payload.description,
            image=image,
        )
        logger.info("Created note %s", note.id)
        return NoteOut.from_note(note)

    @app.delete("/notes/{note_id}")
    async def delete_note(note_id: str, request: Request) -> NoteOut:
        """Delete a note; it disappears immediately."""
        state_container: AppContainer = request.app.state.container
        _require_signed_in(state_container)
        note = state_container.notes_controller.delete_note(note_id)
        if note is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        logger.info("Deleted note %s", note.id)
        return NoteOut.from_note(note)

    @app.get("/notes/{note_id}/image")
    async def note_image(note_id: str, request: Request) -> Response:
        """Return the note picture once it has been loaded."""
        state_container: AppContainer = request.app.state.container
        note = state_container.session.find_note(note_id)
        if note is None or note.image is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return Response(
            content=note.image,
            media_type=state_container.settings.image_content_type,
        )

    return app
