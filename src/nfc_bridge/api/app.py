"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from nfc_bridge.api import pages
from nfc_bridge.app_logging import configure_logging
from nfc_bridge.containers import AppContainer
from nfc_bridge.domain.catalog import Candidate, CommitResult, MediaKind
from nfc_bridge.domain.errors import (
    CatalogStoreError,
    MediaServerError,
    UserNotFoundError,
    ValidationError,
)
from nfc_bridge.domain.sessions import DispatchStatus, RegistryUpdate, SessionRef


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await app.state.container.startup()
        yield
        await app.state.container.close_resources()

    # Built-in docs routes would shadow trigger words such as "docs".
    app = FastAPI(
        lifespan=lifespan, docs_url=None, redoc_url=None, openapi_url=None
    )
    app.state.container = container

    @app.exception_handler(ValidationError)
    async def validation_error(_: Request, exc: ValidationError) -> HTMLResponse:
        logger.warning("Rejected request: %s", exc)
        return HTMLResponse(pages.message_page("Invalid Request", str(exc)), 400)

    @app.exception_handler(UserNotFoundError)
    async def user_not_found(_: Request, exc: UserNotFoundError) -> HTMLResponse:
        logger.error("Jellyfin user lookup failed: %s", exc)
        return HTMLResponse(pages.message_page("User Not Found", str(exc)), 404)

    @app.exception_handler(MediaServerError)
    async def media_server_error(
        request: Request, exc: MediaServerError
    ) -> HTMLResponse:
        logger.error(
            "Error communicating with Jellyfin API",
            exc_info=exc,
            extra={"path": request.url.path},
        )
        return HTMLResponse(
            pages.message_page(
                "Jellyfin Error", "Error connecting to Jellyfin. Check the server logs."
            ),
            500,
        )

    @app.exception_handler(CatalogStoreError)
    async def catalog_store_error(
        request: Request, exc: CatalogStoreError
    ) -> HTMLResponse:
        logger.error(
            "Catalog store failure", exc_info=exc, extra={"path": request.url.path}
        )
        return HTMLResponse(
            pages.message_page("Database Error", "Failed to update the catalog."), 500
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/", response_class=HTMLResponse)
    async def index(request: Request) -> HTMLResponse:
        """Main page with active devices and both catalogs."""
        state_container: AppContainer = request.app.state.container
        entries = {
            kind: await state_container.catalog_service.list_entries(kind)
            for kind in MediaKind
        }
        return HTMLResponse(
            pages.index_page(entries, state_container.registry.snapshot())
        )

    @app.get("/sessions", response_class=HTMLResponse)
    async def sessions(request: Request) -> HTMLResponse:
        """List connected devices so one can be selected per media kind."""
        state_container: AppContainer = request.app.state.container
        found = await state_container.device_service.list_sessions()
        return HTMLResponse(pages.sessions_page(found))

    @app.post("/search-movie", response_class=HTMLResponse)
    async def search_movie(request: Request) -> HTMLResponse:
        """Search the media server for movies."""
        return await _search(request, MediaKind.MOVIE)

    @app.post("/search-music", response_class=HTMLResponse)
    async def search_music(request: Request) -> HTMLResponse:
        """Search the media server for albums."""
        return await _search(request, MediaKind.ALBUM)

    @app.post("/add-movie")
    async def add_movie(request: Request) -> Response:
        """Bind a movie to a trigger word."""
        await _commit(request, MediaKind.MOVIE)
        return RedirectResponse("/", status_code=303)

    @app.post("/add-album")
    async def add_album(request: Request) -> Response:
        """Bind an album to a trigger word."""
        await _commit(request, MediaKind.ALBUM)
        return RedirectResponse("/", status_code=303)

    @app.post("/set-active-session")
    async def set_active_session(request: Request) -> Response:
        """Select the device that plays one media kind."""
        state_container: AppContainer = request.app.state.container
        form = await _read_form(request, "type", "sessionId", "deviceName", "client")
        kind = MediaKind.from_slot(form["type"])
        update = state_container.registry.select(
            kind,
            SessionRef(
                id=form["sessionId"],
                device_name=form["deviceName"],
                client_name=form["client"],
            ),
        )
        return _registry_response(update)

    @app.post("/clear-active-session/{slot}")
    async def clear_active_session(slot: str, request: Request) -> Response:
        """Clear the device selected for one media kind."""
        state_container: AppContainer = request.app.state.container
        kind = MediaKind.from_slot(slot)
        return _registry_response(state_container.registry.clear(kind))

    @app.post("/delete-movie/{entry_id}")
    async def delete_movie(entry_id: str, request: Request) -> Response:
        """Remove a movie binding."""
        return await _delete(request, MediaKind.MOVIE, entry_id)

    @app.post("/delete-album/{entry_id}")
    async def delete_album(entry_id: str, request: Request) -> Response:
        """Remove an album binding."""
        return await _delete(request, MediaKind.ALBUM, entry_id)

    # Registered last so the fixed admin paths above take precedence.
    @app.get("/{trigger_word}", response_class=HTMLResponse)
    async def trigger(trigger_word: str, request: Request) -> HTMLResponse:
        """Resolve a trigger word and start playback on the active device."""
        state_container: AppContainer = request.app.state.container
        resolved = await state_container.trigger_resolver.resolve(trigger_word)
        if resolved is None:
            logger.info("Unknown trigger word", extra={"trigger": trigger_word})
            return HTMLResponse(
                pages.trigger_not_found_page(trigger_word.lower()), 404
            )

        result = await state_container.playback_dispatcher.dispatch(
            resolved.entry, resolved.kind
        )
        if result.status is DispatchStatus.NO_ACTIVE_DEVICE:
            return HTMLResponse(pages.no_active_device_page(resolved.kind), 400)
        if result.status is DispatchStatus.UPSTREAM_FAILURE:
            return HTMLResponse(
                pages.message_page(
                    "Playback Error",
                    "Failed to send playback command. You can close this window.",
                ),
                500,
            )
        return HTMLResponse(pages.playback_sent_page())

    return app


async def _search(request: Request, kind: MediaKind) -> HTMLResponse:
    state_container: AppContainer = request.app.state.container
    field = pages.SEARCH_FIELDS[kind]
    form = await _read_form(request, field)
    candidates = await state_container.catalog_service.search(kind, form[field])
    return HTMLResponse(pages.search_results_page(kind, form[field], candidates))


async def _commit(request: Request, kind: MediaKind) -> CommitResult:
    state_container: AppContainer = request.app.state.container
    name_field = pages.NAME_FIELDS[kind]
    form = await _read_form(request, name_field, "jellyfinId", "trigger")
    return await state_container.catalog_service.commit(
        kind,
        Candidate(display_name=form[name_field], external_item_id=form["jellyfinId"]),
        form["trigger"],
    )


async def _read_form(request: Request, *names: str) -> dict[str, str]:
    """Return required form fields, raising ValidationError for missing ones."""
    form = await request.form()
    values = {}
    for name in names:
        raw = form.get(name)
        values[name] = raw.strip() if isinstance(raw, str) else ""
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise ValidationError(f"Missing required field(s): {', '.join(missing)}")
    return values


def _registry_response(update: RegistryUpdate) -> Response:
    if update.warning:
        return HTMLResponse(
            pages.message_page("Device Selection Not Saved", update.warning)
        )
    return RedirectResponse("/", status_code=303)


async def _delete(request: Request, kind: MediaKind, entry_id: str) -> Response:
    state_container: AppContainer = request.app.state.container
    # Ids that are not numbers cannot match a row, so there is nothing to delete.
    if entry_id.isdigit():
        await state_container.catalog_service.delete(kind, int(entry_id))
    return RedirectResponse("/", status_code=303)
