"""HTML pages for the admin UI and trigger responses."""

from html import escape

from nfc_bridge.domain.catalog import Candidate, CatalogEntry, MediaKind
from nfc_bridge.domain.sessions import PlaybackSession, SessionRef

_STYLE = """
      body { font-family: ui-sans-serif, system-ui, sans-serif; margin: 2rem; }
      .container { max-width: 900px; margin: auto; }
      table { width: 100%; border-collapse: collapse; margin-top: 1rem; }
      th, td { padding: 0.6rem; border: 1px solid #ddd; text-align: left; }
      form { display: inline; margin: 0; }
      button { padding: 0.4rem 0.8rem; }
      .bar { background: #eee; padding: 1rem; margin-bottom: 1rem; }
      .none { font-style: italic; color: #6c757d; }
"""

SEARCH_FIELDS = {MediaKind.MOVIE: "movieName", MediaKind.ALBUM: "albumName"}
_SEARCH_PATHS = {MediaKind.MOVIE: "/search-movie", MediaKind.ALBUM: "/search-music"}
_ADD_PATHS = {MediaKind.MOVIE: "/add-movie", MediaKind.ALBUM: "/add-album"}
_DELETE_PATHS = {MediaKind.MOVIE: "/delete-movie", MediaKind.ALBUM: "/delete-album"}
NAME_FIELDS = {MediaKind.MOVIE: "movie", MediaKind.ALBUM: "album"}


def page(title: str, body: str) -> str:
    """Wrap body markup in a complete HTML document."""
    return (
        '<!doctype html>\n<html lang="en">\n  <head>\n    <meta charset="utf-8" />\n'
        f"    <title>{escape(title)}</title>\n    <style>{_STYLE}    </style>\n"
        f'  </head>\n  <body>\n    <div class="container">\n{body}\n'
        "    </div>\n  </body>\n</html>\n"
    )


def message_page(title: str, message: str) -> str:
    """Render a short page with a heading, a message and a link home."""
    return page(
        title,
        f"<h1>{escape(title)}</h1><p>{escape(message)}</p>"
        '<p><a href="/">Back to main page</a></p>',
    )


def playback_sent_page() -> str:
    return page(
        "Command Sent",
        "<p>Playback command sent. This window will now close.</p>"
        "<script>window.close();</script>",
    )


def trigger_not_found_page(trigger_word: str) -> str:
    return page(
        "Playback Error",
        "<h1>Playback Error</h1><p>No item found with the trigger word: "
        f"<strong>{escape(trigger_word)}</strong></p>",
    )


def no_active_device_page(kind: MediaKind) -> str:
    slot = escape(kind.session_slot)
    return page(
        "Playback Error",
        f"<h1>Playback Error</h1><p>No active <strong>{slot}</strong> device "
        'has been selected.</p><p>Please go to the <a href="/sessions">sessions '
        f"page</a> and select a device for {slot} playback.</p>",
    )


def index_page(
    entries: dict[MediaKind, list[CatalogEntry]],
    active: dict[MediaKind, SessionRef | None],
) -> str:
    """Render the main page with active devices and both catalogs."""
    bars = "".join(_active_bar(kind, active.get(kind)) for kind in MediaKind)
    sections = "".join(
        _catalog_section(kind, entries.get(kind, [])) for kind in MediaKind
    )
    return page(
        "Jellyfin NFC Bridge",
        '<h1>Jellyfin NFC Bridge</h1><p><a href="/sessions">'
        f"<button>Change Active Device</button></a></p>{bars}{sections}",
    )


def sessions_page(sessions: list[PlaybackSession]) -> str:
    """Render connected sessions with buttons to select them per kind."""
    rows = "".join(_session_row(session) for session in sessions)
    if not rows:
        rows = '<tr><td colspan="5">No active sessions found.</td></tr>'
    return page(
        "Active Jellyfin Sessions",
        '<h1>Active Jellyfin Sessions</h1><p><a href="/">Back to main page</a></p>'
        "<table><thead><tr><th>Client</th><th>Device Name</th><th>User</th>"
        f"<th>Session ID</th><th>Action</th></tr></thead><tbody>{rows}</tbody></table>",
    )


def search_results_page(
    kind: MediaKind, query: str, candidates: list[Candidate]
) -> str:
    """Render search candidates, each with a form to bind a trigger word."""
    if not candidates:
        return page(
            "Search Results",
            f"<h2>No results found for &quot;{escape(query)}&quot;.</h2>"
            '<a href="/">Go back</a>',
        )
    items = "<hr>".join(_candidate_form(kind, candidate) for candidate in candidates)
    return page(
        "Search Results",
        f"<h2>Search Results for &quot;{escape(query)}&quot;</h2>{items}"
        '<p><a href="/">Cancel and Go Back</a></p>',
    )


def _active_bar(kind: MediaKind, ref: SessionRef | None) -> str:
    slot = kind.session_slot
    title = slot.capitalize()
    if ref is None:
        return (
            f'<div class="bar">Active <strong>{title}</strong> Device: '
            '<span class="none">None selected</span></div>'
        )
    return (
        f'<div class="bar">Active <strong>{title}</strong> Device: '
        f"<strong>{escape(ref.device_name)}</strong> ({escape(ref.client_name)}) "
        f'<form action="/clear-active-session/{slot}" method="post">'
        "<button>Clear</button></form></div>"
    )


def _catalog_section(kind: MediaKind, entries: list[CatalogEntry]) -> str:
    heading = "Movies" if kind is MediaKind.MOVIE else "Albums"
    rows = "".join(
        f"<tr><td>{escape(entry.display_name)}</td>"
        f"<td>{escape(entry.trigger_word)}</td>"
        f"<td>{escape(entry.external_item_id)}</td>"
        f'<td><form action="{_DELETE_PATHS[kind]}/{entry.id}" method="post">'
        "<button>Delete</button></form></td></tr>"
        for entry in entries
    )
    return (
        f"<h2>{heading}</h2>"
        f'<form action="{_SEARCH_PATHS[kind]}" method="post">'
        f'<input type="text" name="{SEARCH_FIELDS[kind]}" required>'
        f"<button>Add {kind.capitalize()}</button></form>"
        f"<table><thead><tr><th>{kind.capitalize()}</th><th>Trigger</th>"
        "<th>JellyfinID</th><th>Action</th></tr></thead>"
        f"<tbody>{rows}</tbody></table>"
    )


def _session_row(session: PlaybackSession) -> str:
    hidden = (
        f'<input type="hidden" name="sessionId" value="{escape(session.id)}">'
        f'<input type="hidden" name="deviceName" value="{escape(session.device_name)}">'
        f'<input type="hidden" name="client" value="{escape(session.client_name)}">'
    )
    buttons = "".join(
        f'<form action="/set-active-session" method="post">{hidden}'
        f'<input type="hidden" name="type" value="{kind.session_slot}">'
        f"<button>For {kind.session_slot.capitalize()}</button></form>"
        for kind in MediaKind
    )
    return (
        f"<tr><td>{escape(session.client_name)}</td>"
        f"<td>{escape(session.device_name)}</td>"
        f"<td>{escape(session.user_name)}</td>"
        f"<td><code>{escape(session.id)}</code></td><td>{buttons}</td></tr>"
    )


def _candidate_form(kind: MediaKind, candidate: Candidate) -> str:
    name = escape(candidate.display_name)
    item_id = escape(candidate.external_item_id)
    return (
        f"<div><h3>{name}</h3>"
        f"<p><strong>JellyfinID:</strong> <code>{item_id}</code></p>"
        f'<form action="{_ADD_PATHS[kind]}" method="post">'
        f'<input type="hidden" name="{NAME_FIELDS[kind]}" value="{name}">'
        f'<input type="hidden" name="jellyfinId" value="{item_id}">'
        f'<label for="trigger-{item_id}">Trigger Word:</label> '
        f'<input type="text" id="trigger-{item_id}" name="trigger" required>'
        "<button>Add to Database</button></form></div>"
    )
