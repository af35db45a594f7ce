"""FastAPI endpoints for calculator sessions.

Routes
------
GET    /keypad                      Keypad layout
POST   /sessions                    Create a session
GET    /sessions                    List sessions
GET    /sessions/{id}               Current display of a session
POST   /sessions/{id}/events        Apply a tagged event
POST   /sessions/{id}/keys/{name}   Press a keypad key
DELETE /sessions/{id}               Delete a session

GET    /                            New session, redirected to its page
GET    /ui/{id}                     HTML keypad and display
POST   /ui/{id}/keys/{name}         Press a key from the page
"""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from keypad import KEYPAD, UnknownKeyError, render
from models import EventRequest, KeypadResponse, SessionListResponse, SessionView
from store import SessionNotFoundError, SessionStore, StateInvariantError

router = APIRouter(tags=["calculator"])
ui_router = APIRouter(tags=["ui"], include_in_schema=False)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

# The store instance is injected by the app factory (see app.py).
_store: SessionStore | None = None


def set_store(store: SessionStore) -> None:
    """Inject the store instance. Called once at app startup."""
    global _store
    _store = store


def get_store() -> SessionStore:
    assert _store is not None, "Store not initialized"
    return _store


# ---------------------------------------------------------------------------
# Error helpers
# ---------------------------------------------------------------------------

def _not_found(e: SessionNotFoundError | UnknownKeyError) -> HTTPException:
    return HTTPException(status_code=404, detail=e.args[0])


def _invariant_error(e: StateInvariantError) -> HTTPException:
    return HTTPException(status_code=500, detail=str(e))


# ---------------------------------------------------------------------------
# JSON API
# ---------------------------------------------------------------------------

@router.get("/keypad", response_model=KeypadResponse)
def get_keypad() -> KeypadResponse:
    return KeypadResponse.default()


@router.post("/sessions", response_model=SessionView, status_code=201)
def create_session() -> SessionView:
    """Create a calculator in its initial state."""
    return SessionView.from_session(get_store().create())


@router.get("/sessions", response_model=SessionListResponse)
def list_sessions(
    offset: int = Query(default=0, ge=0, description="Pagination offset"),
    limit: int = Query(default=50, ge=1, le=200, description="Pagination limit"),
) -> SessionListResponse:
    store = get_store()
    items = [SessionView.from_session(s) for s in store.list(offset=offset, limit=limit)]
    return SessionListResponse(items=items, total=store.count())


@router.get("/sessions/{session_id}", response_model=SessionView)
def get_session(session_id: str) -> SessionView:
    try:
        return SessionView.from_session(get_store().get(session_id))
    except SessionNotFoundError as e:
        raise _not_found(e)


@router.post("/sessions/{session_id}/events", response_model=SessionView)
def post_event(session_id: str, payload: EventRequest) -> SessionView:
    """Apply one event and return the re-rendered display."""
    try:
        session = get_store().dispatch(session_id, payload.event.to_event())
    except SessionNotFoundError as e:
        raise _not_found(e)
    except StateInvariantError as e:
        raise _invariant_error(e) from e
    return SessionView.from_session(session)


@router.post("/sessions/{session_id}/keys/{key_name}", response_model=SessionView)
def press_key(session_id: str, key_name: str) -> SessionView:
    try:
        session = get_store().press(session_id, key_name)
    except (SessionNotFoundError, UnknownKeyError) as e:
        raise _not_found(e)
    except StateInvariantError as e:
        raise _invariant_error(e) from e
    return SessionView.from_session(session)


@router.delete("/sessions/{session_id}", response_model=SessionView)
def delete_session(session_id: str) -> SessionView:
    try:
        return SessionView.from_session(get_store().delete(session_id))
    except SessionNotFoundError as e:
        raise _not_found(e)


# ---------------------------------------------------------------------------
# HTML keypad
# ---------------------------------------------------------------------------

@ui_router.get("/")
def index() -> RedirectResponse:
    session = get_store().create()
    return RedirectResponse(url=f"/ui/{session.id}", status_code=303)


@ui_router.get("/ui/{session_id}", response_class=HTMLResponse)
def calculator_page(request: Request, session_id: str) -> HTMLResponse:
    try:
        session = get_store().get(session_id)
    except SessionNotFoundError as e:
        raise _not_found(e)
    return templates.TemplateResponse(
        request,
        "calculator.html",
        {"session_id": session.id, "view": render(session.state), "keypad": KEYPAD},
    )


@ui_router.post("/ui/{session_id}/keys/{key_name}")
def press_key_from_page(session_id: str, key_name: str) -> RedirectResponse:
    try:
        get_store().press(session_id, key_name)
    except (SessionNotFoundError, UnknownKeyError) as e:
        raise _not_found(e)
    except StateInvariantError as e:
        raise _invariant_error(e) from e
    return RedirectResponse(url=f"/ui/{session_id}", status_code=303)
