"""Application factory and entry point.

Run with:
    uvicorn app:app --reload
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from api import router, set_store, ui_router
from store import SessionStore

DEFAULT_TITLE = "Chain Calculator"


def create_app(
    store: SessionStore | None = None,
    *,
    title: str = DEFAULT_TITLE,
    log_level: str = "INFO",
) -> FastAPI:
    """Build and return the FastAPI application.

    Accepts an optional store for testing; creates a fresh one if omitted.
    """
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if store is None:
        store = SessionStore()

    set_store(store)

    app = FastAPI(
        title=title,
        description=(
            "On-screen calculator that evaluates chained binary operations "
            "left to right. Each session holds one calculator; keypad presses "
            "return the formatted display and the expression trail."
        ),
        version="0.1.0",
    )
    app.include_router(router)
    app.include_router(ui_router)
    return app


# Default app instance for `uvicorn app:app`
app = create_app()
