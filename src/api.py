"""FastAPI app for the Gantt client: full load and incremental sync."""

import logging
import os
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

# Ensure src is on path so models/db resolve when run as src.api from repo root
_src = Path(__file__).resolve().parent
if str(_src) not in sys.path:
    sys.path.insert(0, str(_src))

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import Session

import db
import load_service
import sync_service
from schemas import ErrorResponse, LoadResponse, SyncRequest, SyncResponse

CORS_ORIGINS = [
    o.strip() for o in os.environ.get("CORS_ORIGINS", "http://localhost:5173").split(",") if o.strip()
]

app = FastAPI(title="Gantt Sync API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup() -> None:
    db.init_db()


@app.exception_handler(Exception)
def log_unhandled_exception(request: Request, exc: Exception):
    """Log every unhandled exception so 500s show up in the terminal."""
    logger.exception("Unhandled exception for %s %s: %s", request.method, request.url.path, exc)
    return _error_response("Internal Server Error", status_code=500)


def _error_response(message: str, status_code: int) -> JSONResponse:
    body = ErrorResponse(message=message).model_dump(mode="json", by_alias=True)
    return JSONResponse(body, status_code=status_code)


def get_session():
    """Dependency that yields a DB session. Services commit per item; session is closed on exit."""
    session = Session(db.get_engine())
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@app.get("/api/load", response_model=LoadResponse, response_model_exclude_none=True)
def load(request: Request, session: Session = Depends(get_session)):
    """Return the whole task tree as ordered flat rows. Echoes the x-request-id header."""
    try:
        return load_service.load(session, request_id=request.headers.get("x-request-id"))
    except Exception:
        logger.exception("Error loading data")
        return _error_response(load_service.LOAD_ERROR_MESSAGE, status_code=500)


@app.post("/api/sync", response_model=SyncResponse, response_model_exclude_none=True)
def sync(body: SyncRequest, session: Session = Depends(get_session)) -> SyncResponse:
    """Apply added/updated/removed tasks. Failures come back as success=false with status 200."""
    return sync_service.sync(session, body)


def main() -> None:
    import uvicorn

    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    host = os.environ.get("HOST", "127.0.0.1")
    port = int(os.environ.get("PORT", "1337"))
    logger.info("Starting Gantt Sync API on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
