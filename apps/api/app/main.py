from fastapi import FastAPI
import os
import random

from app.core.db import db_health, get_engine
from app.modules.battle.engine import DEFAULT_MAX_SPEED_REDRAWS
from app.modules.characters.store import CharacterStore

APP_VERSION = os.getenv("APP_VERSION", "0.1.0")
API_PREFIX = os.getenv("API_PREFIX", "/api")


def _battle_seed():
    raw = os.getenv("BATTLE_SEED")
    if raw is None or raw.strip() == "":
        return None
    return int(raw)


app = FastAPI(title="Neo Heroes Battle API", version=APP_VERSION)

# one store per process; tests swap in their own
app.state.store = CharacterStore(get_engine())
app.state.battle_rng = random.Random(_battle_seed())
app.state.battle_max_speed_redraws = int(os.getenv("BATTLE_MAX_SPEED_REDRAWS", str(DEFAULT_MAX_SPEED_REDRAWS)))

# === OBSERVABILITY FOUNDATIONS ===
# Contract locks:
# - /health keys: status, version, db, last_error_summary
# - X-Request-Id in/out (missing -> generated; always echoed back; also on errors)
# - Error envelope keys: error, message, request_id, details
import uuid
from typing import Any, Dict, Optional
from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.errors import DomainError
from app.core.observability import emit

_last_error: Optional[Dict[str, Any]] = None


def _err_envelope(error: str, message: str, request_id: Optional[str], details: Any, status_code: int):
    headers = {}
    if request_id:
        headers["X-Request-Id"] = request_id
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({
            "error": error,
            "message": message,
            "request_id": request_id,
            "details": details,
        }),
        headers=headers,
    )


@app.middleware("http")
async def _request_id_mw(request: Request, call_next):
    rid = request.headers.get("X-Request-Id") or uuid.uuid4().hex.upper()
    request.state.request_id = rid
    emit("info", "http.request.start", f"{request.method} {request.url.path}", rid, __name__)
    try:
        resp = await call_next(request)
    except Exception as e:
        emit("error", "http.request.exception", str(e), rid, __name__)
        raise
    resp.headers["X-Request-Id"] = rid
    emit("info", "http.request.end", f"{request.method} {request.url.path} -> {getattr(resp,'status_code',None)}", rid, __name__)
    return resp


@app.exception_handler(DomainError)
async def _domain_exc_handler(request: Request, exc: DomainError):
    rid = getattr(request.state, "request_id", None)
    emit("warning", "domain.error", exc.message, rid, __name__, error=exc.error)
    return _err_envelope(exc.error, exc.message, rid, exc.details, exc.status_code)


@app.exception_handler(StarletteHTTPException)
async def _http_exc_handler(request: Request, exc: StarletteHTTPException):
    rid = getattr(request.state, "request_id", None)
    return _err_envelope("http_error", str(exc.detail), rid, {"status_code": exc.status_code}, exc.status_code)


@app.exception_handler(RequestValidationError)
async def _validation_exc_handler(request: Request, exc: RequestValidationError):
    rid = getattr(request.state, "request_id", None)
    return _err_envelope("validation_error", "request validation failed", rid, exc.errors(), 422)


@app.exception_handler(Exception)
async def _unhandled_exc_handler(request: Request, exc: Exception):
    global _last_error
    rid = getattr(request.state, "request_id", None)
    _last_error = {"type": type(exc).__name__, "message": str(exc), "request_id": rid}
    return _err_envelope("internal_error", "internal server error", rid, {"type": type(exc).__name__}, 500)
# === END OBSERVABILITY FOUNDATIONS ===


from app.modules.battle.router import router as battle_router
from app.modules.characters.router import router as characters_router
from app.modules.jobs.router import router as jobs_router

app.include_router(characters_router, prefix=API_PREFIX)
app.include_router(battle_router, prefix=API_PREFIX)
app.include_router(jobs_router, prefix=API_PREFIX)


@app.get("/health")
def health(request: Request):
    # Contract keys are locked above
    return {
        'status': 'ok',
        'version': APP_VERSION,
        'db': db_health(request.app.state.store.engine),
        'last_error_summary': _last_error,
    }
