"""FastAPI application: JSON routes over the typed commands."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from .auth.secret_store import FileSecretStore
from .client import LinkedInClient
from .commands import execute, parse_command
from .config import DEFAULT_JOB_LIMIT, HOST, LOG_DIR, LOG_FILE, LOG_RETENTION_DAYS, PORT, VERSION, ensure_dirs
from .errors import ErrorKind, LinkedInError

logger = logging.getLogger(__name__)

app = FastAPI(title="LinkLion", version=VERSION)

# Singletons, created on first use
_client: LinkedInClient | None = None
_store: FileSecretStore | None = None

ERROR_STATUS = {
    ErrorKind.not_authenticated: 401,
    ErrorKind.invalid_identifier: 400,
    ErrorKind.invalid_urn: 400,
    ErrorKind.security_challenge: 403,
    ErrorKind.record_not_found: 404,
    ErrorKind.rate_limited: 429,
    ErrorKind.invalid_response: 502,
    ErrorKind.http_error: 502,
    ErrorKind.parse_error: 502,
    ErrorKind.vision_unavailable: 503,
}


def _list_log_files() -> list[Path]:
    ensure_dirs()
    files = [p for p in LOG_DIR.glob("server.log*") if p.is_file()]
    return sorted(files, key=lambda p: p.stat().st_mtime, reverse=True)


def _cleanup_old_logs() -> None:
    cutoff_ts = (datetime.now() - timedelta(days=LOG_RETENTION_DAYS)).timestamp()
    for path in _list_log_files():
        if path.stat().st_mtime < cutoff_ts:
            try:
                path.unlink(missing_ok=True)
            except OSError:
                logger.debug("Failed to delete old log file: %s", path)


def _configure_logging() -> None:
    ensure_dirs()
    _cleanup_old_logs()
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)

    file_handler = TimedRotatingFileHandler(
        filename=str(LOG_FILE),
        when="midnight",
        interval=1,
        backupCount=LOG_RETENTION_DAYS,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)

    logging.basicConfig(level=logging.INFO, handlers=[stream_handler, file_handler], force=True)


def _get_store() -> FileSecretStore:
    global _store
    if _store is None:
        _store = FileSecretStore()
    return _store


def _get_client() -> LinkedInClient:
    global _client
    if _client is None:
        _client = LinkedInClient.from_env(_get_store().load())
    return _client


async def _dispatch(data: dict) -> dict:
    return await execute(_get_client(), parse_command(data))


# ── Error rendering ───────────────────────────────────────────────────────

@app.exception_handler(LinkedInError)
async def linkedin_error_handler(request: Request, exc: LinkedInError):
    logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(exc.to_dict(), status_code=ERROR_STATUS.get(exc.kind, 500))


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    errors = [
        {"field": ".".join(str(p) for p in e.get("loc", ())), "message": e.get("msg")}
        for e in exc.errors()
    ]
    return JSONResponse({"error": "invalid_arguments", "details": errors}, status_code=422)


# ── Session ───────────────────────────────────────────────────────────────

class ConfigureBody(BaseModel):
    cookie: str


@app.get("/api/status")
async def status():
    return await _dispatch({"command": "status"})


@app.post("/api/configure")
async def configure(body: ConfigureBody):
    result = await _dispatch({"command": "configure", "cookie": body.cookie})
    _get_store().save(body.cookie)
    return result


@app.post("/api/logout")
async def logout():
    global _client
    _get_store().delete()
    if _client is not None:
        await _client.aclose()
    _client = None
    return {"configured": False}


# ── Reads ─────────────────────────────────────────────────────────────────

@app.get("/api/profile")
async def get_profile(username: str = Query(..., description="Username or profile URL")):
    return await _dispatch({"command": "get_profile", "username": username})


@app.get("/api/company")
async def get_company(name: str = Query(..., description="Company slug or URL")):
    return await _dispatch({"command": "get_company", "company": name})


@app.get("/api/jobs")
async def search_jobs(query: str, location: str | None = None, limit: int = DEFAULT_JOB_LIMIT):
    return await _dispatch({"command": "search_jobs", "query": query, "location": location, "limit": limit})


@app.get("/api/jobs/{job_id}")
async def get_job(job_id: str):
    return await _dispatch({"command": "get_job", "job_id": job_id})


# ── Writes ────────────────────────────────────────────────────────────────

class InviteBody(BaseModel):
    urn: str
    message: str | None = None


class MessageBody(BaseModel):
    urn: str
    text: str


@app.post("/api/invite")
async def send_invite(body: InviteBody):
    return await _dispatch({"command": "send_invite", "urn": body.urn, "message": body.message})


@app.post("/api/message")
async def send_message(body: MessageBody):
    return await _dispatch({"command": "send_message", "urn": body.urn, "text": body.text})


# ── Generic command endpoint ──────────────────────────────────────────────

@app.post("/api/commands")
async def run_command(body: dict):
    """Run any command given as ``{"command": <name>, ...arguments}``."""
    result = await _dispatch(body)
    if body.get("command") == "configure":
        _get_store().save(body["cookie"])
    return result


# ── Logs ──────────────────────────────────────────────────────────────────

@app.get("/api/settings/logs")
async def get_log_settings():
    _cleanup_old_logs()
    files = _list_log_files()
    return {
        "retention_days": LOG_RETENTION_DAYS,
        "total_size_bytes": sum(p.stat().st_size for p in files),
        "files": [
            {
                "name": p.name,
                "size_bytes": p.stat().st_size,
                "modified_at": datetime.fromtimestamp(p.stat().st_mtime).astimezone().isoformat(),
            }
            for p in files
        ],
    }


# ── Entrypoint ────────────────────────────────────────────────────────────

def main():
    """Console entrypoint: start the API server."""
    _configure_logging()
    logger.info("Starting LinkLion %s at http://%s:%d", VERSION, HOST, PORT)
    uvicorn.run(app, host=HOST, port=PORT, log_level="info", log_config=None)
