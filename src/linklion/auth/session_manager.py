"""Session cookie ownership and live health check."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import TYPE_CHECKING

from ..config import BASE_URL, COOKIE_NAME
from ..errors import ErrorKind, LinkedInError
from ..models import AuthStatus

if TYPE_CHECKING:
    from ..fetcher import HttpTransport

logger = logging.getLogger(__name__)

_COOKIE_PREFIX = f"{COOKIE_NAME}="


class SessionStatus(str, Enum):
    connected = "connected"
    expired = "expired"
    unknown = "unknown"


def strip_cookie_prefix(cookie: str) -> str:
    """Return the bare credential, accepting either ``value`` or ``li_at=value``."""
    value = cookie.strip()
    if value.startswith(_COOKIE_PREFIX):
        value = value[len(_COOKIE_PREFIX):]
    return value


class SessionManager:
    """Owns the ``li_at`` token for one client.

    Reads and writes of the token go through one asyncio lock, so a
    configure in progress can never interleave with a fetch reading the token.
    """

    def __init__(self, cookie: str | None = None) -> None:
        self._lock = asyncio.Lock()
        self._token: str | None = strip_cookie_prefix(cookie) or None if cookie else None
        self._last_probe_ok: bool | None = None

    @property
    def is_configured(self) -> bool:
        return self._token is not None

    @property
    def last_probe_ok(self) -> bool | None:
        return self._last_probe_ok

    @property
    def status(self) -> SessionStatus:
        if self._last_probe_ok is None:
            return SessionStatus.unknown
        return SessionStatus.connected if self._last_probe_ok else SessionStatus.expired

    async def configure(self, cookie: str) -> None:
        token = strip_cookie_prefix(cookie)
        if not token:
            raise LinkedInError.not_authenticated()
        async with self._lock:
            self._token = token
            self._last_probe_ok = None
        logger.info("LinkedIn session configured with cookie")

    async def token(self) -> str:
        async with self._lock:
            token = self._token
        if token is None:
            raise LinkedInError.not_authenticated()
        return token

    async def cookie_header(self) -> str:
        return f"{COOKIE_NAME}={await self.token()}"

    async def verify(self, transport: HttpTransport) -> AuthStatus:
        """Probe ``/feed/`` with the current cookie.

        A redirect to ``/login`` or ``/checkpoint`` means the cookie is no
        longer accepted.
        """
        from ..fetcher import BROWSER_HEADERS

        async with self._lock:
            token = self._token
        if token is None:
            return AuthStatus(valid=False, message="No cookie configured")

        headers = {**BROWSER_HEADERS, "Cookie": f"{COOKIE_NAME}={token}"}
        try:
            response = await transport.get(f"{BASE_URL}/feed/", headers=headers)
        except LinkedInError as exc:
            if exc.kind != ErrorKind.invalid_response:
                raise
            status = AuthStatus(valid=False, message=exc.message)
        else:
            path = response.path
            if "login" in path or "checkpoint" in path:
                status = AuthStatus(valid=False, message="Cookie expired or invalid")
            elif response.status == 200:
                status = AuthStatus(valid=True, message="Authenticated")
            else:
                status = AuthStatus(valid=False, message=f"HTTP {response.status}")

        async with self._lock:
            # Only record the probe if nobody swapped the cookie meanwhile.
            if self._token == token:
                self._last_probe_ok = status.valid
        logger.info("Session check: %s", status.message)
        return status
