"""Persistence for the session cookie, used by the CLI and server only."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Protocol

from ..config import SECRETS_DIR
from .session_manager import strip_cookie_prefix

logger = logging.getLogger(__name__)


class SecretStore(Protocol):
    def load(self) -> str | None: ...

    def save(self, token: str) -> None: ...

    def delete(self) -> None: ...


class FileSecretStore:
    """Keeps the bare ``li_at`` value in an owner-only file."""

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path else SECRETS_DIR / "li_at"

    def load(self) -> str | None:
        try:
            value = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        return value or None

    def save(self, token: str) -> None:
        value = strip_cookie_prefix(token)
        if not value:
            raise ValueError("Cookie value must not be empty")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(value)
        os.chmod(self.path, 0o600)
        logger.info("Saved cookie to %s", self.path)

    def delete(self) -> None:
        try:
            self.path.unlink()
            logger.info("Removed saved cookie")
        except FileNotFoundError:
            pass

    def has_token(self) -> bool:
        return self.load() is not None
