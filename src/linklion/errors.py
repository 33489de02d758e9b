"""One error vocabulary shared by fetch, parse, vision and write paths."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    not_authenticated = "not_authenticated"
    invalid_identifier = "invalid_identifier"
    invalid_response = "invalid_response"
    http_error = "http_error"
    security_challenge = "security_challenge"
    parse_error = "parse_error"
    rate_limited = "rate_limited"
    record_not_found = "record_not_found"
    invalid_urn = "invalid_urn"
    vision_unavailable = "vision_unavailable"


# Failures the read path may hand over to the vision fallback.
FALLBACK_ELIGIBLE = frozenset(
    {
        ErrorKind.not_authenticated,
        ErrorKind.invalid_response,
        ErrorKind.http_error,
        ErrorKind.security_challenge,
        ErrorKind.parse_error,
    }
)


class LinkedInError(Exception):
    """A classified failure from any part of the client."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        status_code: int | None = None,
        value: str | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code
        self.value = value

    def __repr__(self) -> str:
        return f"LinkedInError({self.kind.value!r}, {self.message!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LinkedInError):
            return NotImplemented
        return (self.kind, self.message, self.status_code, self.value) == (
            other.kind,
            other.message,
            other.status_code,
            other.value,
        )

    __hash__ = Exception.__hash__

    @property
    def fallback_eligible(self) -> bool:
        return self.kind in FALLBACK_ELIGIBLE

    def to_dict(self) -> dict:
        data: dict = {"error": self.kind.value, "message": self.message}
        if self.status_code is not None:
            data["status_code"] = self.status_code
        if self.value is not None:
            data["value"] = self.value
        return data

    # ── Constructors ──────────────────────────────────────────────────────

    @classmethod
    def not_authenticated(cls) -> LinkedInError:
        return cls(
            ErrorKind.not_authenticated,
            "Not authenticated. Please configure with a valid li_at cookie.",
        )

    @classmethod
    def invalid_identifier(cls, raw: str, what: str = "identifier") -> LinkedInError:
        return cls(ErrorKind.invalid_identifier, f"Invalid {what}: {raw}", value=raw)

    @classmethod
    def invalid_argument(cls, name: str, raw: object, expected: str) -> LinkedInError:
        """Out-of-range or empty call argument; reported as ``invalid_identifier``."""
        return cls(
            ErrorKind.invalid_identifier,
            f"Invalid {name}: {raw!r} ({expected})",
            value="" if raw is None else str(raw),
        )

    @classmethod
    def invalid_response(cls, detail: str | None = None) -> LinkedInError:
        message = "Invalid response from LinkedIn"
        if detail:
            message = f"{message}: {detail}"
        return cls(ErrorKind.invalid_response, message)

    @classmethod
    def http_error(cls, code: int) -> LinkedInError:
        return cls(ErrorKind.http_error, f"HTTP error: {code}", status_code=code)

    @classmethod
    def security_challenge(cls) -> LinkedInError:
        return cls(
            ErrorKind.security_challenge,
            "LinkedIn requires a security challenge. Please complete it in a browser.",
        )

    @classmethod
    def parse_error(cls, reason: str) -> LinkedInError:
        return cls(ErrorKind.parse_error, f"Failed to parse response: {reason}")

    @classmethod
    def rate_limited(cls) -> LinkedInError:
        return cls(
            ErrorKind.rate_limited,
            "Rate limited by LinkedIn. Please wait before retrying.",
            status_code=429,
        )

    @classmethod
    def record_not_found(cls, what: str = "Record") -> LinkedInError:
        return cls(ErrorKind.record_not_found, f"{what} not found")

    @classmethod
    def invalid_urn(cls, value: str) -> LinkedInError:
        return cls(ErrorKind.invalid_urn, f"Invalid URN: {value!r}", value=value)

    @classmethod
    def vision_unavailable(cls, detail: str | None = None) -> LinkedInError:
        message = "Vision fallback unavailable"
        if detail:
            message = f"{message}: {detail}"
        return cls(ErrorKind.vision_unavailable, message)
