"""Typed commands shared by the CLI and the HTTP server."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from .client import LinkedInClient
from .config import DEFAULT_JOB_LIMIT, MAX_JOB_LIMIT


class _Command(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class StatusCommand(_Command):
    command: Literal["status"] = "status"


class ConfigureCommand(_Command):
    command: Literal["configure"] = "configure"
    cookie: str = Field(min_length=1)


class GetProfileCommand(_Command):
    command: Literal["get_profile"] = "get_profile"
    username: str = Field(min_length=1)


class GetCompanyCommand(_Command):
    command: Literal["get_company"] = "get_company"
    company: str = Field(min_length=1)


class SearchJobsCommand(_Command):
    command: Literal["search_jobs"] = "search_jobs"
    query: str = Field(min_length=1)
    location: str | None = None
    limit: int = Field(DEFAULT_JOB_LIMIT, ge=1, le=MAX_JOB_LIMIT)


class GetJobCommand(_Command):
    command: Literal["get_job"] = "get_job"
    job_id: str = Field(min_length=1)


class SendInviteCommand(_Command):
    command: Literal["send_invite"] = "send_invite"
    urn: str
    message: str | None = None


class SendMessageCommand(_Command):
    command: Literal["send_message"] = "send_message"
    urn: str
    text: str = Field(min_length=1)


Command = Annotated[
    Union[
        StatusCommand,
        ConfigureCommand,
        GetProfileCommand,
        GetCompanyCommand,
        SearchJobsCommand,
        GetJobCommand,
        SendInviteCommand,
        SendMessageCommand,
    ],
    Field(discriminator="command"),
]

_COMMAND_ADAPTER: TypeAdapter[Command] = TypeAdapter(Command)


def parse_command(data: dict) -> Command:
    """Validate a loose argument map into a command; raises ``ValidationError``."""
    return _COMMAND_ADAPTER.validate_python(data)


async def execute(client: LinkedInClient, command: Command) -> dict:
    """Run *command* and return a JSON-ready result.

    ``LinkedInError`` propagates to the caller unchanged.
    """
    if isinstance(command, StatusCommand):
        auth = await client.verify_auth()
        return {
            "configured": client.session.is_configured,
            "status": client.session.status.value,
            **auth.to_json_dict(),
        }
    if isinstance(command, ConfigureCommand):
        await client.configure(command.cookie)
        auth = await client.verify_auth()
        return {"configured": True, **auth.to_json_dict()}
    if isinstance(command, GetProfileCommand):
        return (await client.get_profile(command.username)).to_json_dict()
    if isinstance(command, GetCompanyCommand):
        return (await client.get_company(command.company)).to_json_dict()
    if isinstance(command, SearchJobsCommand):
        jobs = await client.search_jobs(command.query, command.location, command.limit)
        return {
            "query": command.query,
            "location": command.location,
            "count": len(jobs),
            "jobs": [job.to_json_dict() for job in jobs],
        }
    if isinstance(command, GetJobCommand):
        return (await client.get_job(command.job_id)).to_json_dict()
    if isinstance(command, SendInviteCommand):
        return (await client.send_invite(command.urn, command.message)).to_json_dict()
    if isinstance(command, SendMessageCommand):
        return (await client.send_message(command.urn, command.text)).to_json_dict()
    raise TypeError(f"Unknown command: {command!r}")
