"""Command-line interface: linklion auth|status|profile|company|jobs|job|invite|message."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from pydantic import ValidationError

from .auth.secret_store import FileSecretStore
from .client import LinkedInClient
from .commands import (
    GetCompanyCommand,
    GetJobCommand,
    GetProfileCommand,
    SearchJobsCommand,
    SendInviteCommand,
    SendMessageCommand,
    StatusCommand,
    execute,
    parse_command,
)
from .config import DEFAULT_JOB_LIMIT, VERSION, ensure_dirs
from .errors import LinkedInError

COOKIE_HELP = """\
To get your li_at cookie:
  1. Sign in to linkedin.com in your browser
  2. Open Developer Tools (F12)
  3. Application > Cookies > https://www.linkedin.com
  4. Copy the value of the 'li_at' cookie"""


def _fail(message: str) -> int:
    print(message, file=sys.stderr)
    return 1


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


# ── Renderers ─────────────────────────────────────────────────────────────

def _render_status(data: dict) -> None:
    if data.get("valid"):
        print("Authenticated")
    else:
        print(f"Not authenticated: {data.get('message')}")
        if not data.get("configured"):
            print("  Run `linklion auth` to configure")


def _render_profile(data: dict) -> None:
    print(f"\n{data.get('name') or '(no name)'}")
    for key in ("headline", "location"):
        if data.get(key):
            print(f"   {data[key]}")
    if data.get("openToWork"):
        print("   Open to work")
    if data.get("connectionCount"):
        print(f"   {data['connectionCount']} connections")
    if data.get("about"):
        print("\nAbout:")
        print(f"   {data['about'][:500]}")
    if data.get("experiences"):
        print("\nExperience:")
        for exp in data["experiences"][:5]:
            line = f"   - {exp['title']}"
            if exp.get("company"):
                line += f" at {exp['company']}"
            print(line)
            if exp.get("duration"):
                print(f"     {exp['duration']}")
    if data.get("educations"):
        print("\nEducation:")
        for edu in data["educations"][:3]:
            line = f"   - {edu['institution']}"
            if edu.get("degree"):
                line += f", {edu['degree']}"
            print(line)
    if data.get("skills"):
        print("\nSkills:")
        print(f"   {', '.join(data['skills'][:10])}")
    print(f"\n   https://www.linkedin.com/in/{data['username']}/\n")


def _render_company(data: dict) -> None:
    print(f"\n{data.get('name') or '(no name)'}")
    for key in ("tagline", "industry", "headquarters", "employeeCount", "website"):
        if data.get(key):
            print(f"   {data[key]}")
    if data.get("about"):
        print("\nAbout:")
        print(f"   {data['about'][:500]}")
    if data.get("specialties"):
        print("\nSpecialties:")
        print(f"   {', '.join(data['specialties'])}")
    print(f"\n   https://www.linkedin.com/company/{data['slug']}/\n")


def _render_job_line(job: dict, index: int | None = None) -> None:
    prefix = f"{index}. " if index is not None else ""
    print(f"{prefix}{job.get('title') or '(untitled)'}")
    if job.get("company"):
        print(f"   {job['company']}")
    for key in ("location", "salary", "postedDate"):
        if job.get(key):
            print(f"   {job[key]}")
    if job.get("isEasyApply"):
        print("   Easy Apply")
    print(f"   {job.get('jobURL')}")


def _render_jobs(data: dict) -> None:
    print(f"\nFound {data['count']} jobs for '{data['query']}'")
    if data.get("location"):
        print(f"   Location: {data['location']}")
    print("")
    for i, job in enumerate(data["jobs"], 1):
        _render_job_line(job, i)
        print("")


def _render_job(data: dict) -> None:
    print("")
    _render_job_line(data)
    for key, label in (
        ("workplaceType", "Workplace"),
        ("employmentType", "Type"),
        ("experienceLevel", "Level"),
        ("applicantCount", "Applicants"),
    ):
        if data.get(key):
            print(f"   {label}: {data[key]}")
    if data.get("skills"):
        print(f"   Skills: {', '.join(data['skills'])}")
    if data.get("description"):
        print("\nDescription:")
        print(f"   {data['description'][:1500]}")
    print("")


def _render_write(data: dict) -> None:
    print(f"{data.get('message') or 'Done'} (HTTP {data.get('statusCode')})")


_RENDERERS = {
    StatusCommand: _render_status,
    GetProfileCommand: _render_profile,
    GetCompanyCommand: _render_company,
    SearchJobsCommand: _render_jobs,
    GetJobCommand: _render_job,
    SendInviteCommand: _render_write,
    SendMessageCommand: _render_write,
}


# ── Commands ──────────────────────────────────────────────────────────────

def _command_args(args: argparse.Namespace) -> dict:
    if args.command == "status":
        return {"command": "status"}
    if args.command == "profile":
        return {"command": "get_profile", "username": args.username}
    if args.command == "company":
        return {"command": "get_company", "company": args.name}
    if args.command == "jobs":
        return {"command": "search_jobs", "query": args.query, "location": args.location, "limit": args.limit}
    if args.command == "job":
        return {"command": "get_job", "job_id": args.job_id}
    if args.command == "invite":
        return {"command": "send_invite", "urn": args.urn, "message": args.message}
    if args.command == "message":
        return {"command": "send_message", "urn": args.urn, "text": args.text}
    raise ValueError(f"Unknown command: {args.command}")


async def _run(args: argparse.Namespace, store: FileSecretStore) -> int:
    try:
        command = parse_command(_command_args(args))
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ()))
        return _fail(f"invalid_arguments: {field}: {first.get('msg')}")

    cookie = args.cookie or store.load()
    async with LinkedInClient.from_env(cookie) as client:
        try:
            data = await execute(client, command)
        except LinkedInError as exc:
            return _fail(f"{exc.kind.value}: {exc.message}")

    if args.json:
        _print_json(data)
    else:
        _RENDERERS[type(command)](data)
    if isinstance(command, StatusCommand) and not data.get("valid"):
        return 1
    return 0


def cmd_auth(args: argparse.Namespace, store: FileSecretStore) -> int:
    if args.clear:
        store.delete()
        print("Authentication cleared")
        return 0
    if args.show:
        token = store.load()
        if token:
            print("Stored cookie (li_at):")
            print(token)
        else:
            print("No cookie stored")
        return 0

    cookie = args.cookie
    if not cookie:
        print(COOKIE_HELP)
        print("\nPaste your li_at cookie value (or press Enter to cancel):")
        cookie = sys.stdin.readline().strip()
        if not cookie:
            print("Authentication cancelled")
            return 1

    try:
        store.save(cookie)
    except ValueError as exc:
        return _fail(f"invalid_arguments: {exc}")
    print("Cookie saved")

    async def verify() -> int:
        async with LinkedInClient.from_env(store.load()) as client:
            status = await client.verify_auth()
        if status.valid:
            print("Authentication verified")
        else:
            print(f"Warning: {status.message}")
        return 0

    return asyncio.run(verify())


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linklion",
        description="Read LinkedIn profiles, companies and jobs; send invites and messages.",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("-j", "--json", action="store_true", help="Output in JSON format.")
    parser.add_argument("--cookie", default=None, help="Override the stored li_at cookie for this call.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    sub = parser.add_subparsers(dest="command")

    auth = sub.add_parser("auth", help="Store the li_at cookie.", description=COOKIE_HELP,
                          formatter_class=argparse.RawTextHelpFormatter)
    auth.add_argument("cookie", nargs="?", default=None, help="The li_at cookie value from your browser.")
    auth.add_argument("-c", "--clear", action="store_true", help="Clear stored authentication.")
    auth.add_argument("--show", action="store_true", help="Show stored cookie value.")

    sub.add_parser("status", help="Check authentication status.")

    profile = sub.add_parser("profile", help="Get a person's profile.")
    profile.add_argument("username", help="LinkedIn username or profile URL.")

    company = sub.add_parser("company", help="Get a company's profile.")
    company.add_argument("name", help="Company slug or LinkedIn company URL.")

    jobs = sub.add_parser("jobs", help="Search for jobs.")
    jobs.add_argument("query", help="Search query (job title, skills, etc.).")
    jobs.add_argument("-l", "--location", default=None, help="Location filter.")
    jobs.add_argument("-n", "--limit", type=int, default=DEFAULT_JOB_LIMIT, help="Maximum number of results (1-100).")

    job = sub.add_parser("job", help="Get job posting details.")
    job.add_argument("job_id", help="Job id or LinkedIn job URL.")

    invite = sub.add_parser("invite", help="Send a connection invite.")
    invite.add_argument("urn", help="Member URN, e.g. urn:li:profile:ACoAA...")
    invite.add_argument("-m", "--message", default=None, help="Optional note.")

    message = sub.add_parser("message", help="Send a direct message.")
    message.add_argument("urn", help="Member URN.")
    message.add_argument("text", help="Message text.")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 0

    ensure_dirs()
    store = FileSecretStore()
    if args.command == "auth":
        return cmd_auth(args, store)
    return asyncio.run(_run(args, store))


if __name__ == "__main__":
    raise SystemExit(main())
