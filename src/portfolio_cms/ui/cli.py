from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from portfolio_cms import __version__
from portfolio_cms.adapters.notifier import LoggingNotifier
from portfolio_cms.adapters.rest.client import default_client_factory
from portfolio_cms.app import build_admin_console, build_public_reader
from portfolio_cms.config import configure_logging, get_admin_credentials, get_storage_config
from portfolio_cms.domain.errors import AuthenticationError, PortfolioError
from portfolio_cms.domain.ports import always_confirm

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import FrameType

    from portfolio_cms.app import AdminConsole, ClientFactory
    from portfolio_cms.domain.model import ContactMessage, Experience, Project
    from portfolio_cms.domain.ports import ConfirmAction
    from portfolio_cms.domain.preview import SortedView

log = logging.getLogger(__name__)

COLLECTIONS = ("projects", "experience", "categories", "skills")
LISTABLE = (*COLLECTIONS, "paragraphs", "stats", "messages")
REORDERABLE = ("projects", "experience", "categories")
DELETABLE = (*COLLECTIONS, "messages")
TOGGLEABLE = ("projects", "experience")
FLAGS = ("visible", "featured")


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Edit portfolio content through its API")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser(
        "login",
        help="Log in with PORTFOLIO_ADMIN_EMAIL/PASSWORD and print the access token",
    )

    list_parser = subparsers.add_parser("list", help="Show a section in display order")
    list_parser.add_argument("resource", choices=LISTABLE)

    reorder_parser = subparsers.add_parser("reorder", help="Persist a new order for a section")
    reorder_parser.add_argument("resource", choices=REORDERABLE)
    reorder_parser.add_argument("ids", nargs="+", help="Every id of the section, in new order")

    reorder_skills_parser = subparsers.add_parser(
        "reorder-skills", help="Persist a new order for the skills of one category"
    )
    reorder_skills_parser.add_argument("category_id")
    reorder_skills_parser.add_argument("ids", nargs="+", help="Every skill id, in new order")

    delete_parser = subparsers.add_parser("delete", help="Delete one entry")
    delete_parser.add_argument("resource", choices=DELETABLE)
    delete_parser.add_argument("id")
    delete_parser.add_argument(
        "--yes",
        action="store_true",
        help="Do not ask for confirmation",
    )

    toggle_parser = subparsers.add_parser("toggle", help="Flip visibility or featured status")
    toggle_parser.add_argument("resource", choices=TOGGLEABLE)
    toggle_parser.add_argument("id")
    toggle_parser.add_argument("flag", choices=FLAGS)

    preview_parser = subparsers.add_parser(
        "preview", help="Render the public site as visitors see it"
    )
    preview_parser.add_argument(
        "--fresh",
        action="store_true",
        help="Drop cached public responses before reading",
    )

    return parser.parse_args(list(argv))


def _check_args(args: argparse.Namespace) -> None:
    if args.command == "toggle" and args.resource == "experience" and args.flag == "featured":
        raise ValueError("Experience entries cannot be featured")
    ids = getattr(args, "ids", None)
    if ids is not None and len(set(ids)) != len(ids):
        raise ValueError("Duplicate ids in reorder request")


async def prompt_confirm(prompt: str) -> bool:
    answer = await asyncio.to_thread(input, f"{prompt} [y/N] ")
    return answer.strip().lower() in {"y", "yes"}


def _echo(lines: Sequence[str]) -> None:
    print("\n".join(lines))  # noqa: T201


def _view_lines[T](view: SortedView[T], describe: Callable[[T], str]) -> list[str]:
    if view.is_empty:
        return [view.empty_message]
    lines: list[str] = []
    for entry in view:
        suffix = " (incomplete)" if entry.incomplete else ""
        entity_id = getattr(entry.entity, "id", "")
        lines.append(f"{entry.position + 1}. {entity_id}  {describe(entry.entity)}{suffix}")
    return lines


def _describe_project(project: Project) -> str:
    text = project.title
    if project.featured:
        text += " [featured]"
    if not project.is_visible:
        text += " [hidden]"
    return text


def _describe_experience(experience: Experience) -> str:
    start = experience.start_date.isoformat()
    end = "present" if experience.end_date is None else experience.end_date.isoformat()
    text = f"{experience.job_title} at {experience.company} ({start} - {end})"
    return text if experience.is_visible else f"{text} [hidden]"


def _describe_message(message: ContactMessage) -> str:
    marker = " " if message.is_read else "*"
    subject = message.subject or "(no subject)"
    return f"{marker} {message.id}  {message.name} <{message.email}>: {subject}"


async def _list(console: AdminConsole, resource: str) -> list[str]:
    if resource == "projects":
        await console.projects.load()
        return _view_lines(console.projects.preview(), _describe_project)
    if resource == "experience":
        await console.experience.load()
        return _view_lines(console.experience.preview(), _describe_experience)
    if resource in {"categories", "skills"}:
        await console.skills.load()
        groups = console.skills.preview()
        if not groups:
            return ["No skills yet."]
        lines: list[str] = []
        for position, group in enumerate(groups, start=1):
            category = group.category
            lines.append(f"{position}. {category.id}  {category.name} ({len(group.skills)} skills)")
            if resource == "skills":
                lines.extend(
                    f"    {line}" for line in _view_lines(group.skills, lambda skill: skill.name)
                )
        return lines
    if resource == "paragraphs":
        await asyncio.gather(console.about.load(), console.hero.load())
        preview = console.about_preview()
        return _view_lines(preview.paragraphs, lambda paragraph: paragraph.text)
    if resource == "stats":
        await console.hero.load()
        return _view_lines(console.hero.preview_stats(), lambda stat: f"{stat.value} {stat.label}")
    messages = await console.inbox.load()
    if not messages:
        return ["No messages."]
    return [*map(_describe_message, messages), f"{console.inbox.unread_count} unread"]


async def _reorder(console: AdminConsole, resource: str, ids: Sequence[str]) -> None:
    if resource == "projects":
        await console.projects.load()
        await console.projects.reorder(ids)
    elif resource == "experience":
        await console.experience.load()
        await console.experience.reorder(ids)
    else:
        await console.skills.load()
        await console.skills.reorder_categories(ids)


async def _delete(console: AdminConsole, resource: str, key: str) -> bool:
    if resource == "projects":
        await console.projects.load()
        return await console.projects.delete(key)
    if resource == "experience":
        await console.experience.load()
        return await console.experience.delete(key)
    if resource == "messages":
        await console.inbox.load()
        return await console.inbox.delete(key)
    await console.skills.load()
    if resource == "categories":
        return await console.skills.delete_category(key)
    return await console.skills.delete_skill(key)


async def _toggle(console: AdminConsole, resource: str, key: str, flag: str) -> None:
    if resource == "experience":
        await console.experience.load()
        await console.experience.toggle_visibility(key)
        return
    await console.projects.load()
    if flag == "featured":
        await console.projects.toggle_featured(key)
    else:
        await console.projects.toggle_visibility(key)


async def _run_admin(
    args: argparse.Namespace,
    *,
    confirm: ConfirmAction,
    client_factory: ClientFactory,
) -> None:
    async with build_admin_console(
        confirm=confirm, notifier=LoggingNotifier(), client_factory=client_factory
    ) as console:
        if args.command == "login":
            credentials = get_admin_credentials()
            await console.auth.login(credentials.email, credentials.password)
            _echo([console.auth.session.token or ""])
            return

        admin = await console.auth.restore()
        if admin is None:
            raise AuthenticationError(
                "Not logged in: set PORTFOLIO_API_TOKEN to a token from `portfolio-cms login`"
            )
        log.debug("Acting as %s", admin.email)

        if args.command == "list":
            _echo(await _list(console, args.resource))
        elif args.command == "reorder":
            await _reorder(console, args.resource, args.ids)
            log.info("Reordered %s", args.resource)
        elif args.command == "reorder-skills":
            await console.skills.load()
            await console.skills.reorder_skills(args.category_id, args.ids)
            log.info("Reordered skills of category %s", args.category_id)
        elif args.command == "delete":
            if not await _delete(console, args.resource, args.id):
                log.info("Nothing deleted")
        elif args.command == "toggle":
            await _toggle(console, args.resource, args.id, args.flag)
        else:
            raise ValueError(f"Unsupported command: {args.command}")


async def _run_preview(client_factory: ClientFactory, *, fresh: bool = False) -> None:
    if fresh and not get_storage_config().clear_http_cache():
        log.info("No cached responses to clear")
    async with build_public_reader(client_factory=client_factory) as reader:
        site = await reader.fetch()
    hero = site.hero
    lines = [
        site.site.site_title,
        f"{hero.full_name} - {hero.title} ({hero.location})",
        "",
        "About:",
        *_view_lines(site.about.paragraphs, lambda paragraph: paragraph.text),
        *_view_lines(site.about.stats, lambda stat: f"{stat.value} {stat.label}"),
        "",
        "Skills:",
    ]
    for group in site.skills:
        skills = ", ".join(skill.name for skill in group.skills.entities)
        lines.append(f"  {group.category.name}: {skills or group.skills.empty_message}")
    lines.extend(["", "Projects:", *_view_lines(site.projects, _describe_project)])
    lines.extend(["", "Experience:", *_view_lines(site.experience, _describe_experience)])
    _echo(lines)


async def _run(args: argparse.Namespace, *, client_factory: ClientFactory) -> None:
    if args.command == "preview":
        await _run_preview(client_factory, fresh=args.fresh)
        return
    confirm = always_confirm if getattr(args, "yes", False) else prompt_confirm
    await _run_admin(args, confirm=confirm, client_factory=client_factory)


def main(
    argv: Sequence[str] | None = None,
    *,
    client_factory: ClientFactory = default_client_factory,
) -> None:
    """Main application entry point."""
    configure_logging()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        _check_args(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        asyncio.run(_run(parsed_args, client_factory=client_factory))
    except PortfolioError as exc:
        log.error("%s failed: %s", parsed_args.command, exc.message)  # noqa: TRY400
        sys.exit(1)
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
