# src/tasktrack/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import cast

from ..core.errors import AuthenticationError, CollaboratorUnavailable, OperationFailure
from ..core.state import AppState
from ..tasks.analytics import ChartSeries
from ..tasks.composer import TaskDraft
from ..tasks.task_filter import format_completion_duration
from ..tasks.task_models import Task, TaskPriority, TaskStatus

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], Awaitable[str]]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], Awaitable[str]]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

LOGIN_HINT = "Please log in first: /login <username> <password>"
AI_UNAVAILABLE = "AI assistance is not available right now. Manual entry still works."


class CommandRegistry:
    """
    Slash-command registry used by the console connector (/help, /login, /tasks, ...).

    A command may be bound to a protected view (`route`); the registry navigates
    there first, so the route guard decides whether the handler runs at all.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._routes: dict[str, str | None] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        route: str | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._routes[key] = route
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler
            self._routes[alias.lower()] = route

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        route = self._routes.get(name)
        if route is not None and state.router.navigate(route) != route:
            return LOGIN_HINT

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return await h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return await h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- rendering ----


def format_task_line(task: Task) -> str:
    line = f"#{task.id} [{task.status.value}] ({task.priority.value}) {task.title}"
    if task.description:
        line += f": {task.description}"
    if task.status == TaskStatus.DONE:
        line += f" (done in {format_completion_duration(task.created_at, task.completed_at)})"
    return line


def format_task_detail(task: Task) -> str:
    created = task.created_at.astimezone().strftime("%Y-%m-%d %H:%M") if task.created_at else "-"
    completed = task.completed_at.astimezone().strftime("%Y-%m-%d %H:%M") if task.completed_at else "-"
    return (
        f"Task #{task.id}\n"
        f"  Title: {task.title}\n"
        f"  Description: {task.description or '-'}\n"
        f"  Status: {task.status.value}\n"
        f"  Priority: {task.priority.value}\n"
        f"  Created: {created}\n"
        f"  Completed: {completed}\n"
        f"  Duration: {format_completion_duration(task.created_at, task.completed_at)}"
    )


def format_draft(draft: TaskDraft, *, ai_available: bool) -> str:
    head = f"Editing task #{draft.task_id}" if draft.is_edit else "New task"
    lines = [
        f"{head}:",
        f"  title: {draft.title or '-'}",
        f"  description: {draft.description or '-'}",
        f"  status: {draft.status.value}",
        f"  priority: {draft.priority.value}",
        "Use /set <field> <value>, then /save (or /cancel).",
    ]
    if ai_available:
        lines.append("AI: /nl or /parse <text> to fill the form, /recommend for a priority.")
    return "\n".join(lines)


def render_board(state: AppState) -> str:
    board = state.board
    p = board.predicate
    lines = [
        f"Tasks ({len(board.visible)} of {len(board.tasks)}) "
        f"search={p.search_term!r} status={p.status} priority={p.priority}"
    ]
    if not board.visible:
        lines.append("  No tasks match.")
    lines.extend(f"  {format_task_line(t)}" for t in board.visible)
    return "\n".join(lines)


def _render_chart(title: str, series: ChartSeries) -> str:
    parts = ", ".join(f"{label}: {value}" for label, value in zip(series.labels, series.values))
    return f"  {title}: {parts}"


def _parse_id(args: list[str]) -> int | None:
    if not args:
        return None
    try:
        return int(args[0].lstrip("#"))
    except ValueError:
        return None


# ---- session commands ----


async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_login(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/login <username> <password>"""
    if len(args) < 2:
        return "Usage: /login <username> <password>"

    username, password = args[0], " ".join(args[1:])
    if emit:
        with contextlib.suppress(Exception):
            emit(f"[AUTH] Signing in as {username}...")

    try:
        session = await state.sessions.login(username, password)
    except AuthenticationError as e:
        return f"Login failed: {e.message}"

    state.router.navigate("tasks")
    try:
        await state.board.load_tasks()
    except OperationFailure as e:
        return f"Logged in as {session.username}. Failed to load tasks: {e.message}"
    return f"Logged in as {session.username}.\n{render_board(state)}"


async def cmd_logout(state: AppState, args: list[str]) -> str:
    state.sessions.logout()
    return "Logged out."


async def cmd_whoami(state: AppState, args: list[str]) -> str:
    session = state.sessions.current_session()
    if session is None:
        return "Not logged in."
    email = f" <{session.email}>" if session.email else ""
    return f"Logged in as {session.username}{email}. View: {state.router.current}"


async def cmd_go(state: AppState, args: list[str]) -> str:
    """/go <tasks|analytics|login>"""
    target = args[0] if args else ""
    shown = state.router.navigate(target)
    if shown == "tasks":
        return await cmd_tasks(state, [])
    if shown == "analytics":
        return await cmd_stats(state, [])
    if target.strip("/").lower() in ("tasks", "analytics"):
        return LOGIN_HINT
    return "Login view. " + ("Use /go tasks." if state.sessions.is_authenticated() else LOGIN_HINT)


# ---- task list commands ----


async def cmd_tasks(state: AppState, args: list[str]) -> str:
    """
    /tasks                      -> reload all tasks
    /tasks status=DONE          -> server-side subset by status
    /tasks priority=HIGH        -> server-side subset by priority
    """
    status: str | None = None
    priority: str | None = None
    for arg in args:
        key, _, value = arg.partition("=")
        key = key.lower()
        if key == "status" and TaskStatus.__members__.get(value.upper()):
            status = value.upper()
        elif key == "priority" and TaskPriority.parse(value):
            priority = value.upper()
        else:
            return "Usage: /tasks [status=TODO|IN_PROGRESS|DONE] [priority=LOW|MEDIUM|HIGH]"

    try:
        await state.board.load_tasks(status=status, priority=priority)
    except OperationFailure as e:
        return f"Failed to load tasks: {e.message}"
    return render_board(state)


async def cmd_search(state: AppState, args: list[str]) -> str:
    state.board.set_search_term(" ".join(args))
    return render_board(state)


async def cmd_filter(state: AppState, args: list[str]) -> str:
    """
    /filter status <ALL|TODO|IN_PROGRESS|DONE>
    /filter priority <ALL|LOW|MEDIUM|HIGH>
    /filter reset
    """
    usage = "Usage: /filter status <ALL|TODO|IN_PROGRESS|DONE> | /filter priority <ALL|LOW|MEDIUM|HIGH> | /filter reset"
    if not args:
        return usage

    sub = args[0].lower()
    try:
        if sub == "reset":
            state.board.reset_filters()
        elif sub == "status" and len(args) == 2:
            state.board.set_status_filter(args[1])
        elif sub == "priority" and len(args) == 2:
            state.board.set_priority_filter(args[1])
        else:
            return usage
    except ValueError as e:
        return str(e)
    return render_board(state)


async def cmd_status(state: AppState, args: list[str]) -> str:
    return await cmd_filter(state, ["status", *args[:1]] if args else [])


async def cmd_priority(state: AppState, args: list[str]) -> str:
    return await cmd_filter(state, ["priority", *args[:1]] if args else [])


async def cmd_show(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /show <id>"
    try:
        task = await state.board.fetch_task(task_id)
    except OperationFailure as e:
        return f"Failed to load task #{task_id}: {e.message}"
    return format_task_detail(task)


async def cmd_delete(state: AppState, args: list[str]) -> str:
    """/delete <id> [yes]: asks for confirmation unless "yes" is given."""
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /delete <id> [yes]"

    task = state.board.find(task_id)
    label = f'"{task.title}"' if task is not None else f"task #{task_id}"
    if len(args) < 2 or args[1].lower() not in ("yes", "y"):
        return f"Are you sure you want to delete {label}? Repeat with /delete {task_id} yes to confirm."

    try:
        await state.board.delete_task(task_id)
    except OperationFailure as e:
        return f"Failed to delete task: {e.message}"
    return f"Deleted {label}.\n{render_board(state)}"


# ---- task form commands ----


async def _open_form(state: AppState) -> str:
    await state.composer.check_ai_availability()
    return format_draft(state.composer.draft, ai_available=state.composer.ai_available)


async def cmd_new(state: AppState, args: list[str]) -> str:
    state.composer.start_new()
    if args:
        state.composer.draft.title = " ".join(args)
    return await _open_form(state)


async def cmd_edit(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /edit <id>"

    task = state.board.find(task_id)
    if task is None:
        try:
            task = await state.board.fetch_task(task_id)
        except OperationFailure as e:
            return f"Failed to load task #{task_id}: {e.message}"

    state.composer.start_edit(task)
    return await _open_form(state)


async def cmd_set(state: AppState, args: list[str]) -> str:
    """/set <title|description|status|priority> <value...>"""
    if not args:
        return "Usage: /set <title|description|status|priority> <value>"

    field = args[0].lower()
    value = " ".join(args[1:])
    draft = state.composer.draft

    if field == "title":
        if not value.strip():
            return "Title is required."
        draft.title = value
    elif field == "description":
        draft.description = value
    elif field == "status":
        status = TaskStatus.__members__.get(value.strip().upper())
        if status is None:
            return "Status must be one of: TODO, IN_PROGRESS, DONE."
        draft.status = status
    elif field == "priority":
        priority = TaskPriority.parse(value)
        if priority is None:
            return "Priority must be one of: LOW, MEDIUM, HIGH."
        draft.priority = priority
    else:
        return "Unknown field. Use title, description, status or priority."

    return format_draft(draft, ai_available=state.composer.ai_available)


async def cmd_draft(state: AppState, args: list[str]) -> str:
    return format_draft(state.composer.draft, ai_available=state.composer.ai_available)


async def cmd_nl(state: AppState, args: list[str]) -> str:
    try:
        on = state.composer.toggle_natural_language_input()
    except CollaboratorUnavailable:
        return AI_UNAVAILABLE
    if on:
        return "Natural-language input ON. Describe the task in plain words (or /nl to go back)."
    return "Natural-language input OFF."


async def cmd_parse(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    text = " ".join(args)
    if not text.strip():
        return "Usage: /parse <task description in plain words>"

    if emit:
        with contextlib.suppress(Exception):
            emit("[AI] Parsing...")

    try:
        applied = await state.composer.parse_with_ai(text)
    except CollaboratorUnavailable:
        return AI_UNAVAILABLE

    note = "AI filled in the form." if applied else "AI could not parse that; your text was used as the title."
    return f"{note}\n{format_draft(state.composer.draft, ai_available=state.composer.ai_available)}"


async def cmd_recommend(state: AppState, args: list[str]) -> str:
    if not state.composer.draft.title.strip():
        return "Set a title first: /set title <text>"
    try:
        priority = await state.composer.recommend_priority()
    except CollaboratorUnavailable:
        return AI_UNAVAILABLE
    if priority is None:
        return "No recommendation right now; priority unchanged."
    return f"Priority set to {priority.value} (AI recommendation)."


async def cmd_save(state: AppState, args: list[str]) -> str:
    is_edit = state.composer.draft.is_edit
    try:
        saved = await state.composer.submit()
    except ValueError as e:
        return str(e)
    except OperationFailure as e:
        return f"Failed to {'update' if is_edit else 'create'} task: {e.message}"
    return f"Saved task #{saved.id}.\n{render_board(state)}"


async def cmd_cancel(state: AppState, args: list[str]) -> str:
    state.composer.start_new()
    return "Form discarded."


async def cmd_suggest(state: AppState, args: list[str]) -> str:
    if not await state.composer.check_ai_availability():
        return AI_UNAVAILABLE
    try:
        result = await state.ai.suggestions()
    except Exception:
        logger.exception("AI suggestions failed")
        return "No suggestions right now."

    lines = ["Suggested tasks:"] if result.suggestions else ["No suggestions right now."]
    lines.extend(f"  - {s}" for s in result.suggestions)
    if result.insight:
        lines.append(result.insight)
    return "\n".join(lines)


async def cmd_ai(state: AppState, args: list[str]) -> str:
    available = await state.composer.check_ai_availability()
    status = state.composer.ai_status
    if not available or status is None:
        return "AI: unavailable (manual entry only)."
    details = ", ".join(x for x in (status.provider, status.model, status.cost) if x)
    return f"AI: available ({details})" if details else "AI: available"


# ---- analytics commands ----


async def cmd_stats(state: AppState, args: list[str]) -> str:
    view = state.analytics
    await view.refresh()
    if view.stats is None:
        return "Statistics are not available right now."

    s = view.stats
    lines = [
        "Statistics:",
        f"  Total: {s.total_tasks}  Completed: {s.completed_tasks}  Pending: {s.pending_tasks}",
        f"  Average completion time: {s.average_completion_time_hours:.1f} hours",
    ]
    charts = view.charts()
    if charts is not None:
        status_chart, completion_chart = charts
        lines.append(_render_chart("By status", status_chart))
        lines.append(_render_chart("Completion", completion_chart))
    if view.insight:
        lines.append(f"AI insight: {view.insight}")
    return "\n".join(lines)


async def cmd_insight(state: AppState, args: list[str]) -> str:
    insight = await state.analytics.load_insight()
    return f"AI insight: {insight}" if insight else "No AI insight available."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("login", cmd_login, help_text="Sign in: /login <username> <password>.")
registry.register("logout", cmd_logout, help_text="Sign out and forget the saved session.")
registry.register("whoami", cmd_whoami, help_text="Show the signed-in user.")
registry.register("go", cmd_go, help_text="Open a view: /go tasks | /go analytics | /go login.")
registry.register(
    "tasks", cmd_tasks, help_text="Reload tasks: /tasks [status=..] [priority=..].", aliases=["ls"], route="tasks"
)
registry.register("search", cmd_search, help_text="Filter by text in title/description.", route="tasks")
registry.register("filter", cmd_filter, help_text="/filter status <..> | priority <..> | reset.", route="tasks")
registry.register("status", cmd_status, help_text="Status filter: /status <ALL|TODO|IN_PROGRESS|DONE>.", route="tasks")
registry.register("priority", cmd_priority, help_text="Priority filter: /priority <ALL|LOW|MEDIUM|HIGH>.", route="tasks")
registry.register("show", cmd_show, help_text="Show one task: /show <id>.", route="tasks")
registry.register("new", cmd_new, help_text="Start a new task: /new [title].", aliases=["add"], route="tasks")
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id>.", route="tasks")
registry.register("set", cmd_set, help_text="Set a form field: /set <field> <value>.", route="tasks")
registry.register("draft", cmd_draft, help_text="Show the task form.", route="tasks")
registry.register("nl", cmd_nl, help_text="Toggle natural-language input (AI).", route="tasks")
registry.register("parse", cmd_parse, help_text="Fill the form from plain text (AI): /parse <text>.", route="tasks")
registry.register("recommend", cmd_recommend, help_text="AI priority recommendation for the form.", route="tasks")
registry.register("save", cmd_save, help_text="Create/update the task in the form.", route="tasks")
registry.register("cancel", cmd_cancel, help_text="Discard the task form.", route="tasks")
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id> [yes].", aliases=["rm"], route="tasks")
registry.register("suggest", cmd_suggest, help_text="AI task suggestions.", route="tasks")
registry.register("ai", cmd_ai, help_text="Check AI availability.")
registry.register("stats", cmd_stats, help_text="Completion statistics.", route="analytics")
registry.register("insight", cmd_insight, help_text="AI productivity insight.", route="analytics")
