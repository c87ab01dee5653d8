# src/habittrack/cli/commands.py

from __future__ import annotations

import inspect
import logging
import shlex
from collections.abc import Callable
from datetime import date, datetime
from typing import cast

from ..core.state import AppState, ListFilters
from ..storage.app_settings import AppSettings, mark_onboarding_seen, save_theme
from ..tasks.errors import NotFoundError, TaskStoreError, ValidationError
from ..tasks.task_models import AppTheme, Category, Priority, Task, TaskDraft
from ..tasks.task_views import build_view, statistics
from ..widget.provider import TaskCountProvider, render_entry

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

ONBOARDING_PAGES: list[tuple[str, str]] = [
    ("Welcome!", "Manage your to-do list with ease."),
    ("Adding tasks", "Add new tasks and set their priority and category."),
    ("Reminders", "Get a reminder one day before a task is due."),
    ("Statistics", "Keep track of your progress."),
]

_NONE_WORDS = {"", "none", "no", "-", "clear"}


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Store errors (validation, unknown id) become the reply text.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError:
            parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except TaskStoreError as e:
            logger.debug("Command /%s rejected: %s", name, e)
            return str(e)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- argument helpers ----

def split_options(args: list[str]) -> tuple[list[str], dict[str, str]]:
    """Separate "key=value" options from positional words."""
    words: list[str] = []
    opts: dict[str, str] = {}
    for a in args:
        key, sep, value = a.partition("=")
        if sep and key.isidentifier():
            opts[key.lower()] = value
        else:
            words.append(a)
    return words, opts


def parse_choice(enum_cls, raw: str):
    """Case-insensitive enum lookup by value or member name; None for "any"/"all"."""
    needle = raw.strip().lower()
    if needle in ("", "any", "all"):
        return None
    for member in enum_cls:
        if needle in (member.value.lower(), member.name.lower()):
            return member
    choices = ", ".join(m.value for m in enum_cls)
    raise ValidationError(f"Unknown {enum_cls.__name__.lower()}: {raw} (choose from {choices})")


def parse_due(raw: str, now: datetime) -> datetime | None:
    """
    Parse a due date option.

    A plain date (YYYY-MM-DD) keeps the current time of day, like picking a
    day in a date picker. Naive timestamps are read as local time.
    """
    text = raw.strip()
    if text.lower() in _NONE_WORDS:
        return None
    try:
        if len(text) == 10:
            d = date.fromisoformat(text)
            return now.replace(year=d.year, month=d.month, day=d.day)
        dt = datetime.fromisoformat(text)
    except ValueError as e:
        raise ValidationError(f"Invalid due date: {raw} (use YYYY-MM-DD)") from e
    return dt if dt.tzinfo is not None else dt.astimezone()


def resolve_task(state: AppState, ref: str) -> Task:
    """Find a task by full id or unique id prefix."""
    ref = ref.strip().lower()
    if not ref:
        raise ValidationError("Task id is required")
    hits = [t for t in state.task_store.snapshot() if t.id.lower().startswith(ref)]
    if len(hits) == 1:
        return hits[0]
    if len(hits) > 1:
        exact = [t for t in hits if t.id.lower() == ref]
        if exact:
            return exact[0]
        raise ValidationError(f"Ambiguous task id prefix: {ref}")
    raise NotFoundError(ref)


def short_id(task: Task) -> str:
    return task.id[:8]


def format_task(task: Task) -> str:
    box = "[x]" if task.is_completed else "[ ]"
    line = f"{box} {short_id(task)} {task.name} ({task.priority.value}, {task.category.value})"
    details = [f"added {task.creation_date:%Y-%m-%d}"]
    if task.due_date is not None:
        details.append(f"due {task.due_date:%Y-%m-%d}")
    line += " - " + ", ".join(details)
    line += f"\n      {task.description or 'No description'}"
    return line


def progress_bar(ratio: float, width: int = 20) -> str:
    filled = int(round(max(0.0, min(1.0, ratio)) * width))
    return "[" + "#" * filled + "-" * (width - filled) + f"] {ratio * 100:.0f}%"


# ---- commands ----

def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <name> [desc=...] [priority=high|medium|low] [category=work|personal|other] [due=YYYY-MM-DD]
    """
    words, opts = split_options(args)
    draft = TaskDraft(
        name=" ".join(words),
        description=opts.get("desc", ""),
        priority=parse_choice(Priority, opts.get("priority", "")) or Priority.MEDIUM,
        category=parse_choice(Category, opts.get("category", "")) or Category.PERSONAL,
        due_date=parse_due(opts.get("due", ""), state.clock()),
    )
    task = state.task_store.add(draft)
    return f"Added {short_id(task)}: {task.name}"


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <id> [name=...] [desc=...] [priority=...] [category=...] [due=YYYY-MM-DD|none]
    Options that are not given keep their current value.
    """
    words, opts = split_options(args)
    if not words:
        return "Usage: /edit <id> [name=...] [desc=...] [priority=...] [category=...] [due=...]"
    task = resolve_task(state, words[0])

    due = task.due_date
    if "due" in opts:
        due = parse_due(opts["due"], state.clock())

    priority = task.priority
    if "priority" in opts:
        priority = parse_choice(Priority, opts["priority"]) or task.priority

    category = task.category
    if "category" in opts:
        category = parse_choice(Category, opts["category"]) or task.category

    draft = TaskDraft(
        name=opts.get("name", task.name),
        description=opts.get("desc", task.description),
        priority=priority,
        category=category,
        due_date=due,
    )
    updated = state.task_store.update(task.id, draft)
    return f"Saved {short_id(updated)}: {updated.name}"


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <id>"
    task = state.task_store.toggle_status(resolve_task(state, args[0]).id)
    return f"{short_id(task)} is now {task.status.value}."


def cmd_rm(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm <id>"
    task = state.task_store.remove(resolve_task(state, args[0]).id)
    return f"Removed {short_id(task)}: {task.name}"


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list                     -> list with the current filters
    /list q=rent priority=high category=work
    /list clear               -> reset filters
    """
    words, opts = split_options(args)
    if "clear" in (w.lower() for w in words):
        state.filters = ListFilters()
    if "q" in opts:
        state.filters.search_text = opts["q"]
    if "priority" in opts:
        state.filters.priority = parse_choice(Priority, opts["priority"])
    if "category" in opts:
        state.filters.category = parse_choice(Category, opts["category"])

    f = state.filters
    view = build_view(state.task_store.snapshot(), f.search_text, f.priority, f.category)

    lines = [progress_bar(view.completion_percentage), "", "To do:"]
    if view.pending:
        lines.extend(format_task(t) for t in view.pending)
    else:
        lines.append("  No pending tasks yet.")
    lines.append("")
    lines.append("Completed:")
    if view.completed:
        lines.extend(format_task(t) for t in view.completed)
    else:
        lines.append("  No completed tasks yet.")

    active = [
        f"q={f.search_text!r}" if f.search_text else "",
        f"priority={f.priority.value}" if f.priority else "",
        f"category={f.category.value}" if f.category else "",
    ]
    active = [a for a in active if a]
    if active:
        lines.append("")
        lines.append("Filters: " + " ".join(active))
    return "\n".join(lines)


def cmd_stats(state: AppState, args: list[str]) -> str:
    tasks = state.task_store.snapshot()
    stats = statistics(tasks)
    counts = build_view(tasks).category_counts
    lines = [
        "Statistics:",
        f"  Total tasks: {stats.total}",
        f"  Completed tasks: {stats.completed}",
        f"  Completion rate: {stats.percent_label}",
        f"  {progress_bar(stats.completion_rate)}",
        "",
        "By category:",
    ]
    lines.extend(f"  {c.value}: {n} tasks" for c, n in counts.items())
    return "\n".join(lines)


def cmd_theme(state: AppState, args: list[str]) -> str:
    if not args:
        choices = ", ".join(t.value for t in AppTheme)
        return f"Theme is {state.app_settings.theme.value}. Use /theme <{choices}>."
    theme = parse_choice(AppTheme, args[0])
    if theme is None:
        return "Usage: /theme light|dark|blue"
    save_theme(state.gateway, theme)
    state.app_settings = AppSettings(theme=theme, onboarding_seen=state.app_settings.onboarding_seen)
    return f"Theme set to {theme.value}."


def cmd_onboarding(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    for i, (title, body) in enumerate(ONBOARDING_PAGES, start=1):
        page = f"({i}/{len(ONBOARDING_PAGES)}) {title}\n    {body}"
        if emit is not None:
            emit(page)
    mark_onboarding_seen(state.gateway)
    state.app_settings = AppSettings(theme=state.app_settings.theme, onboarding_seen=True)
    return "Let's start! Use /add to create your first task."


def cmd_widget(state: AppState, args: list[str]) -> str:
    provider = TaskCountProvider.for_path(state.settings.shared_db_path, state.clock)
    timeline = provider.timeline()
    return render_entry(timeline.entries[-1])


def cmd_reminders(state: AppState, args: list[str]) -> str:
    pending = state.notification_center.pending_requests()
    if not pending:
        return "No reminders scheduled."
    lines = ["Scheduled reminders:"]
    for r in pending:
        lines.append(f"  {r.fire_at:%Y-%m-%d %H:%M} {r.identifier[:8]} {r.body}")
    return "\n".join(lines)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register(
    "add",
    cmd_add,
    help_text="Add a task: /add <name> [desc=] [priority=] [category=] [due=YYYY-MM-DD].",
    aliases=["new"],
)
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id> [name=] [desc=] [priority=] [category=] [due=].")
registry.register("done", cmd_done, help_text="Toggle a task between pending and completed.", aliases=["toggle"])
registry.register("rm", cmd_rm, help_text="Delete a task.", aliases=["del", "delete"])
registry.register("list", cmd_list, help_text="List tasks: /list [q=] [priority=] [category=] | /list clear.", aliases=["ls"])
registry.register("stats", cmd_stats, help_text="Show completion statistics.")
registry.register("theme", cmd_theme, help_text="Show or set the theme: /theme light|dark|blue.")
registry.register("onboarding", cmd_onboarding, help_text="Show the introduction pages again.")
registry.register("widget", cmd_widget, help_text="Render the home-screen widget.")
registry.register("reminders", cmd_reminders, help_text="List scheduled reminders.")
