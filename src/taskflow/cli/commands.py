# src/taskflow/cli/commands.py

from __future__ import annotations

import inspect
import logging
import shlex
from collections.abc import Awaitable, Callable

from ..core.state import AppState
from ..errors import TaskValidationError
from ..tasks import task_api
from ..tasks.projection import TaskView, parse_filter, project
from ..tasks.task_models import Priority, Task

CommandResult = str | Awaitable[str]
CommandHandler = Callable[[AppState, list[str]], CommandResult]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Slash-command registry used by the console connector (/help, /add, ...)."""

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

    async def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
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

        logger.debug("Command /%s args=%s", name, args)
        result = handler(state, args)
        if inspect.isawaitable(result):
            result = await result
        return result

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- rendering ----


def render_task(task: Task, state: AppState) -> str:
    box = "[x]" if task.completed else "[ ]"
    line = f"  {box} {task.id}  {task.priority.value.upper():<6}  {task.text}"
    if task.reminder_time is not None:
        when = task_api.format_reminder_time(task.reminder_time, state.clock.now())
        line += f"  ⏰ {when}"
        if task.reminder_notified:
            line += " (notified)"
    return line


def render_stats(view: TaskView) -> str:
    s = view.stats
    return (
        f"Total: {s.total} | Completed: {s.completed} | High: {s.high} | "
        f"Medium: {s.medium} | Low: {s.low} | Reminders: {s.with_reminders}"
    )


def render_view(view: TaskView, state: AppState) -> str:
    lines = [render_stats(view), f"Filter: {view.priority_filter.value}"]
    if not view.tasks:
        lines.append("  (no tasks)")
    lines.extend(render_task(t, state) for t in view.tasks)
    return "\n".join(lines)


# ---- arg helpers ----


def _pop_option(args: list[str], *names: str) -> str | None:
    """Remove `-x VALUE` from args (first occurrence) and return VALUE."""
    for i, a in enumerate(args):
        if a in names:
            if i + 1 >= len(args):
                raise TaskValidationError(f"Option {a} needs a value")
            value = args[i + 1]
            del args[i : i + 2]
            return value
    return None


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add [-p high|medium|low] [-r WHEN] text...
    """
    args = list(args)
    try:
        raw_priority = _pop_option(args, "-p", "--priority")
        raw_remind = _pop_option(args, "-r", "--remind")
        reminder = task_api.parse_reminder_time(raw_remind, state.clock.now()) if raw_remind else None
    except TaskValidationError as e:
        return str(e)

    priority = Priority.MEDIUM
    if raw_priority:
        try:
            priority = Priority(raw_priority.lower())
        except ValueError:
            return f"Unknown priority: {raw_priority} (expected high, medium or low)"

    return task_api.add_task(state, " ".join(args), priority=priority, reminder_time=reminder).message


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list          -> current filter
    /list high     -> set filter and show
    """
    if args:
        try:
            state.priority_filter = parse_filter(args[0])
        except TaskValidationError as e:
            return str(e)
    return render_view(project(state.task_store.snapshot(), state.priority_filter), state)


def cmd_stats(state: AppState, args: list[str]) -> str:
    return render_stats(project(state.task_store.snapshot()))


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done ID"
    return task_api.toggle_task(state, args[0]).message


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit ID new text...
    /edit ID -r WHEN [new text...]
    /edit ID -r off
    """
    if not args:
        return "Usage: /edit ID [-r WHEN|off] [text]"
    task_id, rest = args[0], list(args[1:])

    try:
        raw_remind = _pop_option(rest, "-r", "--remind")
        clear = raw_remind is not None and raw_remind.lower() in ("off", "none", "-")
        reminder = None
        if raw_remind is not None and not clear:
            reminder = task_api.parse_reminder_time(raw_remind, state.clock.now())
    except TaskValidationError as e:
        return str(e)

    text = " ".join(rest) if rest else None
    return task_api.edit_task(state, task_id, text=text, reminder_time=reminder, clear_reminder=clear).message


def cmd_remind(state: AppState, args: list[str]) -> str:
    """
    /remind ID WHEN
    /remind ID off
    """
    if len(args) < 2:
        return "Usage: /remind ID WHEN|off"
    task_id, raw = args[0], " ".join(args[1:])

    if raw.lower() in ("off", "none", "-"):
        return task_api.remove_reminder(state, task_id).message

    try:
        reminder = task_api.parse_reminder_time(raw, state.clock.now())
    except TaskValidationError as e:
        return str(e)
    res = task_api.edit_task(state, task_id, reminder_time=reminder)
    return "Reminder set." if res.ok else res.message


def cmd_rm(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm ID"
    return task_api.delete_task(state, args[0]).message


def cmd_clear(state: AppState, args: list[str]) -> str:
    """
    /clear completed
    /clear all
    """
    sub = args[0].lower() if args else ""
    if sub in ("completed", "done"):
        return task_api.clear_completed(state).message
    if sub == "all":
        return task_api.clear_all(state).message
    return "Usage: /clear completed | /clear all"


async def cmd_notify(state: AppState, args: list[str]) -> str:
    res = await task_api.enable_notifications(state)
    return res.message


def cmd_logout(state: AppState, args: list[str]) -> str:
    state.auth.sign_out()
    state.session = None
    return "Signed out."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("add", cmd_add, help_text="Add a task: /add [-p high|medium|low] [-r WHEN] text.")
registry.register("list", cmd_list, help_text="Show tasks: /list [all|high|medium|low].", aliases=["ls"])
registry.register("stats", cmd_stats, help_text="Show task counts.")
registry.register("done", cmd_done, help_text="Toggle completion: /done ID.")
registry.register("edit", cmd_edit, help_text="Edit a task: /edit ID [-r WHEN|off] [text].")
registry.register("remind", cmd_remind, help_text="Set or remove a reminder: /remind ID WHEN|off.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm ID.", aliases=["delete"])
registry.register("clear", cmd_clear, help_text="Bulk delete: /clear completed | /clear all.")
registry.register("notify", cmd_notify, help_text="Enable reminder notifications.")
registry.register("logout", cmd_logout, help_text="Sign out and quit.")
