"""Interactive console client for the task API."""

import asyncio
import shlex
import sys

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from .client import Notification, TaskApiClient, TaskSession
from .client.store import ALL, TaskStore
from .config import get_settings
from .logging_setup import setup_logging

console = Console()

STATUS_LABELS = {"pending": "Pending", "in_progress": "In progress", "completed": "Done"}
STATUS_ICONS = {"pending": "⭕", "in_progress": "🔄", "completed": "✅"}
PRIORITY_STYLES = {"low": "green", "medium": "yellow", "high": "red"}
NOTIFICATION_STYLES = {"success": "green", "error": "red", "warning": "yellow", "info": "blue"}

# edit command keys -> update fields
EDIT_FIELDS = {
    "title": "title",
    "description": "description",
    "due": "due_date",
    "priority": "priority",
    "project": "project",
    "status": "status",
}
CLEAR_VALUE = "-"

HELP = """\
list                      show tasks matching the current filters
add <title>               create a task (asks for the optional fields)
done <id>                 toggle completed / pending
edit <id> key=value ...   keys: title description due priority project status ('-' clears)
rm <id>                   delete a task
search <text>             free-text filter ('search' alone clears it)
filter <status|priority|project> <value|all>
clear-filters             reset all filters
clear-completed           delete every completed task
refresh                   reload from the server
quit"""


def show_notification(notification: Notification) -> None:
    console.print(
        Panel(
            notification.message,
            title=notification.title,
            title_align="left",
            border_style=NOTIFICATION_STYLES.get(notification.kind, "white"),
            padding=(0, 1),
        )
    )


def render_tasks(store: TaskStore) -> Table:
    stats = store.stats()
    table = Table(
        show_header=True,
        header_style="bold blue",
        caption=(
            f"Showing {stats.total} of {stats.overall} · "
            f"{stats.completed} done · {stats.in_progress} in progress"
        ),
    )
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Task", style="bold", min_width=20)
    table.add_column("Priority", justify="center")
    table.add_column("Project")
    table.add_column("Due")
    table.add_column("Status", justify="center")

    for task in store.filtered():
        status = task.status.value
        priority = task.priority.value
        table.add_row(
            str(task.id),
            task.title,
            f"[{PRIORITY_STYLES[priority]}]{priority}[/]",
            task.project or "",
            task.due_date.strftime("%b %d, %Y") if task.due_date else "",
            f"{STATUS_ICONS[status]} {STATUS_LABELS[status]}",
        )
    return table


def _parse_id(raw: str) -> int | None:
    try:
        return int(raw)
    except ValueError:
        console.print(f"[red]'{raw}' is not a task id[/red]")
        return None


async def _add(session: TaskSession, title: str) -> None:
    fields = {
        "description": Prompt.ask("description", default=""),
        "due_date": Prompt.ask("due date (YYYY-MM-DD)", default=""),
        "priority": Prompt.ask(
            "priority", choices=["low", "medium", "high"], default="medium"
        ),
        "project": Prompt.ask("project", default=""),
    }
    await session.create(title, **{k: v for k, v in fields.items() if v})


async def _edit(session: TaskSession, task_id: int, assignments: list[str]) -> None:
    changes = {}
    for item in assignments:
        key, sep, value = item.partition("=")
        if not sep or key not in EDIT_FIELDS:
            console.print(f"[red]cannot edit '{item}'[/red]")
            return
        changes[EDIT_FIELDS[key]] = None if value == CLEAR_VALUE else value
    await session.update(task_id, **changes)


async def _handle(session: TaskSession, command: str, args: list[str]) -> None:
    store = session.store
    if command == "list":
        console.print(render_tasks(store))
    elif command == "add" and args:
        await _add(session, " ".join(args))
    elif command in ("done", "rm", "edit") and args:
        task_id = _parse_id(args[0])
        if task_id is None:
            return
        if command == "done":
            await session.toggle_status(task_id)
        elif command == "rm":
            await session.delete(task_id)
        else:
            await _edit(session, task_id, args[1:])
    elif command == "search":
        store.filters.query = " ".join(args)
        console.print(render_tasks(store))
    elif command == "filter" and len(args) == 2 and args[0] in ("status", "priority", "project"):
        setattr(store.filters, args[0], args[1])
        console.print(render_tasks(store))
    elif command == "clear-filters":
        store.clear_filters()
        console.print(render_tasks(store))
    elif command == "clear-completed":
        count = len(store.completed())
        if count and not Confirm.ask(f"Delete {count} completed task(s)? This cannot be undone."):
            return
        await session.clear_completed()
    elif command == "refresh":
        await session.refresh()
        console.print(render_tasks(store))
    else:
        console.print(HELP)


async def interactive_mode() -> None:
    settings = get_settings()
    user_id = settings.user_id or Prompt.ask("user id")
    api = TaskApiClient(
        settings.api_url,
        user_id,
        identity_header=settings.identity_header,
        timeout=settings.timeout,
    )

    console.print(
        Panel(
            f"Task tracker · {settings.api_url}\n[dim]help: ? · quit: q[/dim]",
            border_style="cyan",
            padding=(0, 2),
        )
    )

    async with api:
        session = TaskSession(api, notify=show_notification)
        if await session.refresh():
            projects = session.store.projects()
            if projects:
                console.print(f"[dim]projects: {', '.join(projects)} (filter project {ALL} to reset)[/dim]")
            console.print(render_tasks(session.store))

        while True:
            console.print()
            line = Prompt.ask("[bold cyan]tasks[/bold cyan]").strip()
            if line.lower() in ("quit", "exit", "q"):
                break
            if not line:
                continue
            try:
                command, *args = shlex.split(line)
            except ValueError as e:
                console.print(f"[red]{e}[/red]")
                continue
            await _handle(session, command.lower(), args)


def main() -> None:
    setup_logging(get_settings().log_level)
    try:
        asyncio.run(interactive_mode())
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/yellow]")
    except Exception as e:
        Console(stderr=True).print(f"[red]Error: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
