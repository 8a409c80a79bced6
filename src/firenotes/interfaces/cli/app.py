"""CLI application for Fire Notes using Rich and Typer."""

import asyncio
import logging
import threading
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Optional, TypeVar

import typer
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from firenotes.core.config import setup_logging, validate_core_environment
from firenotes.core.document import checkbox_label, is_checked
from firenotes.core.editor import EditorSession
from firenotes.core.errors import FireNotesError, UnauthorizedError
from firenotes.core.factory import build_app_state, build_export_service
from firenotes.core.state import AppState
from firenotes.core.types import Note, Row, RowKind
from firenotes.export.render import ExportFormat, image_name

T = TypeVar("T")

app = typer.Typer(
    name="firenotes",
    help="Fire Notes CLI - structured notes with autosave and export",
    no_args_is_help=True,
)

console = Console()


class ConsoleNotifier:
    """Notifier that prints notices to the console."""

    def notify(self, title: str, message: str, *, blocking: bool = False) -> None:
        if blocking:
            console.print(Panel(message, title=title, border_style="red"))
        else:
            console.print(f"[yellow]{title}:[/yellow] [dim]{message}[/dim]")


def _run(action: Callable[[AppState], Awaitable[T]], *, require_auth: bool = True) -> T:
    """Build state, hydrate the session, run ``action`` and clean up."""
    is_valid, message = validate_core_environment()
    if not is_valid:
        console.print(f"[red]Error: {message}[/red]")
        raise typer.Exit(1)

    async def _main() -> T:
        state = build_app_state(notifier=ConsoleNotifier())
        try:
            state.init()
            if require_auth and not state.is_authenticated:
                console.print("[red]Not logged in.[/red] Run [bold]firenotes login[/bold] first.")
                raise typer.Exit(1)
            return await action(state)
        finally:
            await state.aclose()

    try:
        return asyncio.run(_main())
    except UnauthorizedError as exc:
        console.print(f"[red]{exc.message}[/red] Run [bold]firenotes login[/bold] again.")
        raise typer.Exit(1)
    except FireNotesError as exc:
        console.print(f"[red]Error: {exc.message}[/red]")
        if exc.detail:
            console.print(f"[dim]{exc.detail}[/dim]")
        raise typer.Exit(1)


def _short(note: Note) -> str:
    return (note.remote_id or note.id)[:8]


def _row_preview(row: Row) -> str:
    match row.kind:
        case RowKind.TEXT:
            return row.content or "[dim](empty)[/dim]"
        case RowKind.BULLET:
            return f"• {row.content}"
        case RowKind.CHECKBOX:
            box = "[green]\\[x][/green]" if is_checked(row.content) else "\\[ ]"
            return f"{box} {checkbox_label(row.content)}"
        case RowKind.IMAGE:
            if row.content:
                return f"📷 {image_name(row.content)}"
            return "[dim]📷 no image attached[/dim]"


def print_note(editor: EditorSession) -> None:
    """Print the open note with its save state."""
    status_style = {
        "clean": "green",
        "dirty": "yellow",
        "saving": "blue",
        "closed": "dim",
    }[editor.status.value]
    table = Table(
        title=editor.display_title,
        caption=f"[{status_style}]{editor.status.value}[/{status_style}]",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("#", style="dim")
    table.add_column("Kind")
    table.add_column("Content")
    for index, row in enumerate(editor.rows, 1):
        table.add_row(str(index), row.kind.value, _row_preview(row))
    console.print(table)


def print_editor_help() -> None:
    """Print editor commands."""
    table = Table(title="Editor Commands", show_header=True, header_style="bold cyan")
    table.add_column("Command", style="green")
    table.add_column("Description")

    commands = [
        ("/show", "Show the note"),
        ("/title <text>", "Rename the note"),
        ("/add text|bullet|checkbox|image [content]", "Append a row"),
        ("/set <n> <content>", "Replace the content of row n"),
        ("/check <n>", "Toggle checkbox row n"),
        ("/image <n> <path>", "Attach an image file to row n"),
        ("/dup <n>", "Duplicate row n below itself"),
        ("/rm <n>", "Remove row n"),
        ("/mv <n> <position>", "Move row n to a position"),
        ("/save", "Save now"),
        ("/login", "Log in again after the session expired"),
        ("/help", "Show this help message"),
        ("/quit", "Save and close the editor"),
    ]
    for cmd, desc in commands:
        table.add_row(cmd, desc)
    console.print(table)


def _row_at(editor: EditorSession, position: str) -> Row | None:
    try:
        index = int(position) - 1
    except ValueError:
        index = -1
    if 0 <= index < len(editor.rows):
        return editor.rows[index]
    console.print(f"[red]No row {position}[/red]")
    return None


async def _ask(prompt: str, password: bool = False) -> str:
    """Read a line without blocking the loop, so autosave timers keep firing.

    The reader is a daemon thread: an abandoned prompt never holds up exit.
    """
    loop = asyncio.get_running_loop()
    answer: asyncio.Future[str] = loop.create_future()

    def _settle(value: str | None, exc: Exception | None) -> None:
        if answer.done():
            return
        if exc is not None:
            answer.set_exception(exc)
        else:
            answer.set_result(value)

    def _read() -> None:
        try:
            value, exc = Prompt.ask(prompt, password=password), None
        except Exception as err:
            value, exc = None, err
        try:
            loop.call_soon_threadsafe(_settle, value, exc)
        except RuntimeError:
            # Loop already closed
            pass

    threading.Thread(target=_read, name="firenotes-prompt", daemon=True).start()
    return await answer


async def _relogin(state: AppState) -> None:
    email = await _ask("Email")
    password = await _ask("Password", password=True)
    try:
        user = await state.login(email, password)
    except FireNotesError as exc:
        console.print(f"[red]Login failed: {exc.message}[/red]")
        return
    console.print(f"[green]Logged in as {user.email}[/green]")


async def handle_editor_command(state: AppState, editor: EditorSession, command: str) -> bool:
    """
    Handle an editor command.

    Returns True if the editor should stay open, False to close it.
    """
    parts = command.strip().split(maxsplit=1)
    cmd = parts[0].lower()
    args = parts[1] if len(parts) > 1 else ""

    if cmd in ("/quit", "/exit", "/q"):
        return False

    elif cmd == "/help":
        print_editor_help()

    elif cmd == "/show":
        print_note(editor)

    elif cmd == "/title":
        editor.set_title(args)

    elif cmd == "/add":
        kind_name, _, content = args.partition(" ")
        try:
            kind = RowKind(kind_name.lower())
        except ValueError:
            console.print("[red]Usage: /add text|bullet|checkbox|image [content][/red]")
            return True
        row = editor.add_row(kind)
        if row is not None and content:
            if kind is RowKind.IMAGE:
                editor.attach_image(row.id, _image_uri(content))
            else:
                editor.update_row(row.id, content)

    elif cmd == "/set":
        position, _, content = args.partition(" ")
        row = _row_at(editor, position)
        if row is not None:
            editor.update_row(row.id, content)

    elif cmd == "/check":
        row = _row_at(editor, args)
        if row is not None:
            if row.kind is not RowKind.CHECKBOX:
                console.print("[red]Not a checkbox row[/red]")
            else:
                editor.toggle_checkbox(row.id)

    elif cmd == "/image":
        position, _, path = args.partition(" ")
        row = _row_at(editor, position)
        if row is not None:
            if row.kind is not RowKind.IMAGE or not path:
                console.print("[red]Usage: /image <n> <path> on an image row[/red]")
            else:
                editor.attach_image(row.id, _image_uri(path))

    elif cmd == "/dup":
        row = _row_at(editor, args)
        if row is not None:
            editor.duplicate_row(row.id)

    elif cmd == "/rm":
        row = _row_at(editor, args)
        if row is not None:
            editor.remove_row(row.id)

    elif cmd == "/mv":
        position, _, target = args.partition(" ")
        row = _row_at(editor, position)
        if row is not None:
            try:
                editor.move_row(row.id, int(target) - 1)
            except ValueError:
                console.print("[red]Usage: /mv <n> <position>[/red]")

    elif cmd == "/save":
        if await editor.flush():
            console.print("[green]Saved[/green]")

    elif cmd == "/login":
        await _relogin(state)
        if state.is_authenticated and editor.is_dirty:
            await editor.flush()

    else:
        console.print(f"[red]Unknown command: {cmd}[/red]")
        console.print("[dim]Type /help for available commands.[/dim]")

    return True


def _image_uri(path: str) -> str:
    """Turn a picked file path into the content reference stored on the row."""
    if "://" in path:
        return path
    resolved = Path(path).expanduser().resolve()
    if not resolved.exists():
        console.print(f"[yellow]Warning: image not found: {resolved}[/yellow]")
    return resolved.as_uri()


async def editor_repl(state: AppState, identifier: str) -> None:
    """Run the editor screen for one note."""
    async with state.open_editor(identifier) as editor:
        console.print(
            Panel.fit(
                f"[bold blue]{editor.display_title}[/bold blue]\n"
                "[dim]Edits autosave after a short pause. Type /help for commands.[/dim]",
                title="Editor",
                border_style="blue",
            )
        )
        print_note(editor)

        while True:
            try:
                text = await _ask(f"[bold blue]{editor.display_title}[/bold blue]")
            except (KeyboardInterrupt, EOFError):
                break
            except asyncio.CancelledError:
                # Ctrl-C at the prompt: leave the editor and let close() flush
                asyncio.current_task().uncancel()
                break

            if state.needs_reauth:
                console.print("[yellow]Session expired. Use /login to sign in again.[/yellow]")
                state.needs_reauth = False

            if not text.strip():
                continue
            if not text.startswith("/"):
                # Plain input appends a text row
                row = editor.add_row(RowKind.TEXT)
                if row is not None:
                    editor.update_row(row.id, text)
                continue
            if not await handle_editor_command(state, editor, text):
                break

    if editor.is_dirty:
        console.print("[red]Some edits could not be saved.[/red]")
    else:
        console.print("[dim]Note saved.[/dim]")


@app.callback()
def main_callback(
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
):
    """Configure logging for every command."""
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s: %(message)s",
            datefmt="%H:%M:%S",
        )
        console.print("[dim]Debug logging enabled[/dim]")
    else:
        setup_logging()


@app.command()
def login(
    email: str = typer.Option(..., "--email", "-e", prompt=True, help="Account email"),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True),
):
    """Log in and remember the session."""

    async def _login(state: AppState) -> None:
        user = await state.login(email, password)
        console.print(f"[green]Logged in as {user.name or user.email}[/green]")

    _run(_login, require_auth=False)


@app.command()
def register(
    name: str = typer.Option(..., "--name", "-n", prompt=True, help="Display name"),
    email: str = typer.Option(..., "--email", "-e", prompt=True, help="Account email"),
    password: str = typer.Option(
        ..., "--password", "-p", prompt=True, hide_input=True, confirmation_prompt=True
    ),
):
    """Create an account and log in."""

    async def _register(state: AppState) -> None:
        user = await state.register(email, password, name)
        console.print(f"[green]Welcome, {user.name or user.email}![/green]")

    _run(_register, require_auth=False)


@app.command()
def logout():
    """Forget the stored session."""

    async def _logout(state: AppState) -> None:
        state.logout()
        console.print("[dim]Logged out.[/dim]")

    _run(_logout, require_auth=False)


@app.command()
def notes():
    """List notes, most recently updated first."""

    async def _list(state: AppState) -> None:
        items = await state.fetch_notes()
        if not items:
            console.print("[dim]No notes yet.[/dim]")
            return

        table = Table(title="Notes", show_header=True)
        table.add_column("#", style="dim")
        table.add_column("ID")
        table.add_column("Title")
        table.add_column("Rows", justify="right")
        table.add_column("Updated")
        for index, note in enumerate(items, 1):
            table.add_row(
                str(index),
                _short(note),
                note.title,
                str(len(note.rows)),
                note.updated_at.astimezone().strftime("%Y-%m-%d %H:%M"),
            )
        console.print(table)

    _run(_list)


@app.command()
def new(
    title: str = typer.Argument("New Note", help="Title of the new note"),
    edit: bool = typer.Option(True, "--edit/--no-edit", help="Open the editor"),
):
    """Create a note."""

    async def _new(state: AppState) -> None:
        note = await state.create_note(title)
        console.print(f"[green]Created note {_short(note)}[/green]")
        if edit:
            await editor_repl(state, note.id)

    _run(_new)


@app.command()
def edit(note_id: str = typer.Argument(..., help="Note ID (or unique prefix)")):
    """Open the editor for a note."""

    async def _edit(state: AppState) -> None:
        await state.fetch_notes()
        await editor_repl(state, note_id)

    _run(_edit)


@app.command()
def delete(note_id: str = typer.Argument(..., help="Note ID (or unique prefix)")):
    """Delete a note."""

    async def _delete(state: AppState) -> None:
        await state.fetch_notes()
        if await state.delete_note(note_id):
            console.print("[green]Note deleted[/green]")

    _run(_delete)


@app.command()
def export(
    note_id: str = typer.Argument(..., help="Note ID (or unique prefix)"),
    fmt: ExportFormat = typer.Option(
        ExportFormat.TEXT, "--format", "-f", help="txt, md or html"
    ),
    out_dir: Optional[str] = typer.Option(
        None, "--out", "-o", help="Directory for the exported file"
    ),
):
    """Export a note as plain text, Markdown or HTML."""

    async def _export(state: AppState) -> None:
        await state.fetch_notes()
        note = state.find_note(note_id)
        if note is None:
            console.print(f"[red]Note not found: {note_id}[/red]")
            raise typer.Exit(1)
        service = build_export_service(export_dir=out_dir, notifier=ConsoleNotifier())
        await service.export_note(note, fmt)

    _run(_export)


@app.command()
def formats():
    """List export formats."""
    table = Table(title="Export Formats", show_header=True, header_style="bold cyan")
    table.add_column("Key", style="green")
    table.add_column("Label")
    table.add_column("Description")
    for item in build_export_service().formats():
        table.add_row(item["key"], item["label"], item["description"])
    console.print(table)


@app.command()
def health():
    """Check API health."""

    async def _health(state: AppState) -> bool:
        status = await state.notes_gateway.health()
        table = Table(title="Health Check", show_header=True)
        table.add_column("Component", style="cyan")
        table.add_column("Status")
        table.add_row(
            "API",
            "[green]OK[/green]" if status.status.upper() == "OK" else f"[red]{status.status}[/red]",
        )
        table.add_row(
            "Database",
            "[green]Connected[/green]"
            if status.database == "Connected"
            else f"[red]{status.database}[/red]",
        )
        console.print(table)
        return status.is_healthy

    healthy = _run(_health, require_auth=False)
    raise typer.Exit(0 if healthy else 1)


def run_cli():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run_cli()
