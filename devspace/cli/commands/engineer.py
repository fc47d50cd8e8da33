from typing import Optional

from rich.table import Table
import typer

from devspace.cli.common import console, echo_json, fail, get_workspace
from devspace.contracts.dto import MAX_ENGINEERS, Specialty
from devspace.errors import DevSpaceError, UnassignmentNotConfirmed

app = typer.Typer()


def _fields(name, personality, avatar_url, voice_id, specialty) -> dict:
    return {
        "name": name,
        "personality": personality,
        "avatar_url": avatar_url,
        "voice_id": voice_id,
        "specialty": specialty.value if specialty else None,
    }


@app.command("list")
def list_engineers(json_output: bool = typer.Option(False, "--json", help="Output as JSON")):
    """List the engineer roster."""
    try:
        engineers = get_workspace().roster.list()
    except DevSpaceError as e:
        fail(e)

    if json_output:
        echo_json(engineers)
        return

    table = Table(title=f"AI Engineers ({len(engineers)}/{MAX_ENGINEERS})")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="magenta")
    table.add_column("Specialty", style="green")
    table.add_column("Voice")
    for e in engineers:
        table.add_row(e.id, e.name, e.specialty.value if e.specialty else "-", e.voice_id or "-")
    console.print(table)


@app.command()
def add(
    name: str = typer.Option(..., "--name", "-n", help="Engineer name"),
    personality: str = typer.Option("", "--personality", "-p", help="Personality prompt"),
    avatar_url: str = typer.Option("", "--avatar-url", help="Avatar URL"),
    voice_id: str = typer.Option("", "--voice-id", help="TTS voice id"),
    specialty: Optional[Specialty] = typer.Option(None, "--specialty", "-s"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Add an engineer to the roster."""
    try:
        engineer = get_workspace().roster.create(
            _fields(name, personality, avatar_url, voice_id, specialty)
        )
    except DevSpaceError as e:
        fail(e)

    if json_output:
        echo_json(engineer)
        return
    console.print("[bold green]✓ Engineer created successfully![/bold green]")
    console.print(f"ID: [cyan]{engineer.id}[/cyan]")


@app.command()
def preset(
    preset_id: Optional[str] = typer.Argument(None, help="Preset to add; omit to list presets"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """List presets, or add an engineer from one."""
    try:
        roster = get_workspace().roster
        if preset_id is None:
            options = roster.presets()
            if json_output:
                echo_json(options)
                return
            table = Table(title="Presets")
            table.add_column("ID", style="cyan")
            table.add_column("Name", style="magenta")
            table.add_column("Specialty", style="green")
            table.add_column("Status")
            for option in options:
                p = option.preset
                status = "available" if option.available else "[dim]added[/dim]"
                table.add_row(p.id, p.name, p.specialty.value, status)
            console.print(table)
            return

        engineer = roster.create_from_preset(preset_id)
    except DevSpaceError as e:
        fail(e)

    if json_output:
        echo_json(engineer)
        return
    console.print(f"[bold green]✓ Added {engineer.name}[/bold green] ([cyan]{engineer.id}[/cyan])")


@app.command()
def update(
    engineer_id: str,
    name: str = typer.Option(..., "--name", "-n", help="Engineer name"),
    personality: str = typer.Option("", "--personality", "-p", help="Personality prompt"),
    avatar_url: str = typer.Option("", "--avatar-url", help="Avatar URL"),
    voice_id: str = typer.Option("", "--voice-id", help="TTS voice id"),
    specialty: Optional[Specialty] = typer.Option(None, "--specialty", "-s"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Replace an engineer's details. Omitted options are cleared."""
    try:
        engineer = get_workspace().roster.update(
            engineer_id, _fields(name, personality, avatar_url, voice_id, specialty)
        )
    except DevSpaceError as e:
        fail(e)

    if json_output:
        echo_json(engineer)
        return
    console.print("[bold green]✓ Engineer updated successfully![/bold green]")


@app.command()
def delete(
    engineer_id: str,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompts"),
):
    """Delete an engineer. Assigned tasks become unassigned."""
    try:
        roster = get_workspace().roster
        engineer = roster.get(engineer_id)
        if not yes:
            typer.confirm(f"Delete engineer {engineer.name}?", abort=True)
        try:
            unassigned = roster.delete(engineer_id)
        except UnassignmentNotConfirmed as e:
            if not yes and not typer.confirm(f"{e.message}", default=False):
                console.print("Cancelled.")
                raise typer.Exit(1) from None
            unassigned = roster.delete(engineer_id, confirm_unassign=True)
    except DevSpaceError as e:
        fail(e)

    console.print("[bold green]✓ Engineer deleted successfully![/bold green]")
    if unassigned:
        console.print(f"{len(unassigned)} task(s) unassigned")


@app.command("reset-voices")
def reset_voices():
    """Reset preset engineers' voices to their catalog values."""
    try:
        changed = get_workspace().roster.reset_preset_voices()
    except DevSpaceError as e:
        fail(e)
    console.print(f"[bold green]✓ Reset {changed} voice(s)[/bold green]")
