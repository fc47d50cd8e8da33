from typing import Optional

from rich.table import Table
import typer

from devspace.cli.common import console, echo_json, fail, get_workspace
from devspace.contracts.dto import TaskStatus
from devspace.errors import DevSpaceError

app = typer.Typer()

STATUS_COLORS = {
    TaskStatus.PENDING: "yellow",
    TaskStatus.RUNNING: "blue",
    TaskStatus.COMPLETED: "green",
}


@app.command("list")
def list_tasks(json_output: bool = typer.Option(False, "--json", help="Output as JSON")):
    """List tasks, newest first."""
    try:
        workspace = get_workspace()
        tasks = workspace.tasks.list()
        engineers = workspace.roster.list()
    except DevSpaceError as e:
        fail(e)

    if json_output:
        echo_json(tasks)
        return

    table = Table(title="Tasks")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Description")
    table.add_column("Engineer", style="magenta")
    table.add_column("Status")
    for t in tasks:
        color = STATUS_COLORS[t.status]
        table.add_row(
            t.id,
            t.description,
            workspace.tasks.resolve_engineer_name(t, engineers),
            f"[{color}]{t.status.value}[/{color}]",
        )
    console.print(table)

    counts = workspace.tasks.count_by_status()
    console.print(", ".join(f"{status.value}: {count}" for status, count in counts.items()))


@app.command()
def add(
    description: str = typer.Option(..., "--description", "-d", help="What to do"),
    engineer_id: Optional[str] = typer.Option(None, "--engineer", "-e", help="Engineer ID"),
    status: TaskStatus = typer.Option(TaskStatus.PENDING, "--status"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Create a task, optionally assigned to an engineer."""
    try:
        task = get_workspace().tasks.create(
            {"description": description, "engineer_id": engineer_id, "status": status.value}
        )
    except DevSpaceError as e:
        fail(e)

    if json_output:
        echo_json(task)
        return
    console.print("[bold green]✓ Task created successfully![/bold green]")
    console.print(f"ID: [cyan]{task.id}[/cyan]")


@app.command()
def delete(task_id: str):
    """Delete a task, whatever its status."""
    try:
        get_workspace().tasks.delete(task_id)
    except DevSpaceError as e:
        fail(e)
    console.print("[bold green]✓ Task deleted[/bold green]")


@app.command()
def reset(yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt")):
    """Replace all tasks with a single "edit README" task."""
    if not yes:
        typer.confirm("This deletes every task. Continue?", abort=True)
    try:
        task = get_workspace().tasks.reset_to_starter_task()
    except DevSpaceError as e:
        fail(e)
    console.print(f"[bold green]✓ Tasks reset[/bold green] ([cyan]{task.id}[/cyan])")
