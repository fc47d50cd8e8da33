import asyncio
from typing import Optional

from rich.table import Table
import typer

from devspace.cli.common import console, echo_json, fail, get_workspace, resolve_token
from devspace.contracts.dto import ConnectionCandidate, ConnectionState, ConnectionStatus
from devspace.errors import DevSpaceError

app = typer.Typer()

TOKEN_OPTION = typer.Option(None, "--token", envvar="GITHUB_TOKEN", help="GitHub access token")

STATE_STYLES = {
    ConnectionState.NOT_CONFIGURED: "dim",
    ConnectionState.CHECKING: "yellow",
    ConnectionState.CONNECTED: "green",
    ConnectionState.ERROR: "red",
}


def _print_status(status: ConnectionStatus) -> None:
    style = STATE_STYLES[status.status]
    console.print(f"Status: [{style}]{status.status.value}[/{style}]")
    console.print(status.message)
    if status.branches is not None:
        console.print(f"Engineer branches: {status.branches}")


@app.command()
def test(
    repo: str = typer.Argument(..., help="Repository as owner/repo"),
    branch: str = typer.Option("", "--branch", "-b", help="Base branch (default: repo default)"),
    token: Optional[str] = TOKEN_OPTION,
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Verify access to a repository without saving it."""
    token = resolve_token(token)
    try:
        manager = get_workspace().connection
        status = asyncio.run(manager.test_selection(repo, token, base_branch=branch))
    except DevSpaceError as e:
        fail(e)

    if json_output:
        echo_json(status)
    else:
        _print_status(status)
    if status.status != ConnectionState.CONNECTED:
        raise typer.Exit(1)


@app.command()
def save(
    repo: str = typer.Argument(..., help="Repository as owner/repo"),
    branch: str = typer.Option("", "--branch", "-b", help="Base branch (default: main)"),
    token: Optional[str] = TOKEN_OPTION,
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Verify a repository and save it as the workspace binding."""
    token = resolve_token(token)
    candidate = ConnectionCandidate.from_full_name(repo, base_branch=branch)
    try:
        manager = get_workspace().connection
        status = asyncio.run(manager.test_connection(candidate, token))
        if status.status != ConnectionState.CONNECTED:
            _print_status(status)
            raise typer.Exit(1)
        connection = manager.save_connection(candidate)
    except DevSpaceError as e:
        fail(e)

    if json_output:
        echo_json(connection)
        return
    console.print("[bold green]✓ GitHub connection saved successfully![/bold green]")
    console.print(f"Repository: [cyan]{connection.full_name}[/cyan]")
    console.print(f"Base branch: {connection.base_branch}")


@app.command()
def show(
    token: Optional[str] = TOKEN_OPTION,
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Show the saved binding and re-verify it when a token is available."""
    try:
        manager = get_workspace().connection
        connection = manager.load_connection()
        status = manager.status
        if connection is not None and token:
            status = asyncio.run(manager.refresh(token))
    except DevSpaceError as e:
        fail(e)

    if json_output:
        echo_json(
            {
                "connection": connection.model_dump(mode="json") if connection else None,
                "status": status.model_dump(mode="json"),
            }
        )
        return
    if connection is None:
        console.print("No repository connected")
        return
    console.print(f"Repository: [cyan]{connection.full_name}[/cyan]")
    console.print(f"Base branch: {connection.base_branch}")
    _print_status(status)


@app.command()
def disconnect():
    """Remove the saved binding."""
    try:
        removed = get_workspace().connection.disconnect()
    except DevSpaceError as e:
        fail(e)
    console.print("Disconnected" if removed else "No repository connected")


@app.command()
def repos(
    token: Optional[str] = TOKEN_OPTION,
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """List repositories the token can access."""
    token = resolve_token(token)
    try:
        client = get_workspace().connection.client
        repositories = asyncio.run(client.list_repositories(token))
    except DevSpaceError as e:
        fail(e)

    if json_output:
        echo_json(repositories)
        return
    table = Table(title="Repositories")
    table.add_column("Repository", style="cyan")
    table.add_column("Default branch", style="green")
    table.add_column("Private")
    for r in repositories:
        table.add_row(r.full_name, r.default_branch or "-", "yes" if r.private else "no")
    console.print(table)
