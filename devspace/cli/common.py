import json
from typing import Any, NoReturn

from pydantic import BaseModel
from rich.console import Console
import typer

from devspace.config import Settings
from devspace.errors import DevSpaceError
from devspace.workspace import Workspace

console = Console()


def get_workspace() -> Workspace:
    # Fresh settings on every invocation so env changes are picked up
    settings = Settings()
    settings.data_dir = settings.data_dir.expanduser()
    return Workspace.build(settings)


def resolve_token(token: str | None) -> str:
    token = token or Settings().github_token
    if not token:
        fail(DevSpaceError("GitHub token not found. Pass --token or set GITHUB_TOKEN."))
    return token


def echo_json(data: BaseModel | list[BaseModel] | dict[str, Any]) -> None:
    if isinstance(data, BaseModel):
        payload = data.model_dump(mode="json")
    elif isinstance(data, list):
        payload = [item.model_dump(mode="json") for item in data]
    else:
        payload = data
    typer.echo(json.dumps(payload, indent=2))


def fail(error: DevSpaceError) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {error.message}")
    raise typer.Exit(1)
