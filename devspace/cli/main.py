import typer

from devspace.cli.commands import connection, engineer, task
from devspace.config import Settings
from devspace.logging import setup_logging

app = typer.Typer(
    name="devspace",
    help="Manage AI engineers, their tasks and the GitHub repository they work on",
    add_completion=False,
)

app.add_typer(engineer.app, name="engineer", help="Manage the engineer roster")
app.add_typer(task.app, name="task", help="Manage tasks")
app.add_typer(connection.app, name="connection", help="Manage the GitHub repository binding")


@app.callback()
def callback():
    """
    DevSpace CLI
    """
    settings = Settings()
    setup_logging(
        service_name=settings.service_name,
        log_format=settings.log_format,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    app()
