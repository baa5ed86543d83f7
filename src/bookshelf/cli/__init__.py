"""Main CLI application module."""

import typer
import uvicorn
from rich.console import Console

from src.bookshelf.runtime.context import get_config

from .user_commands import users_app

console = Console()

app = typer.Typer(
    help="📚 Bookshelf API - server and administration commands",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(users_app, name="users")


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host", "-h", help="Bind address"),
    port: int | None = typer.Option(None, "--port", "-p", help="Listening port"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
) -> None:
    """Run the API server with uvicorn."""
    config = get_config()
    host = host or config.app.host
    port = port or config.app.port
    console.print(
        f"[green]🚀 Serving Bookshelf API on http://{host}:{port} "
        f"({config.app.environment})[/green]"
    )
    uvicorn.run(
        "src.bookshelf.api.http.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        access_log=False,  # We handle access logging in middleware
    )


@app.command("init-db")
def init_db_command() -> None:
    """Create all database tables."""
    from src.bookshelf.runtime.init_db import init_db

    init_db()
    console.print("[green]✅ Database tables created[/green]")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
