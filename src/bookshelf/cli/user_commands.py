"""User administration CLI commands."""

from collections.abc import Iterator
from contextlib import contextmanager

import typer
from pydantic import validate_email
from pydantic_core import PydanticCustomError
from rich.console import Console
from rich.table import Table
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from src.bookshelf.core.security import hash_password
from src.bookshelf.core.services import DbSessionService
from src.bookshelf.entities import UserRepository
from src.bookshelf.runtime.context import get_config

console = Console()

users_app = typer.Typer(help="Manage application users")


@contextmanager
def _db_session() -> Iterator[Session]:
    db_service = DbSessionService(get_config())
    try:
        with db_service.session_scope() as session:
            yield session
    finally:
        db_service.dispose()


@users_app.command("list")
def list_users() -> None:
    """List all users, newest first."""
    with _db_session() as session:
        users = UserRepository(session).list_all()

    if not users:
        console.print("[yellow]No users found[/yellow]")
        return

    table = Table(title="Users")
    table.add_column("ID", style="cyan")
    table.add_column("Username", style="green")
    table.add_column("Email", style="blue")
    table.add_column("Created", style="magenta")

    for user in users:
        table.add_row(
            str(user.id),
            user.username,
            user.email,
            user.created_at.strftime("%Y-%m-%d %H:%M:%S"),
        )

    console.print(table)
    console.print(f"\n[green]Found {len(users)} users[/green]")


@users_app.command("add")
def add_user(
    username: str = typer.Argument(..., help="Username for the new user"),
    email: str = typer.Option(..., "--email", "-e", help="Email address"),
    password: str = typer.Option(
        ..., "--password", "-p", help="Password", prompt=True, hide_input=True
    ),
) -> None:
    """Add a new user."""
    if len(username) < 3:
        console.print("[red]❌ Username must be at least 3 characters[/red]")
        raise typer.Exit(code=1)
    try:
        _, email = validate_email(email)
    except PydanticCustomError as e:
        console.print(f"[red]❌ Invalid email address: {email}[/red]")
        raise typer.Exit(code=1) from e
    if len(password) < 6:
        console.print("[red]❌ Password must be at least 6 characters[/red]")
        raise typer.Exit(code=1)

    try:
        with _db_session() as session:
            user = UserRepository(session).create(
                username=username, email=email, password_hash=hash_password(password)
            )
    except IntegrityError as e:
        console.print(f"[red]❌ User '{username}' or email '{email}' already exists[/red]")
        raise typer.Exit(code=1) from e

    console.print(f"[green]✅ Created user '{username}' with id {user.id}[/green]")
