"""
FILE: kanban/cli/commands/users.py
PURPOSE: Account commands (register, login, logout, whoami)
"""

import typer

from ..main import (
    app,
    console,
    clear_session_token,
    current_session,
    get_service,
    save_session_token,
    unwrap,
)


@app.command()
def register(
    email: str = typer.Argument(..., help="Email address"),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True, help="Password"),
    confirm: str = typer.Option(
        ..., "--confirm", prompt="Repeat password", hide_input=True, help="Password again"
    ),
):
    """
    Create an account.

    Example:
        kanban register alice@example.com
    """
    service = get_service()
    unwrap(service.validate_password(password, confirm))
    unwrap(service.register(email, password))
    console.print(f"[green]✓ Registered[/green] {email}")


@app.command()
def login(
    email: str = typer.Argument(..., help="Email address"),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True, help="Password"),
):
    """
    Log in; later commands act as this user until logout.

    Example:
        kanban login alice@example.com
    """
    session = unwrap(get_service().login(email, password))
    save_session_token(session.token)
    console.print(f"[green]✓ Logged in as[/green] {session.email}")


@app.command()
def logout():
    """Log out the current user."""
    session = current_session()
    unwrap(get_service().logout(session))
    clear_session_token()
    console.print(f"[green]✓ Logged out[/green] {session.email}")


@app.command()
def whoami():
    """Show the logged in user."""
    console.print(current_session().email)
