"""Flask CLI commands for Salem."""

from __future__ import annotations

import click

from .errors import ValidationError


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("salem-init-db")
    def salem_init_db() -> None:
        """Create the database schema."""

        from .extensions import get_engine
        from .infra.database import init_database

        init_database(get_engine(app))
        click.echo("Database schema is up to date.")

    @app.cli.command("salem-create-user")
    @click.argument("username")
    @click.password_option()
    def salem_create_user(username: str, password: str) -> None:
        """Create a login for USERNAME."""

        from .extensions import get_session_factory
        from .services.auth import create_user

        try:
            user = create_user(
                username=username, password=password, session_factory=get_session_factory(app)
            )
        except ValidationError as exc:
            raise click.ClickException(str(exc)) from exc
        click.echo(f"Created user {user.username} (id={user.id}).")
