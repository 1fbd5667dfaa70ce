# robomatch/cli.py
import click

from .exceptions import ValidationError
from .extensions import db
from .models.user import ROLES
from .services.profiles import register_account


def register_cli(app):
    @app.cli.command("init-db")
    def init_db():
        """Create all tables (use `flask db upgrade` once migrations exist)."""
        db.create_all()
        click.echo("Database tables created.")

    @app.cli.command("create-account")
    @click.option("--role", type=click.Choice(ROLES), prompt="Account type")
    @click.option("--email", prompt="Email")
    @click.option("--first-name", prompt="First name")
    @click.option("--last-name", prompt="Last name")
    @click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
    def create_account(role, email, first_name, last_name, password):
        """Create a client or technician account from the shell."""
        try:
            user = register_account(
                role=role,
                email=email,
                password=password,
                first_name=first_name,
                last_name=last_name,
            )
        except ValidationError as e:
            raise click.ClickException(e.message)
        click.echo(f"{role.capitalize()} account {user.email} created (id={user.id}).")
