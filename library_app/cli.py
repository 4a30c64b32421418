import click

from library_app.errors import LibraryError
from library_app.extensions import db
from library_app.services.auth_service import AuthService


def register_commands(app):
    @app.cli.command("init-db")
    def init_db():
        """Create all tables."""
        db.create_all()
        click.echo("tables created")

    @app.cli.command("create-admin")
    @click.option("--name", required=True)
    @click.option("--email", required=True)
    @click.option("--password", required=True, help="8-12 characters")
    @click.option("--phone", required=True)
    def create_admin(name, email, password, phone):
        """Create an already approved admin account."""
        try:
            user = AuthService.create_admin(name, email, password, phone)
        except LibraryError as e:
            details = "; ".join(err["msg"] for err in getattr(e, "errors", []))
            raise click.ClickException(f"{e.message}: {details}" if details else e.message)
        click.echo(f"admin created: id={user.id} token={user.token}")
