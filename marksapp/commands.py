import click

from .extensions import db
from .errors import MarksError
from .security.identity import Role

def register_commands(app):
    @app.cli.command("init-db")
    def init_db():
        """Create all tables."""
        db.create_all()
        click.echo("Database tables created")

    @app.cli.command("create-user")
    @click.option("--email", required=True)
    @click.option("--name", required=True)
    @click.option("--password", required=True, prompt=True, hide_input=True,
                  confirmation_prompt=True)
    @click.option("--role", type=click.Choice([r.value for r in Role]),
                  default=Role.TEACHER.value, show_default=True)
    def create_user_command(email, name, password, role):
        """Create a user; the only way to get an ADMIN account."""
        from .blueprints.auth.routes import create_user
        try:
            u = create_user(email, name, password, role=Role.parse(role))
        except MarksError as e:
            raise click.ClickException(e.message)
        click.echo(f"Created {u.role.value} {u.email} (id={u.id})")
