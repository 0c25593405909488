"""
Flask CLI commands.

    flask --app run.py create-superadmin admin@campus.edu Abebe Kebede
    flask --app run.py purge-revoked-tokens
"""
import click
from flask import current_app
from flask.cli import with_appcontext
from marshmallow import ValidationError

from campus_partners.errors import ApiError
from campus_partners.models.user import ROLE_SUPER_ADMIN
from campus_partners.schemas.auth_schema import AssignAdminSchema
from campus_partners.services import provisioning, session


@click.command('create-superadmin')
@click.argument('email')
@click.argument('first_name')
@click.argument('last_name')
@with_appcontext
def create_superadmin_command(email, first_name, last_name):
    """Create the first SuperAdmin account and print its one-time password."""
    try:
        data = AssignAdminSchema().load({
            "email": email,
            "first_name": first_name,
            "last_name": last_name,
            "role": ROLE_SUPER_ADMIN,
        })
        user, password = provisioning.assign_admin(data)
    except ValidationError as e:
        raise click.ClickException(f"Invalid input: {e.messages}")
    except ApiError as e:
        raise click.ClickException(e.message)

    current_app.logger.info(f"CLI: created SuperAdmin user_id={user.user_id}")
    click.echo(f"SuperAdmin created: {user.email}")
    click.echo(f"Generated password (shown once): {password}")


@click.command('purge-revoked-tokens')
@with_appcontext
def purge_revoked_tokens_command():
    """Delete logout blocklist entries for tokens that have already expired."""
    removed = session.purge_expired_tokens()
    click.echo(f"Removed {removed} expired revoked tokens")


def register_commands(app):
    app.cli.add_command(create_superadmin_command)
    app.cli.add_command(purge_revoked_tokens_command)
