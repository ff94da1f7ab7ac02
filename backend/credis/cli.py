# Overview: Flask CLI command groups for bootstrap and maintenance.

# backend/credis/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init-db
#   Create any missing tables (use `flask db upgrade` for migrated databases).
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Store owners:
# - python -m flask owners create --name "Pema" --phone 17123456 --password secret1 [--store-id 1]
#   Create a store owner (prompts if options are omitted).
#
# Balance cache:
# - python -m flask balances rebuild
#   Recompute every customer balance row from the credit ledger.
#
# Maintenance:
# - python -m flask tokens cleanup --retention-days 30
#   Delete expired or revoked sessions older than the retention window.

import click
from flask.cli import with_appcontext

from .container import get_services
from .errors import CredisError
from .extensions import db
from .services.inputs import OwnerRegistration
from .validation import enforce_rules_owner


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create any missing tables."""
    db.create_all()
    click.echo("PASS Tables created.")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete.")


@click.group('owners')
def owners_group():
    """Store owner bootstrap commands."""


@owners_group.command('create')
@click.option('--name', prompt=True, help='Display name')
@click.option('--phone', 'phone_number', prompt=True, help='Login phone number')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password or PIN')
@click.option('--store-id', type=int, default=None, help='Existing store to link')
@with_appcontext
def create_owner_cli(name, phone_number, password, store_id):
    """Create a store owner account."""
    try:
        enforce_rules_owner({"name": name, "phone_number": phone_number}, password)
        owner = get_services().auth.register(
            OwnerRegistration(
                name=name,
                phone_number=phone_number,
                password=password,
                store_id=store_id,
            )
        )
    except CredisError as exc:
        raise click.ClickException(exc.message)

    click.echo(f"PASS Created store owner {owner.id} ({owner.phone_number})")


@click.group('balances')
def balances_group():
    """Customer balance cache commands."""


@balances_group.command('rebuild')
@with_appcontext
def rebuild_balances_cli():
    """Recompute every customer balance row from the credit ledger."""
    count = get_services().credits.rebuild_all_balances()
    click.echo(f"PASS Rebuilt {count} customer balance rows.")


@click.group('tokens')
def tokens_group():
    """Session token maintenance."""


@tokens_group.command('cleanup')
@click.option('--retention-days', type=int, default=30, show_default=True)
@with_appcontext
def cleanup_tokens_cli(retention_days):
    """
    Delete expired or revoked refresh sessions (and their access-token
    records) created more than retention-days ago.
    """
    if retention_days < 0:
        raise click.BadParameter("must be >= 0", param_hint="--retention-days")
    deleted = get_services().auth.cleanup_tokens(retention_days)
    click.echo(f"Deleted {deleted} sessions older than {retention_days} days.")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(owners_group)
    app.cli.add_command(balances_group)
    app.cli.add_command(tokens_group)
