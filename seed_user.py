import os
import click
from flask import current_app
from flask.cli import with_appcontext
from configs import db
from dao.storage import get_storage
from db.models.user import UserRole
from utils.passwords import hash_password

SEED_USERS = [
    {
        "email": "admin@example.com",
        "first_name": "System",
        "last_name": "Admin",
        "role": UserRole.ADMIN,
        "password_env": "SEED_ADMIN_PASSWORD",
    },
    {
        "email": "stock@example.com",
        "first_name": "Warehouse",
        "last_name": "Staff",
        "role": UserRole.STOCK,
        "password_env": "SEED_STOCK_PASSWORD",
    },
]


def seed_users(storage) -> list:
    """Create the staff accounts that are missing; returns the created emails."""
    created = []
    for account in SEED_USERS:
        if storage.get_user_by_email(account["email"]) is not None:
            continue
        password = os.getenv(account["password_env"])
        if not password:
            raise click.ClickException(f"{account['password_env']} is not set")
        storage.upsert_user(
            email=account["email"],
            first_name=account["first_name"],
            last_name=account["last_name"],
            role=account["role"],
            password_hash=hash_password(password),
        )
        created.append(account["email"])
    return created


@click.command("seed-users")
@with_appcontext
def seed_users_command():
    """Create the default ADMIN and STOCK accounts."""
    created = seed_users(get_storage())
    for email in created:
        click.echo(f"created {email}")
    if not created:
        click.echo("nothing to do")


@click.command("init-db")
@with_appcontext
def init_db_command():
    """Create all tables (relational storage only)."""
    if not current_app.config.get("SQLALCHEMY_DATABASE_URI"):
        raise click.ClickException("DATABASE_URL is not set")
    db.create_all()
    click.echo("tables created")


def register_commands(app):
    app.cli.add_command(seed_users_command)
    app.cli.add_command(init_db_command)
