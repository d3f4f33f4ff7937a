# smartpark/cli.py
"""
Operator commands.
Usage: python -m smartpark.cli --help   (or the `smartpark` console script)
"""

import secrets
from datetime import date

import click
from sqlalchemy.orm import Session

from smartpark.config import settings
from smartpark.database import SessionLocal, create_tables
from smartpark.errors import SmartParkError
from smartpark.models.user import User, UserRole
from smartpark.services import auth_service, report_service
from smartpark.utils.logger import get_logger

logger = get_logger(__name__)


@click.group()
def cli():
    """SmartPark parking management CLI."""
    pass


@cli.command("init-db")
def init_db():
    """Create all database tables."""
    create_tables()
    click.echo("All tables created")


@cli.command("create-admin")
@click.option("--username", required=True)
@click.option("--password", default=None, help="Prompted (hidden) when omitted.")
@click.option("--generate-password", is_flag=True, help="Generate a random password and print it once.")
def create_admin(username: str, password: str, generate_password: bool):
    """
    One-time admin bootstrap. Only runs with ALLOW_ADMIN_BOOTSTRAP=true;
    unset it again once the first admin exists.
    """
    if not settings.ALLOW_ADMIN_BOOTSTRAP:
        raise click.ClickException("Admin bootstrap is disabled. Set ALLOW_ADMIN_BOOTSTRAP=true to run it.")
    if password and generate_password:
        raise click.UsageError("Use either --password or --generate-password, not both")

    if generate_password:
        password = secrets.token_urlsafe(18)
    elif not password:
        password = click.prompt("Password", hide_input=True, confirmation_prompt=True)

    db: Session = SessionLocal()
    try:
        auth_service.create_user(db, username, password, UserRole.ADMIN.value)
    except SmartParkError as e:
        raise click.ClickException(e.message)
    finally:
        db.close()

    click.echo(f"Admin user {username} created successfully")
    if generate_password:
        click.echo(f"Generated password (shown once): {password}")
    logger.info(f"[CLI] Admin '{username}' bootstrapped")


def _load_user(db: Session, username: str) -> User:
    user = db.query(User).filter(User.username == username, User.is_active == True).first()  # noqa: E712
    if not user:
        raise click.ClickException(f"No active user named {username}")
    return user


@cli.command("generate-daily")
@click.option("--date", "report_date", default=None, help="Report date (YYYY-MM-DD), defaults to today")
@click.option("--as-user", "username", required=True, help="Username recorded as the generator")
def generate_daily(report_date: str, username: str):
    """Generate (or refresh) a daily report."""
    try:
        day = date.fromisoformat(report_date) if report_date else date.today()
    except ValueError:
        raise click.BadParameter("expected YYYY-MM-DD", param_hint="--date")

    db: Session = SessionLocal()
    try:
        report, _, summary = report_service.generate_daily(db, day, _load_user(db, username))
        click.echo(f"Daily report {report.period_key} (id={report.id}): "
                   f"{summary['total_cars_parked']} cars, revenue {summary['total_revenue']}")
    except SmartParkError as e:
        raise click.ClickException(e.message)
    finally:
        db.close()


@cli.command("generate-monthly")
@click.option("--year", type=int, required=True)
@click.option("--month", type=click.IntRange(1, 12), required=True, help="Month number, 1 = January")
@click.option("--as-user", "username", required=True, help="Username recorded as the generator")
def generate_monthly(year: int, month: int, username: str):
    """Generate (or refresh) a monthly report."""
    db: Session = SessionLocal()
    try:
        report, summary = report_service.generate_monthly(db, year, month - 1, _load_user(db, username))
        click.echo(f"Monthly report {report.period_key} (id={report.id}): "
                   f"{summary['total_cars_parked']} cars, revenue {summary['total_revenue']}")
    except SmartParkError as e:
        raise click.ClickException(e.message)
    finally:
        db.close()


if __name__ == "__main__":
    cli()
