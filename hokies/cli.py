import os
import time
import click
from flask import current_app
from flask.cli import with_appcontext
from flask_migrate import upgrade as alembic_upgrade, stamp as alembic_stamp, migrate as alembic_migrate
from hokies.services.drops import find_assignment_mismatches
from hokies.services.scheduler import get_scheduler


def _assert_safe_for_upgrade():
    # Prevent accidental prod upgrades unless explicitly allowed
    app_env = (os.getenv("APP_ENV") or "").lower()
    if app_env == "production":
        if (os.getenv("ALLOW_DB_MIGRATIONS") or "").lower() not in ("1", "true", "yes"):
            raise click.ClickException("Refusing to run DB migration in production without ALLOW_DB_MIGRATIONS=true")


@click.command("db-migrate-safe")
@click.option("-m", "--message", default="auto migration", help="Migration message")
@with_appcontext
def db_migrate_safe(message):
    """Generate a new migration script from current models."""
    alembic_migrate(message=message)
    click.echo("Migration script generated.")


@click.command("db-upgrade-safe")
@with_appcontext
def db_upgrade_safe():
    """Apply migrations to the configured database."""
    _assert_safe_for_upgrade()
    alembic_upgrade()
    click.echo("Database upgraded.")


@click.command("db-stamp-safe")
@click.option("--revision", default="head", help="Revision to stamp, default 'head'")
@with_appcontext
def db_stamp_safe(revision):
    """Mark the database at a given revision without running migrations."""
    _assert_safe_for_upgrade()
    alembic_stamp(revision)
    click.echo(f"Database stamped at {revision}.")


@click.command("drops-tick")
@with_appcontext
def drops_tick():
    """Activate due scheduled drops and complete sold-out live drops once."""
    scheduler = get_scheduler()
    scheduler.sync()
    activated = scheduler.tick()
    completed = scheduler.sweep()
    click.echo(f"Activated {len(activated)} drop(s), completed {len(completed)} drop(s).")


@click.command("run-scheduler")
@with_appcontext
def run_scheduler():
    """Run the countdown scheduler in the foreground until interrupted."""
    scheduler = get_scheduler()
    scheduler.start()
    click.echo("Drop scheduler running, Ctrl+C to stop.")
    try:
        while scheduler.running:
            time.sleep(1)
    except KeyboardInterrupt:
        pass
    finally:
        scheduler.stop()


@click.command("drops-check")
@with_appcontext
def drops_check():
    """Report items whose drop assignment disagrees with drop membership."""
    problems = find_assignment_mismatches()
    for problem in problems:
        click.echo(problem)
    if problems:
        raise click.ClickException(f"{len(problems)} assignment problem(s) found")
    click.echo("Drop assignments are consistent.")


def register_cli(app):
    app.cli.add_command(db_migrate_safe)
    app.cli.add_command(db_upgrade_safe)
    app.cli.add_command(db_stamp_safe)
    app.cli.add_command(drops_tick)
    app.cli.add_command(run_scheduler)
    app.cli.add_command(drops_check)
