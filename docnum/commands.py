# docnum/commands.py
import click
from flask.cli import with_appcontext

from docnum.errors import NumberingError
from docnum.extensions import db
from docnum.services import documents


@click.command("init-db")
@with_appcontext
def init_db_command():
    """Creates the counter and document tables if they are missing."""
    db.create_all()
    click.echo("Database tables are ready.")


@click.command("list-counters")
@with_appcontext
def list_counters_command():
    """Prints every scope counter."""
    rows = documents.counters_snapshot(db.session)
    if not rows:
        click.echo("No counters yet.")
        return
    for row in rows:
        click.echo(
            f"{row['year']}  {row['department']:<10} {row['document_type']:<20} {row['counter']}"
        )


@click.command("reset-counters")
@with_appcontext
@click.option("--department", help="Department code of a single scope.")
@click.option("--type", "document_type", help="Document type of a single scope.")
@click.option("--year", type=int, help="Year of a single scope.")
def reset_counters_command(department, document_type, year):
    """Resets one scope counter, or all of them when no scope is given."""
    if department is None and document_type is None and year is None:
        total = documents.reset_all_counters(db.session)
        click.echo(f"{total} counters reset to 0.")
        return

    try:
        documents.reset_counter(db.session, department, document_type, year)
    except NumberingError as e:
        raise click.ClickException(e.message)
    click.echo(f"Counter {document_type} for {department} {year} reset to 0.")


@click.command("next-number")
@with_appcontext
@click.argument("document_type")
@click.argument("department")
def next_number_command(document_type, department):
    """Shows the number the next document of this type would receive."""
    preview = documents.preview_next_number(db.session, document_type, department)
    click.echo(preview["documentNumber"])


def register_commands(app):
    """Registers the CLI commands on the application."""
    app.cli.add_command(init_db_command)
    app.cli.add_command(list_counters_command)
    app.cli.add_command(reset_counters_command)
    app.cli.add_command(next_number_command)
