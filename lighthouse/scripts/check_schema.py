"""Check the connected database against the schema contract.

Usage:
    flask check-schema
"""

from __future__ import annotations

import click
from flask.cli import with_appcontext

from lighthouse.core.schema.contract import SCHEMA_VERSION, inspect_schema
from lighthouse.extensions import db


@click.command("check-schema")
@with_appcontext
def check_schema_command():
    """Report missing tables/columns and revision drift."""
    report = inspect_schema(db.engine)
    if report.ok:
        click.echo(f"Schema OK (expected revision {SCHEMA_VERSION}, found {report.revision or 'none'})")
        return
    for problem in report.problems():
        click.echo(f"- {problem}", err=True)
    raise click.ClickException("schema contract not satisfied")
