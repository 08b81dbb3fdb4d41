"""Versioned schema contract checked before the app serves traffic.

Writes assume every column below exists. Instead of reacting to
missing-column errors at request time, the deployment is refused up front
when the database lags behind the code.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import sqlalchemy as sa
from sqlalchemy.engine import Engine

# Must match the newest alembic revision under lighthouse/migrations/versions.
SCHEMA_VERSION = "20260301_initial_schema"

REQUIRED_COLUMNS: dict[str, frozenset[str]] = {
    "users": frozenset(
        {
            "id",
            "email",
            "name",
            "password_hash",
            "is_admin",
            "last_login",
            "reset_password_token",
            "reset_password_expires",
            "reset_password_used",
            "reset_password_consumed",
            "created_at",
            "updated_at",
        }
    ),
    "categories": frozenset({"id", "name", "description", "sort_order", "created_at", "updated_at"}),
    "products": frozenset(
        {
            "id",
            "name",
            "description",
            "price",
            "category_id",
            "image_url",
            "is_featured",
            "is_available",
            "sku",
            "stock",
            "created_at",
            "updated_at",
        }
    ),
    "site_settings": frozenset(
        {
            "id",
            "hero_title",
            "hero_subtitle",
            "hero_image_url",
            "story_html",
            "visit_html",
            "schedule_json",
            "address",
            "map_embed_url",
            "footer_html",
            "created_at",
            "updated_at",
        }
    ),
    "pages": frozenset(
        {"id", "slug", "title", "content", "hero_image_url", "status", "sort_order", "created_at", "updated_at"}
    ),
    "contacts": frozenset({"id", "name", "email", "subject", "message", "is_read", "created_at", "updated_at"}),
}


class SchemaContractError(RuntimeError):
    def __init__(self, problems: list[str]):
        self.problems = problems
        super().__init__("Database schema does not satisfy contract: " + "; ".join(problems))


@dataclass
class SchemaReport:
    missing_tables: list[str] = field(default_factory=list)
    missing_columns: dict[str, list[str]] = field(default_factory=dict)
    revision: str | None = None
    revision_mismatch: bool = False

    @property
    def ok(self) -> bool:
        return not (self.missing_tables or self.missing_columns or self.revision_mismatch)

    def problems(self) -> list[str]:
        out = [f"missing table {name}" for name in self.missing_tables]
        for table, columns in sorted(self.missing_columns.items()):
            out.append(f"{table} missing columns {', '.join(columns)}")
        if self.revision_mismatch:
            out.append(f"alembic revision {self.revision} != expected {SCHEMA_VERSION}")
        return out


def inspect_schema(engine: Engine) -> SchemaReport:
    inspector = sa.inspect(engine)
    existing_tables = set(inspector.get_table_names())
    report = SchemaReport()
    for table, required in REQUIRED_COLUMNS.items():
        if table not in existing_tables:
            report.missing_tables.append(table)
            continue
        present = {col["name"] for col in inspector.get_columns(table)}
        missing = sorted(required - present)
        if missing:
            report.missing_columns[table] = missing

    # Databases built with create_all() carry no alembic bookkeeping.
    if "alembic_version" in existing_tables:
        with engine.connect() as conn:
            report.revision = conn.execute(sa.text("SELECT version_num FROM alembic_version")).scalar()
        report.revision_mismatch = report.revision != SCHEMA_VERSION
    return report


def verify_schema(engine: Engine) -> SchemaReport:
    """Raise SchemaContractError unless the database satisfies the contract."""
    report = inspect_schema(engine)
    if not report.ok:
        raise SchemaContractError(report.problems())
    return report


__all__ = ["REQUIRED_COLUMNS", "SCHEMA_VERSION", "SchemaContractError", "SchemaReport", "inspect_schema", "verify_schema"]
