import importlib.util
import io
from pathlib import Path

import pytest
from alembic.migration import MigrationContext
from alembic.operations import Operations

APPOINTMENTS_REVISION = (
    Path(__file__).resolve().parents[2] / "migrations" / "versions" / "20261019_03_create_appointments.py"
)


def _render_upgrade(dialect_name: str) -> str:
    spec = importlib.util.spec_from_file_location("create_appointments_revision", APPOINTMENTS_REVISION)
    revision = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(revision)

    buffer = io.StringIO()
    context = MigrationContext.configure(
        dialect_name=dialect_name,
        opts={"as_sql": True, "output_buffer": buffer},
    )
    with Operations.context(context):
        revision.upgrade()
    return buffer.getvalue()


@pytest.mark.parametrize("dialect_name", ["sqlite", "postgresql"])
def test_active_slot_index_is_partial_on_every_dialect(dialect_name):
    ddl = _render_upgrade(dialect_name)

    index_statement = next(
        statement for statement in ddl.split(";") if "uq_appointments_active_slot" in statement
    )
    assert "CREATE UNIQUE INDEX" in index_statement
    assert "WHERE status IN ('pending', 'confirmed')" in index_statement
