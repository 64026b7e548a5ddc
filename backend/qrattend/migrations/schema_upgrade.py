"""Ordered, idempotent schema upgrade steps for databases created by older releases.

Each step inspects the live schema and only acts when its change is missing,
so the whole list can be applied any number of times.
"""
from dataclasses import dataclass
from typing import Callable, List

from sqlalchemy import inspect, text
from sqlalchemy.engine import Connection, Engine

@dataclass(frozen=True)
class UpgradeStep:
    name: str
    is_applied: Callable[[Connection], bool]
    apply: Callable[[Connection], None]

def _columns(conn: Connection, table: str) -> set:
    inspector = inspect(conn)
    if not inspector.has_table(table):
        return set()
    return {column['name'] for column in inspector.get_columns(table)}

def _has_table(conn: Connection, table: str) -> bool:
    return inspect(conn).has_table(table)

def _add_columns_step(name: str, table: str, columns: List[tuple]) -> UpgradeStep:
    """Step adding ``(column, ddl_type)`` pairs to ``table``."""
    def is_applied(conn):
        if not _has_table(conn, table):
            return True
        existing = _columns(conn, table)
        return all(column in existing for column, _ in columns)

    def apply(conn):
        existing = _columns(conn, table)
        for column, ddl_type in columns:
            if column not in existing:
                conn.execute(text(f'ALTER TABLE {table} ADD COLUMN {column} {ddl_type}'))

    return UpgradeStep(name, is_applied, apply)

def _unique_index_step(name: str, table: str, index: str, columns: List[str]) -> UpgradeStep:
    def is_applied(conn):
        if not _has_table(conn, table):
            return True
        inspector = inspect(conn)
        names = {i['name'] for i in inspector.get_indexes(table)}
        names.update(c['name'] for c in inspector.get_unique_constraints(table))
        return index in names

    def apply(conn):
        conn.execute(text(
            f'CREATE UNIQUE INDEX IF NOT EXISTS {index} ON {table} ({", ".join(columns)})'
        ))

    return UpgradeStep(name, is_applied, apply)

UPGRADE_STEPS = [
    _add_columns_step('periods_teacher_owner', 'periods', [
        ('teacher_id', 'INTEGER REFERENCES users(id)'),
    ]),
    _add_columns_step('periods_tags', 'periods', [
        ('strand', 'VARCHAR(100)'),
        ('section', 'VARCHAR(100)'),
        ('subject', 'VARCHAR(255)'),
    ]),
    _add_columns_step('attendance_location', 'attendance_records', [
        ('latitude', 'INTEGER'),
        ('longitude', 'INTEGER'),
        ('accuracy', 'INTEGER'),
        ('location_status', 'VARCHAR(14)'),
    ]),
    _add_columns_step('attendance_review', 'attendance_records', [
        ('reviewed_by', 'INTEGER REFERENCES users(id)'),
        ('reviewed_at', 'DATETIME'),
    ]),
    _unique_index_step(
        'attendance_one_per_day', 'attendance_records',
        'uq_attendance_student_period_date', ['student_id', 'period_id', 'date']
    ),
]

def pending_upgrades(engine: Engine) -> List[str]:
    with engine.connect() as conn:
        return [step.name for step in UPGRADE_STEPS if not step.is_applied(conn)]

def apply_upgrades(engine: Engine) -> List[str]:
    """Apply missing steps in order, returning the names of those applied."""
    applied = []
    with engine.begin() as conn:
        for step in UPGRADE_STEPS:
            if step.is_applied(conn):
                continue
            step.apply(conn)
            applied.append(step.name)
    return applied
