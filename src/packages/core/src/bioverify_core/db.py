"""SQLite connection and schema shared by the job, record and tenant stores."""
import os
import sqlite3
from contextlib import contextmanager

SCHEMA = """
CREATE TABLE IF NOT EXISTS tenants (
    tenant_id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    identity_source_config TEXT,
    created_at TEXT,
    updated_at TEXT
);

CREATE TABLE IF NOT EXISTS departments (
    department_id TEXT PRIMARY KEY,
    tenant_id TEXT NOT NULL,
    name TEXT NOT NULL,
    name_key TEXT NOT NULL,
    created_at TEXT,
    UNIQUE (tenant_id, name_key)
);

CREATE TABLE IF NOT EXISTS records (
    record_id TEXT PRIMARY KEY,
    tenant_id TEXT NOT NULL,
    psn TEXT NOT NULL,
    full_name TEXT NOT NULL,
    grade_level TEXT,
    department_id TEXT,
    cadre TEXT,
    on_transfer INTEGER,
    date_of_first_appointment TEXT,
    date_of_confirmation TEXT,
    bvn TEXT,
    status TEXT NOT NULL,
    version INTEGER NOT NULL DEFAULT 0,
    verified_at TEXT,
    created_at TEXT,
    updated_at TEXT,
    UNIQUE (tenant_id, psn)
);

CREATE INDEX IF NOT EXISTS idx_records_tenant_status ON records (tenant_id, status);

CREATE TABLE IF NOT EXISTS bulk_jobs (
    job_id TEXT PRIMARY KEY,
    tenant_id TEXT NOT NULL,
    initiated_by TEXT NOT NULL,
    external_job_id TEXT,
    status TEXT NOT NULL,
    status_message TEXT,
    total_records INTEGER DEFAULT 0,
    processed INTEGER DEFAULT 0,
    succeeded INTEGER DEFAULT 0,
    failed INTEGER DEFAULT 0,
    created_at TEXT,
    updated_at TEXT
);

CREATE INDEX IF NOT EXISTS idx_bulk_jobs_tenant ON bulk_jobs (tenant_id, created_at);
"""


def _get_sqlite_path() -> str:
    return os.environ.get("SQLITE_PATH", "/data/bioverify.db")


@contextmanager
def get_conn():
    """Get a database connection."""
    path = _get_sqlite_path()
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    try:
        conn.executescript(SCHEMA)
        yield conn
        conn.commit()
    finally:
        conn.close()


def init_db():
    """Initialize the database."""
    with get_conn():
        pass
