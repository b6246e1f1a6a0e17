from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import List

from da_register.record_mapper import DevelopmentApplication

logger = logging.getLogger(__name__)

COLUMNS = [
    "council_reference",
    "address",
    "description",
    "info_url",
    "comment_url",
    "date_scraped",
    "date_received",
    "on_notice_from",
    "on_notice_to",
]

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS data (
    council_reference TEXT PRIMARY KEY,
    address TEXT,
    description TEXT,
    info_url TEXT,
    comment_url TEXT,
    date_scraped TEXT,
    date_received TEXT,
    on_notice_from TEXT,
    on_notice_to TEXT
);
"""


def connect(db_path: Path | str) -> sqlite3.Connection:
    if str(db_path) != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    return conn


def ensure_schema(conn: sqlite3.Connection) -> None:
    conn.executescript(SCHEMA_SQL)
    conn.commit()


def _as_row(application: DevelopmentApplication) -> tuple:
    return (
        application.application_number,
        application.address,
        application.reason,
        application.information_url,
        application.comment_url,
        application.scrape_date,
        application.received_date,
        application.on_notice_from,
        application.on_notice_to,
    )


def insert_if_absent(conn: sqlite3.Connection, application: DevelopmentApplication) -> bool:
    """Insert the application unless its council reference is already stored."""
    cursor = conn.execute(
        f"INSERT OR IGNORE INTO data ({', '.join(COLUMNS)}) VALUES ({', '.join('?' * len(COLUMNS))})",
        _as_row(application),
    )
    conn.commit()
    inserted = cursor.rowcount > 0
    if inserted:
        logger.info('Inserted new application "%s" into the database.', application.application_number)
    return inserted


def list_applications(conn: sqlite3.Connection) -> List[DevelopmentApplication]:
    rows = conn.execute(
        f"SELECT {', '.join(COLUMNS)} FROM data ORDER BY rowid"
    ).fetchall()
    return [
        DevelopmentApplication(
            application_number=row["council_reference"],
            address=row["address"] or "",
            reason=row["description"] or "",
            information_url=row["info_url"] or "",
            comment_url=row["comment_url"] or "",
            scrape_date=row["date_scraped"] or "",
            received_date=row["date_received"] or "",
            on_notice_from=row["on_notice_from"],
            on_notice_to=row["on_notice_to"],
        )
        for row in rows
    ]
