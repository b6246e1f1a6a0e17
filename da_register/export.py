from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Dict, Iterable, List, TextIO

from da_register.record_mapper import DevelopmentApplication
from da_register.store import COLUMNS


def application_to_row(application: DevelopmentApplication) -> Dict[str, str]:
    return {
        "council_reference": application.application_number,
        "address": application.address,
        "description": application.reason,
        "info_url": application.information_url,
        "comment_url": application.comment_url,
        "date_scraped": application.scrape_date,
        "date_received": application.received_date,
        "on_notice_from": application.on_notice_from or "",
        "on_notice_to": application.on_notice_to or "",
    }


def _write_rows(f: TextIO, applications: Iterable[DevelopmentApplication]) -> int:
    rows: List[Dict[str, str]] = [application_to_row(a) for a in applications]
    writer = csv.DictWriter(f, fieldnames=COLUMNS)
    writer.writeheader()
    writer.writerows(rows)
    return len(rows)


def csv_text(applications: Iterable[DevelopmentApplication]) -> str:
    buf = io.StringIO(newline="")
    _write_rows(buf, applications)
    return buf.getvalue()


def write_csv(applications: Iterable[DevelopmentApplication], out_csv: Path) -> int:
    out_csv.parent.mkdir(parents=True, exist_ok=True)
    with out_csv.open("w", encoding="utf-8-sig", newline="") as f:
        return _write_rows(f, applications)
