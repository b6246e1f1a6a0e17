#!/usr/bin/env python3
"""Scrape the Adelaide Hills Council development application register.

Retrieves the register page, follows the link to the register PDF, rebuilds
the PDF's table from text positions and stores each application in an
SQLite database. Applications already in the database are left untouched.
"""

from __future__ import annotations

import argparse
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional

import requests

from da_register import store
from da_register.export import write_csv
from da_register.fetcher import fetch_binary, fetch_page, find_link_by_text, resolve_url
from da_register.pdf_source import decode_pdf
from da_register.record_mapper import map_records
from da_register.table_reconstructor import DEFAULT_LAYOUT, TableLayout, convert_pages_to_records

logger = logging.getLogger(__name__)

DEVELOPMENT_APPLICATIONS_URL = (
    "https://www.ahc.sa.gov.au/Resident/planning-and-building/the-development-process/"
    "development-applications/development-applications-register"
)
COMMENT_URL = "mailto:mail@ahc.sa.gov.au"
REGISTER_LINK_TEXT = "Development Applications Register"
DEFAULT_DATABASE = Path("data.sqlite")


def scrape_register(
    *,
    url: str = DEVELOPMENT_APPLICATIONS_URL,
    database: Path | str = DEFAULT_DATABASE,
    session: Optional[requests.Session] = None,
    today: Optional[date] = None,
    layout: TableLayout = DEFAULT_LAYOUT,
) -> Dict[str, Any]:
    conn = store.connect(database)
    try:
        store.ensure_schema(conn)

        tree = fetch_page(url, session=session)
        relative_pdf_url = find_link_by_text(tree, REGISTER_LINK_TEXT)
        if relative_pdf_url is None:
            logger.warning("Could not find a link to the PDF that contains the development applications.")
            return {
                "status": "no_document",
                "document_url": None,
                "records": 0,
                "inserted": 0,
                "ignored_texts": [],
                "applications": [],
            }

        pdf_url = resolve_url(url, relative_pdf_url)
        pages = decode_pdf(fetch_binary(pdf_url, session=session))

        logger.info("Parsing document.")
        reconstruction = convert_pages_to_records(pages, layout)
        for ignored in reconstruction.warnings:
            logger.warning(ignored.describe())

        applications = map_records(
            reconstruction.records,
            information_url=pdf_url,
            comment_url=COMMENT_URL,
            scrape_date=(today or date.today()).isoformat(),
        )
        inserted = sum(1 for application in applications if store.insert_if_absent(conn, application))
        logger.info(
            "Found %d application(s) in %s, %d new.", len(applications), pdf_url, inserted
        )
        return {
            "status": "ok",
            "document_url": pdf_url,
            "records": len(reconstruction.records),
            "inserted": inserted,
            "ignored_texts": [ignored.text for ignored in reconstruction.warnings],
            "applications": applications,
        }
    finally:
        conn.close()


def run(
    url: str = DEVELOPMENT_APPLICATIONS_URL,
    database: Path | str = DEFAULT_DATABASE,
    output_csv: Optional[Path] = None,
) -> int:
    try:
        scrape_register(url=url, database=database)
        if output_csv is not None:
            conn = store.connect(database)
            try:
                count = write_csv(store.list_applications(conn), output_csv)
            finally:
                conn.close()
            logger.info("Wrote %d application(s) to %s", count, output_csv)
    except Exception:
        logger.exception("Processing of the development applications document failed.")
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Scrape the development application register into an SQLite database."
    )
    parser.add_argument(
        "--url",
        default=DEVELOPMENT_APPLICATIONS_URL,
        help="Page that links to the register PDF (default: council register page).",
    )
    parser.add_argument(
        "--database",
        type=Path,
        default=DEFAULT_DATABASE,
        help="SQLite database path (default: %(default)s).",
    )
    parser.add_argument(
        "--output-csv",
        type=Path,
        default=None,
        help="Also export every stored application to this CSV path.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return run(url=args.url, database=args.database, output_csv=args.output_csv)


if __name__ == "__main__":
    raise SystemExit(main())
