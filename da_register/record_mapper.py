from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Sequence

ADDRESS_COLUMN = 1
APPLICATION_NUMBER_COLUMN = 2
RECEIVED_DATE_COLUMN = 3
REASON_COLUMN = 5
MIN_COLUMNS = 6

# D/MM/YYYY; the leading zero of the day may be omitted.
RECEIVED_DATE_PATTERN = re.compile(r"^(?P<day>[0-9]{1,2})/(?P<month>[0-9]{2})/(?P<year>[0-9]{4})$")


@dataclass(frozen=True)
class DevelopmentApplication:
    application_number: str
    address: str
    reason: str
    information_url: str
    comment_url: str
    scrape_date: str
    received_date: str
    on_notice_from: Optional[str] = None
    on_notice_to: Optional[str] = None


def parse_received_date(text: str) -> str:
    """Return the date as YYYY-MM-DD, or an empty string if it does not parse."""
    matched = RECEIVED_DATE_PATTERN.fullmatch((text or "").strip())
    if not matched:
        return ""
    try:
        parsed = date(
            int(matched.group("year")),
            int(matched.group("month")),
            int(matched.group("day")),
        )
    except ValueError:
        return ""
    return parsed.isoformat()


def map_record(
    record: Sequence[str],
    *,
    information_url: str,
    comment_url: str,
    scrape_date: str,
) -> DevelopmentApplication | None:
    if len(record) < MIN_COLUMNS:
        return None
    return DevelopmentApplication(
        application_number=record[APPLICATION_NUMBER_COLUMN].strip(),
        address=record[ADDRESS_COLUMN].strip(),
        reason=record[REASON_COLUMN].strip(),
        information_url=information_url,
        comment_url=comment_url,
        scrape_date=scrape_date,
        received_date=parse_received_date(record[RECEIVED_DATE_COLUMN]),
    )


def map_records(
    records: Iterable[Sequence[str]],
    *,
    information_url: str,
    comment_url: str,
    scrape_date: str,
) -> List[DevelopmentApplication]:
    applications: List[DevelopmentApplication] = []
    for record in records:
        application = map_record(
            record,
            information_url=information_url,
            comment_url=comment_url,
            scrape_date=scrape_date,
        )
        if application is not None:
            applications.append(application)
    return applications
