import logging
from datetime import date

import pytest
from bs4 import BeautifulSoup

from da_register import pipeline, store
from da_register.pdf_source import DocumentDecodeError
from da_register.row_assembler import Page, TextFragment

PAGE_HTML = '<a href="/files/register.pdf">Development Applications Register</a>'
COLUMN_X = [5.0, 20.0, 40.0, 50.0, 60.0, 75.0]


def _fragments(page, y, texts, xs=COLUMN_X):
    return [TextFragment(page=page, x=x, y=y, runs=(t,)) for t, x in zip(texts, xs)]


def _register_pages():
    page_one = (
        _fragments(0, 1.0, ["Development Application Register"])
        + _fragments(0, 5.0, ["Applicant Name", "Address", "Application", "Received", "Category", "Reason"])
        + _fragments(0, 10.0, ["Smith", "1 Main Rd", "17/67", "3/07/2018", "Cat 1", "Dwelling"])
        + _fragments(0, 12.0, ["Hahndorf"], xs=[20.0])
        + _fragments(0, 14.0, ["stray"], xs=[99.0])
    )
    page_two = (
        _fragments(1, 10.0, ["Jones", "5 High St", "17/68", "bad", "Cat 2", "Shed"])
        + _fragments(1, 12.0, ["Stirling"], xs=[20.0])
    )
    return [Page(texts=page_one), Page(texts=page_two)]


@pytest.fixture
def fake_register(monkeypatch):
    fetched = []

    def fake_fetch_page(url, session=None):
        fetched.append(url)
        return BeautifulSoup(PAGE_HTML, "html.parser")

    def fake_fetch_binary(url, session=None):
        fetched.append(url)
        return b"%PDF-1.4\n"

    monkeypatch.setattr(pipeline, "fetch_page", fake_fetch_page)
    monkeypatch.setattr(pipeline, "fetch_binary", fake_fetch_binary)
    monkeypatch.setattr(pipeline, "decode_pdf", lambda data: _register_pages())
    return fetched


def test_scrape_register_stores_applications(tmp_path, fake_register, caplog):
    db_path = tmp_path / "data.sqlite"
    with caplog.at_level(logging.WARNING):
        summary = pipeline.scrape_register(
            url="https://example.com/planning/register",
            database=db_path,
            today=date(2018, 7, 16),
        )

    assert fake_register == [
        "https://example.com/planning/register",
        "https://example.com/files/register.pdf",
    ]
    assert summary["status"] == "ok"
    assert summary["records"] == 2
    assert summary["inserted"] == 2
    assert summary["ignored_texts"] == ["stray"]
    assert 'Ignored the text "stray"' in caplog.text

    conn = store.connect(db_path)
    stored = store.list_applications(conn)
    conn.close()
    assert [(a.application_number, a.address, a.received_date) for a in stored] == [
        ("17/67", "1 Main Rd\nHahndorf", "2018-07-03"),
        ("17/68", "5 High St\nStirling", ""),
    ]
    assert stored[0].information_url == "https://example.com/files/register.pdf"
    assert stored[0].comment_url == pipeline.COMMENT_URL
    assert stored[0].scrape_date == "2018-07-16"


def test_scrape_register_is_idempotent(tmp_path, fake_register):
    db_path = tmp_path / "data.sqlite"
    pipeline.scrape_register(url="https://example.com/r", database=db_path)
    summary = pipeline.scrape_register(url="https://example.com/r", database=db_path)
    assert summary["records"] == 2
    assert summary["inserted"] == 0


def test_scrape_register_without_link_returns_no_document(tmp_path, monkeypatch):
    monkeypatch.setattr(
        pipeline, "fetch_page", lambda url, session=None: BeautifulSoup("<p>none</p>", "html.parser")
    )
    summary = pipeline.scrape_register(url="https://example.com/r", database=tmp_path / "d.sqlite")
    assert summary["status"] == "no_document"
    assert summary["applications"] == []


def test_decode_failure_persists_nothing_and_run_reports_failure(tmp_path, fake_register, monkeypatch, caplog):
    def broken_decode(data):
        raise DocumentDecodeError("bad document")

    monkeypatch.setattr(pipeline, "decode_pdf", broken_decode)
    db_path = tmp_path / "data.sqlite"

    with pytest.raises(DocumentDecodeError):
        pipeline.scrape_register(url="https://example.com/r", database=db_path)

    with caplog.at_level(logging.ERROR):
        assert pipeline.run(url="https://example.com/r", database=db_path) == 1
    assert "failed" in caplog.text

    conn = store.connect(db_path)
    assert store.list_applications(conn) == []
    conn.close()


def test_main_runs_with_defaults_overridden(tmp_path, fake_register):
    db_path = tmp_path / "data.sqlite"
    assert pipeline.main(["--url", "https://example.com/r", "--database", str(db_path)]) == 0
    assert db_path.exists()


def test_main_exports_stored_applications_to_csv(tmp_path, fake_register):
    db_path = tmp_path / "data.sqlite"
    out_csv = tmp_path / "out" / "applications.csv"
    argv = ["--url", "https://example.com/r", "--database", str(db_path), "--output-csv", str(out_csv)]
    assert pipeline.main(argv) == 0
    text = out_csv.read_text(encoding="utf-8-sig")
    assert "17/67" in text
    assert "17/68" in text
