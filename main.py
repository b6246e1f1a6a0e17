import os
import html
from fastapi import FastAPI
from fastapi.responses import HTMLResponse, Response
import uvicorn
from da_register import store
from da_register.export import application_to_row, csv_text
from da_register.pipeline import DEFAULT_DATABASE, DEVELOPMENT_APPLICATIONS_URL, scrape_register

app = FastAPI()

database_path = os.getenv("DA_REGISTER_DATABASE", str(DEFAULT_DATABASE))
register_url = os.getenv("DA_REGISTER_URL", DEVELOPMENT_APPLICATIONS_URL)

TABLE_COLUMNS = [
    {"key": "council_reference", "label": "Application"},
    {"key": "address", "label": "Address"},
    {"key": "description", "label": "Description"},
    {"key": "date_received", "label": "Received"},
    {"key": "date_scraped", "label": "Scraped"},
]


def _build_table_html(columns, rows):
    table_class = "min-w-full table-auto border border-stone/30 overflow-hidden bg-paper text-ink"
    th_class = "px-4 py-3 text-left text-xs font-semibold uppercase tracking-wider border-b"
    td_class = "px-4 py-3 text-sm border-b border-stone/20 whitespace-pre-wrap"
    empty_td_class = "px-4 py-6 text-sm text-center"

    header_cells = []
    for col in columns:
        label = html.escape(col["label"], quote=True)
        header_cells.append(f"<th class=\"{th_class}\">{label}</th>")

    body_rows = []
    if not rows:
        colspan = len(columns)
        body_rows.append(
            f"<tr><td colspan=\"{colspan}\" class=\"{empty_td_class}\">No applications have been stored yet</td></tr>"
        )
    else:
        for row in rows:
            cells = []
            for col in columns:
                cell_text = html.escape(str(row.get(col["key"], "") or ""), quote=True)
                cells.append(f"<td class=\"{td_class}\">{cell_text}</td>")
            body_rows.append("<tr>" + "".join(cells) + "</tr>")

    return (
        f"<table class=\"{table_class}\">"
        f"<thead><tr>{''.join(header_cells)}</tr></thead>"
        f"<tbody>{''.join(body_rows)}</tbody>"
        f"</table>"
    )


def _stored_applications():
    conn = store.connect(database_path)
    try:
        store.ensure_schema(conn)
        return store.list_applications(conn)
    finally:
        conn.close()


def _render_scrape_result_html(summary: dict) -> str:
    status = html.escape(str(summary.get("status", "")), quote=True)
    document_url = html.escape(str(summary.get("document_url") or "-"), quote=True)
    ignored_items = "".join(
        f"<li><code class=\"font-mono\">{html.escape(text, quote=True)}</code></li>"
        for text in summary.get("ignored_texts") or []
    )
    ignored_html = f"<ul class=\"mt-1 text-sm\">{ignored_items}</ul>" if ignored_items else ""
    return f"""
    <section class="mt-4 rounded-sm border border-stone/30 p-4" data-status="{status}">
        <div class="text-sm font-semibold">Register scraped</div>
        <div class="mt-2 text-sm">Document: {document_url}</div>
        <div class="mt-1 text-sm">Applications: {int(summary.get("records", 0))}</div>
        <div class="mt-1 text-sm">New: {int(summary.get("inserted", 0))}</div>
        <div class="mt-1 text-sm">Ignored text: {len(summary.get("ignored_texts") or [])}</div>
        {ignored_html}
        <a href="/applications.csv" class="mt-3 inline-block rounded-sm border px-3 py-2 text-sm font-semibold">
            Download CSV
        </a>
    </section>
    """


@app.get("/", response_class=HTMLResponse)
async def read_root():
    rows = [application_to_row(a) for a in _stored_applications()]
    return f"""
    <html><head><title>Development Applications</title></head>
    <body>
      <h1>Development Applications</h1>
      <form method="post" action="/scrape"><button type="submit">Scrape now</button></form>
      <a href="/applications.csv">Download CSV</a>
      {_build_table_html(TABLE_COLUMNS, rows)}
    </body></html>
    """


@app.post("/scrape", response_class=HTMLResponse)
async def handle_scrape():
    try:
        summary = scrape_register(url=register_url, database=database_path)
        return _render_scrape_result_html(summary)
    except Exception as exc:
        print(f"Register scrape failed: {exc}")
        safe_error = html.escape(str(exc), quote=True)
        return f"""
        <div class="p-4 border rounded-sm" data-status="error">
            <strong>Error Scraping Register:</strong><br>
            {safe_error}
        </div>
        """


@app.get("/applications.csv")
async def download_applications_csv():
    content = csv_text(_stored_applications())
    return Response(
        content=content.encode("utf-8-sig"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="applications.csv"'},
    )


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
