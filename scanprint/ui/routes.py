# scanprint/ui/routes.py
from html import escape
from pathlib import Path

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from scanprint.api.routes import xlsx_download
from scanprint.core.exporter import columns
from scanprint.core.models import FAILED_PREFIX, STATUS_PRINTING

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter(prefix="/ui", tags=["webui"])

# htmx: the table partial listens for this event
REFRESH = {"HX-Trigger": "table-refresh"}
# successful scan also clears the input box
ACCEPTED = {"HX-Trigger": "table-refresh, scan-accepted"}

MESSAGES = {
    "ok": "Added: {name}",
    "ignored": "Nothing to search",
    "lookup_failed": "Lookup failed for {value}: {error}",
    "busy": "{error}, try again",
    "not_found": "Row not found",
    "print_disabled": "Printing is disabled",
}


def _toast(result, value: str = "") -> HTMLResponse:
    name = result.record.product_name if result.record else ""
    text = MESSAGES.get(result.outcome, result.outcome).format(
        name=name, value=value, error=result.error or "Unknown error"
    )
    css = "toast ok" if result.outcome in ("ok", "ignored") else "toast err"
    headers = ACCEPTED if result.ok else REFRESH
    return HTMLResponse(f'<div class="{css}">{escape(text)}</div>', headers=headers)


@router.get("", response_class=HTMLResponse)
async def ui_home(request: Request):
    ctl = request.app.state.controller
    return templates.TemplateResponse(
        request, "ui.html", {"print_enabled": ctl.print_enabled}
    )


@router.get("/partials/table", response_class=HTMLResponse)
async def ui_table_partial(request: Request):
    ctl = request.app.state.controller
    rows = ctl.records
    if not rows:
        return HTMLResponse('<p class="empty">No products scanned yet</p>')

    heads = ["#"] + columns(ctl.print_enabled) + ([""] if ctl.print_enabled else [])
    trs = []
    for i, r in enumerate(rows):
        cells = [str(i + 1), r.qrcode, r.product_name, r.lot, r.expired_date, r.unit_name, r.uniq]
        tds = "".join(f"<td>{escape(c)}</td>" for c in cells)
        if ctl.print_enabled:
            status = r.status or ""
            css = "failed" if status.startswith(FAILED_PREFIX) else ""
            tds += f'<td class="{css}">{escape(status)}</td>'
            tds += f"""<td>
                    <form hx-post="/ui/actions/reprint/{i}" hx-target="#toast" hx-swap="innerHTML">
                      <button type="submit">Reprint</button>
                    </form>
                  </td>"""
        trs.append(f"<tr>{tds}</tr>")

    # re-poll while any label is still printing
    poll = ""
    if any(r.status == STATUS_PRINTING for r in rows):
        poll = ('<div class="poll" hx-get="/ui/partials/table" hx-trigger="every 1s" '
                'hx-target="#table" hx-swap="innerHTML"></div>')

    ths = "".join(f"<th>{escape(h)}</th>" for h in heads)
    return HTMLResponse(f"""
    <table class="tbl">
      <thead><tr>{ths}</tr></thead>
      <tbody>{''.join(trs)}</tbody>
    </table>
    {poll}
    """)


@router.post("/actions/scan")
async def ui_scan(request: Request, value: str = Form("")):
    ctl = request.app.state.controller
    # print runs in the background; the table polls until the row is patched
    result = await ctl.submit(value, wait_print=False)
    return _toast(result, value=value.strip())


@router.post("/actions/clear")
async def ui_clear(request: Request):
    request.app.state.controller.clear()
    return HTMLResponse('<div class="toast ok">Table cleared</div>', headers=REFRESH)


@router.post("/actions/reprint/{index}")
async def ui_reprint(index: int, request: Request):
    ctl = request.app.state.controller
    result = await ctl.reprint(index)
    if result.ok:
        return HTMLResponse(
            f'<div class="toast ok">Row {index + 1}: {escape(result.record.status or "")}</div>',
            headers=REFRESH,
        )
    return _toast(result)


@router.get("/export")
async def ui_export(request: Request):
    ctl = request.app.state.controller
    return xlsx_download(ctl.records, include_status=ctl.print_enabled)
