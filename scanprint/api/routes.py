# -*- coding: utf-8 -*-
import json
from typing import List

from fastapi import APIRouter, Request, HTTPException, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from scanprint.core import config
from scanprint.core.exporter import export_bytes, export_filename

router = APIRouter()

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# outcome -> HTTP status for failures
ERROR_CODES = {
    "lookup_failed": 502,
    "busy": 409,
    "not_found": 404,
    "print_disabled": 400,
}


# --- Schemas ---
class ScanPayload(BaseModel):
    value: str = ""


def _result_or_error(result):
    code = ERROR_CODES.get(result.outcome)
    if code:
        raise HTTPException(status_code=code, detail=result.to_dict())
    return result.to_dict()


def xlsx_download(records, include_status: bool) -> Response:
    data = export_bytes(records, include_status=include_status)
    if data is None:
        return Response(status_code=204)
    headers = {"Content-Disposition": f"attachment; filename={export_filename()}"}
    return Response(content=data, media_type=XLSX_MEDIA_TYPE, headers=headers)


# --- Endpoints ---
@router.get("/products")
def list_products(request: Request):
    ctl = request.app.state.controller
    return [r.to_dict() for r in ctl.records]


@router.post("/scan")
async def post_scan(request: Request, payload: ScanPayload):
    ctl = request.app.state.controller
    result = await ctl.submit(payload.value)
    return _result_or_error(result)


@router.delete("/products")
def delete_products(request: Request):
    ctl = request.app.state.controller
    ctl.clear()
    return {"status": "cleared"}


@router.post("/products/{index}/reprint")
async def post_reprint(request: Request, index: int):
    ctl = request.app.state.controller
    result = await ctl.reprint(index)
    return _result_or_error(result)


@router.get("/export")
def get_export(request: Request):
    ctl = request.app.state.controller
    return xlsx_download(ctl.records, include_status=ctl.print_enabled)


@router.get("/health")
def health(request: Request):
    ctl = request.app.state.controller
    return {"ok": True, **ctl.status()}


@router.get("/logs")
def get_logs(limit: int = 200):
    if not config.LOG_FILE.exists():
        return []

    with config.LOG_FILE.open("r", encoding="utf-8") as f:
        lines = f.read().splitlines()

    # loguru serialize=True writes one JSON object per line
    lines = lines[-limit:] if limit > 0 else lines
    records: List[dict] = []
    for line in lines:
        try:
            records.append(json.loads(line))
        except ValueError:
            continue
    return JSONResponse(records)
