# scanprint/core/print_client.py
from __future__ import annotations
from typing import Optional

import requests
from loguru import logger

from scanprint.core import config
from scanprint.core.lookup_client import create_session
from scanprint.core.models import ProductRecord, STATUS_DONE, FAILED_PREFIX

PRINTED = "printed"


class PrintClient:
    """
    Sends a row to the label print service and turns the answer into a status label:
      - 200 + {"status": "printed"} -> "Done"
      - anything else               -> "Failed: <status or Unknown>"
      - network error               -> "Failed: <message or Unknown error>"
    """
    def __init__(
        self,
        url: str = config.PRINT_URL,
        session: Optional[requests.Session] = None,
        timeout: float = config.HTTP_TIMEOUT,
    ) -> None:
        self.url = url
        self.session = session or create_session()
        self.timeout = float(timeout)

    def print_record(self, record: ProductRecord) -> str:
        try:
            response = self.session.post(self.url, json=record.print_payload(), timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Print request failed uniq={record.uniq}: {e}")
            return f"{FAILED_PREFIX}{str(e) or 'Unknown error'}"

        try:
            body = response.json()
        except ValueError:
            body = None
        status = body.get("status") if isinstance(body, dict) else None

        if response.status_code == 200 and status == PRINTED:
            logger.info(f"Printed uniq={record.uniq}")
            return STATUS_DONE

        logger.warning(f"Print rejected uniq={record.uniq} http={response.status_code} status={status!r}")
        return f"{FAILED_PREFIX}{status or 'Unknown'}"
