# scanprint/core/lookup_client.py
from __future__ import annotations
from typing import Any, Dict, Optional

import requests
from loguru import logger

from scanprint.core import config
from scanprint.core.models import ProductRecord


class LookupFailed(Exception):
    """Lookup service unreachable or answered with something unusable."""

    def __init__(self, code: str, reason: str) -> None:
        super().__init__(f"lookup failed for {code!r}: {reason}")
        self.code = code
        self.reason = reason


def create_session() -> requests.Session:
    session = requests.Session()
    session.headers.update({"Accept": "application/json"})
    return session


def _field(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None or value == "":
        return config.PLACEHOLDER
    return str(value)


def normalize_product(data: Dict[str, Any], code: str, qrcode: str) -> ProductRecord:
    """Map the service's `data` object to a table row, filling gaps with the placeholder."""
    unit = data.get("unit_name")
    if not unit:
        detail = data.get("retail_unit_detail")
        unit = detail.get("unit") if isinstance(detail, dict) else None
    return ProductRecord(
        qrcode=qrcode,
        product_name=_field(data, "product_name"),
        lot=_field(data, "lot"),
        expired_date=_field(data, "expired_date"),
        unit_name=str(unit) if unit else config.PLACEHOLDER,
        uniq=code,
    )


class LookupClient:
    def __init__(
        self,
        base_url: str = config.LOOKUP_BASE_URL,
        session: Optional[requests.Session] = None,
        timeout: float = config.HTTP_TIMEOUT,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or create_session()
        self.timeout = float(timeout)

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/api/fetch-product"

    def fetch(self, code: str, qrcode: str) -> ProductRecord:
        """Blocking GET; raises LookupFailed on any network, HTTP or payload error."""
        try:
            response = self.session.get(self.endpoint, params={"code": code}, timeout=self.timeout)
            response.raise_for_status()
            body = response.json()
        except requests.RequestException as e:
            logger.error(f"Lookup request failed code={code}: {e}")
            raise LookupFailed(code, str(e) or "request error") from e
        except ValueError as e:
            logger.error(f"Lookup returned non-JSON body code={code}")
            raise LookupFailed(code, "invalid JSON response") from e

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict):
            logger.error(f"Lookup response has no data object code={code}")
            raise LookupFailed(code, "response has no product data")

        record = normalize_product(data, code, qrcode)
        logger.info(f"Lookup ok code={code} product={record.product_name!r}")
        return record
