from __future__ import annotations

import threading
import time
from typing import Any, List

import pytest
import requests

from scanprint.core.controller import ScanController
from scanprint.core.lookup_client import LookupClient
from scanprint.core.print_client import PrintClient
from scanprint.core.table_store import KeyValueStorage, ProductTable

NO_JSON = object()


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None):
        self.status_code = status_code
        self._body = body

    def json(self):
        if self._body is NO_JSON:
            raise ValueError("not json")
        return self._body

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class HeldResponse(FakeResponse):
    """Reply whose body is only readable once `gate` is set."""

    def __init__(self, status_code: int = 200, body: Any = None):
        super().__init__(status_code, body)
        self.gate = threading.Event()

    def json(self):
        self.gate.wait(5)
        return super().json()


def wait_until(check, timeout: float = 3.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if check():
            return True
        time.sleep(0.02)
    return check()


class FakeSession:
    """Stands in for requests.Session; replies are consumed in order."""

    def __init__(self, *replies):
        self.replies: List[Any] = list(replies)
        self.calls: List[dict] = []

    def queue(self, *replies):
        self.replies.extend(replies)

    def _next(self):
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    def get(self, url, params=None, timeout=None):
        self.calls.append({"method": "GET", "url": url, "params": params, "timeout": timeout})
        return self._next()

    def post(self, url, json=None, timeout=None):
        self.calls.append({"method": "POST", "url": url, "json": json, "timeout": timeout})
        return self._next()


def product_response(**data) -> FakeResponse:
    return FakeResponse(200, {"data": data})


ASPIRIN = {
    "product_name": "Aspirin",
    "lot": "L001",
    "expired_date": "2027-01-31",
    "unit_name": "Box",
}


@pytest.fixture()
def storage(tmp_path) -> KeyValueStorage:
    return KeyValueStorage(tmp_path / "local_storage.json")


@pytest.fixture()
def table(storage) -> ProductTable:
    return ProductTable(storage)


@pytest.fixture()
def lookup_session() -> FakeSession:
    return FakeSession()


@pytest.fixture()
def print_session() -> FakeSession:
    return FakeSession()


@pytest.fixture()
def controller(table, lookup_session, print_session) -> ScanController:
    lookup = LookupClient("http://lookup.test", session=lookup_session)
    printer = PrintClient("http://printer.test/print/", session=print_session)
    return ScanController(table, lookup, printer)


@pytest.fixture()
def client(controller):
    from fastapi.testclient import TestClient
    from scanprint.main import app

    app.state.controller = controller
    with TestClient(app) as c:
        yield c
    app.state.controller = None
