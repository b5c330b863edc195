import pytest
import requests

from conftest import ASPIRIN, NO_JSON, FakeResponse, FakeSession, product_response
from scanprint.core.lookup_client import LookupClient, LookupFailed


def _client(*replies):
    session = FakeSession(*replies)
    return LookupClient("http://lookup.test/", session=session, timeout=3), session


def test_fetch_builds_request_and_record():
    client, session = _client(product_response(**ASPIRIN))
    record = client.fetch("ABC", "http://q/ABC")

    call = session.calls[0]
    assert call["url"] == "http://lookup.test/api/fetch-product"
    assert call["params"] == {"code": "ABC"}
    assert call["timeout"] == 3.0

    assert record.qrcode == "http://q/ABC"
    assert record.product_name == "Aspirin"
    assert record.lot == "L001"
    assert record.expired_date == "2027-01-31"
    assert record.unit_name == "Box"
    assert record.uniq == "ABC"
    assert record.status is None


def test_unit_falls_back_to_retail_unit_detail():
    client, _ = _client(product_response(product_name="X", retail_unit_detail={"unit": "Strip"}))
    assert client.fetch("C", "C").unit_name == "Strip"


def test_missing_fields_get_placeholder():
    client, _ = _client(product_response())
    record = client.fetch("C", "C")
    assert record.product_name == "N/A"
    assert record.lot == "N/A"
    assert record.expired_date == "N/A"
    assert record.unit_name == "N/A"


@pytest.mark.parametrize(
    "reply",
    [
        requests.ConnectionError("connection refused"),
        FakeResponse(500, {"error": "boom"}),
        FakeResponse(200, NO_JSON),
        FakeResponse(200, {"message": "no data"}),
        FakeResponse(200, {"data": None}),
    ],
)
def test_failures_raise_lookup_failed(reply):
    client, _ = _client(reply)
    with pytest.raises(LookupFailed) as info:
        client.fetch("ABC", "ABC")
    assert info.value.code == "ABC"
    assert info.value.reason
