import pytest
import requests

from easypost_shipping.api.requester import Requester
from easypost_shipping.api.transport import RequestsTransport
from easypost_shipping.errors import RequesterError
from easypost_shipping.models import EnvCfg


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None, content=b""):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else ("" if payload is None else str(payload))
        self.content = content

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeTransport:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.posts = []
        self.gets = []

    def post(self, url, *, headers=None, data=None):
        self.posts.append((url, data))
        if self.error:
            raise self.error
        return self.response

    def get(self, url, *, headers=None, params=None):
        self.gets.append(url)
        if self.error:
            raise self.error
        return self.response


def _requester(transport):
    return Requester("EZTK_test", "https://api.example.test/v2/", transport)


def test_post_joins_path_and_returns_decoded_body():
    transport = FakeTransport(FakeResponse(201, {"id": "shp_1"}))

    resp = _requester(transport).post("/shipments", {"shipment[parcel][id]": "prcl_1"})

    assert resp == {"id": "shp_1"}
    assert transport.posts == [
        ("https://api.example.test/v2/shipments", {"shipment[parcel][id]": "prcl_1"})]


def test_post_non_2xx_raises_with_status_and_body():
    transport = FakeTransport(FakeResponse(422, {"error": {"message": "bad"}}, text='{"error": "bad"}'))

    with pytest.raises(RequesterError) as e:
        _requester(transport).post("/shipments", {})

    assert e.value.status == 422
    assert e.value.body == '{"error": "bad"}'


def test_post_transport_exception_is_wrapped():
    transport = FakeTransport(error=requests.ConnectionError("refused"))

    with pytest.raises(RequesterError) as e:
        _requester(transport).post("/shipments", {})
    assert e.value.status is None
    assert isinstance(e.value.__cause__, requests.ConnectionError)


@pytest.mark.parametrize("response", [
    FakeResponse(200, None, text="<html>oops</html>"),
    FakeResponse(200, ["not", "an", "object"]),
])
def test_post_unreadable_body_raises(response):
    with pytest.raises(RequesterError):
        _requester(FakeTransport(response)).post("/shipments", {})


def test_get_bytes_returns_content():
    transport = FakeTransport(FakeResponse(200, text="", content=b"%PDF"))
    assert _requester(transport).get_bytes("http://x/1.pdf") == b"%PDF"
    assert transport.gets == ["http://x/1.pdf"]


def test_get_bytes_error_status_raises():
    with pytest.raises(RequesterError):
        _requester(FakeTransport(FakeResponse(404, text="gone"))).get_bytes("http://x/1.pdf")


def test_api_key_is_required():
    with pytest.raises(ValueError):
        Requester("")


def test_from_env_configures_basic_auth_and_timeout():
    cfg = EnvCfg(EASYPOST_API_KEY="EZTK_abc", EASYPOST_BASE_URL="https://h/v2", EASYPOST_TIMEOUT=7)

    req = Requester.from_env(cfg)

    assert isinstance(req.transport, RequestsTransport)
    assert req.transport.session.auth == ("EZTK_abc", "")
    assert req.transport.timeout == 7
    assert req.base_url == "https://h/v2"
