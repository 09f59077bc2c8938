import pytest
import requests
from unittest.mock import MagicMock

from wsdot.client_base import (
    WSDOTClient,
    WSDOTClientError,
    DecodeError,
    InvalidConfigurationError,
    RequestConstructionError,
    RequestTimeoutError,
    TransportError,
    UnexpectedStatusError,
    require_positive_id,
)


class FakeResponse:
    def __init__(self, status_code=200, json_data=None, json_raises=False):
        self.status_code = status_code
        self._json_data = json_data
        self._json_raises = json_raises

    def json(self):
        if self._json_raises:
            raise ValueError("Invalid JSON")
        return self._json_data


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("WSDOT_API_KEY", raising=False)
    monkeypatch.delenv("WSDOT_TIMEOUT_SEC", raising=False)


@pytest.mark.unit
def test_empty_api_key_raises():
    with pytest.raises(InvalidConfigurationError):
        WSDOTClient(api_key="")


@pytest.mark.unit
def test_whitespace_api_key_raises():
    with pytest.raises(InvalidConfigurationError):
        WSDOTClient(api_key="   ")


@pytest.mark.unit
def test_missing_api_key_without_env_raises():
    with pytest.raises(InvalidConfigurationError) as e:
        WSDOTClient()

    assert "WSDOT_API_KEY" in str(e.value)


@pytest.mark.unit
def test_api_key_falls_back_to_env(monkeypatch):
    monkeypatch.setenv("WSDOT_API_KEY", "env-key")
    client = WSDOTClient()
    assert client.api_key == "env-key"


@pytest.mark.unit
def test_explicit_api_key_wins_over_env(monkeypatch):
    monkeypatch.setenv("WSDOT_API_KEY", "env-key")
    client = WSDOTClient(api_key="explicit")
    assert client.api_key == "explicit"


@pytest.mark.unit
def test_config_is_read_only():
    client = WSDOTClient(api_key="k")
    with pytest.raises(AttributeError):
        client.api_key = "other"


@pytest.mark.unit
def test_default_session_has_headers_and_no_timeout():
    client = WSDOTClient(api_key="k")
    assert client.session.headers["Accept"] == "application/json"
    assert "wsdot-client" in client.session.headers["User-Agent"]
    assert client.timeout is None


@pytest.mark.unit
def test_supplied_session_is_used_untouched():
    session = requests.Session()
    before = dict(session.headers)

    client = WSDOTClient(api_key="k", session=session)

    assert client.session is session
    assert dict(session.headers) == before


@pytest.mark.unit
def test_timeout_from_env(monkeypatch):
    monkeypatch.setenv("WSDOT_TIMEOUT_SEC", "7.5")
    client = WSDOTClient(api_key="k")
    assert client.timeout == 7.5


@pytest.mark.unit
@pytest.mark.parametrize("raw", ["not-a-number", "0", "-3"])
def test_invalid_timeout_env_raises(monkeypatch, raw):
    monkeypatch.setenv("WSDOT_TIMEOUT_SEC", raw)
    with pytest.raises(InvalidConfigurationError):
        WSDOTClient(api_key="k")


@pytest.mark.unit
def test_repr_does_not_leak_key():
    client = WSDOTClient(api_key="super-secret")
    assert "super-secret" not in repr(client)


@pytest.mark.unit
def test_get_json_success_sends_key_and_content_type():
    client = WSDOTClient(api_key="abc", timeout=5)
    client.session.send = MagicMock(return_value=FakeResponse(200, [{"ok": True}]))

    data = client.get_json("https://example.com/things", {"AccessCode": "abc"})

    assert data == [{"ok": True}]
    client.session.send.assert_called_once()
    prepared = client.session.send.call_args.args[0]
    assert prepared.method == "GET"
    assert prepared.url == "https://example.com/things?AccessCode=abc"
    assert prepared.headers["Content-Type"] == "application/json"
    assert client.session.send.call_args.kwargs["timeout"] == 5


@pytest.mark.unit
@pytest.mark.parametrize("status", [201, 204, 301, 404, 500])
def test_get_json_non_200_raises_with_status(status):
    client = WSDOTClient(api_key="abc")
    client.session.send = MagicMock(return_value=FakeResponse(status, {"err": "nope"}))

    with pytest.raises(UnexpectedStatusError) as e:
        client.get_json("https://example.com/things", {"AccessCode": "abc"})

    assert e.value.status_code == status
    assert str(status) in str(e.value)
    assert "abc" not in str(e.value)


@pytest.mark.unit
def test_get_json_invalid_json_raises_decode_error():
    client = WSDOTClient(api_key="abc")
    client.session.send = MagicMock(return_value=FakeResponse(200, json_raises=True))

    with pytest.raises(DecodeError) as e:
        client.get_json("https://example.com/things", operation="get_things")

    assert e.value.operation == "get_things"
    assert isinstance(e.value.__cause__, ValueError)


@pytest.mark.unit
def test_get_json_timeout_raises():
    client = WSDOTClient(api_key="abc")
    client.session.send = MagicMock(side_effect=requests.Timeout("timeout"))

    with pytest.raises(RequestTimeoutError) as e:
        client.get_json("https://example.com/things")

    assert isinstance(e.value, TransportError)
    assert "timed out" in str(e.value).lower()


@pytest.mark.unit
def test_get_json_connection_error_wraps_cause():
    client = WSDOTClient(api_key="abc")
    cause = requests.ConnectionError("refused")
    client.session.send = MagicMock(side_effect=cause)

    with pytest.raises(TransportError) as e:
        client.get_json("https://example.com/things")

    assert e.value.__cause__ is cause


@pytest.mark.unit
def test_get_json_malformed_url_raises_before_sending():
    client = WSDOTClient(api_key="abc")
    client.session.send = MagicMock()

    with pytest.raises(RequestConstructionError):
        client.get_json("not a url")

    client.session.send.assert_not_called()


@pytest.mark.unit
def test_errors_share_base_class():
    for err in (
        InvalidConfigurationError,
        RequestConstructionError,
        TransportError,
        DecodeError,
        UnexpectedStatusError,
    ):
        assert issubclass(err, WSDOTClientError)


@pytest.mark.unit
@pytest.mark.parametrize("value", [0, -1, True, "5", 1.5, None])
def test_require_positive_id_rejects(value):
    with pytest.raises(RequestConstructionError):
        require_positive_id("camera_id", value)


@pytest.mark.unit
def test_close_only_closes_owned_session():
    supplied = MagicMock(spec=requests.Session)
    with WSDOTClient(api_key="k", session=supplied):
        pass
    supplied.close.assert_not_called()

    client = WSDOTClient(api_key="k")
    client.session.close = MagicMock()
    with client:
        pass
    client.session.close.assert_called_once()


@pytest.mark.unit
def test_transport_error_message_redacts_key():
    client = WSDOTClient(api_key="secret-key")
    cause = requests.ConnectionError(
        "Max retries exceeded with url: /things?AccessCode=secret-key"
    )
    client.session.send = MagicMock(side_effect=cause)

    with pytest.raises(TransportError) as e:
        client.get_json("https://example.com/things", {"AccessCode": "secret-key"})

    assert "secret-key" not in str(e.value)
    assert "AccessCode=***" in str(e.value)
    assert e.value.__cause__ is cause


@pytest.mark.unit
def test_timeout_error_message_redacts_key():
    client = WSDOTClient(api_key="secret-key")
    client.session.send = MagicMock(
        side_effect=requests.Timeout("read timed out: /things?AccessCode=secret-key")
    )

    with pytest.raises(RequestTimeoutError) as e:
        client.get_json("https://example.com/things", {"AccessCode": "secret-key"})

    assert "secret-key" not in str(e.value)
