from unittest.mock import Mock, patch

import pytest
import requests

from publishing_sync.config import Config
from publishing_sync.core.client import PublishingApiClient
from publishing_sync.errors import DeliveryRejectedError, TransientDeliveryError
from publishing_sync.validators import validate_base_path, validate_locale


def _response(status_code=200, json_body=None, text=""):
    response = Mock()
    response.status_code = status_code
    response.text = text
    if json_body is None:
        response.content = b""
    else:
        response.content = b"{...}"
        response.json.return_value = json_body
    return response


# PublishingApiClient tests
def test_base_url_strips_trailing_slash():
    """Test that a trailing slash on the configured URL is dropped."""
    config = Config(publishing_api_url="https://publishing-api.example.com/")
    client = PublishingApiClient(config)
    assert client.base_url == "https://publishing-api.example.com"


def test_session_creation_secure(mock_config):
    """Test that session carries the bearer token and verifies SSL."""
    client = PublishingApiClient(mock_config)
    assert client.session.headers["Authorization"] == "Bearer test-token"
    assert client.session.headers["Content-Type"] == "application/json"
    assert client.session.verify


def test_session_creation_insecure():
    """Test that SSL verification is disabled in insecure mode."""
    config = Config(
        publishing_api_url="https://publishing-api.example.com",
        insecure=True,
    )
    client = PublishingApiClient(config)
    assert not client.session.verify
    assert "Authorization" not in client.session.headers


@patch("publishing_sync.core.client.requests.Session.request")
def test_put_content(mock_request, mock_config):
    """Test put_content sends the payload to the content endpoint."""
    mock_request.return_value = _response(200, {"content_id": "abc"})

    client = PublishingApiClient(mock_config)
    result = client.put_content("/government/x", {"title": "X"})

    assert result == {"content_id": "abc"}
    args, kwargs = mock_request.call_args
    assert args == (
        "PUT",
        "https://publishing-api.example.com/content/government/x",
    )
    assert kwargs["json"] == {"title": "X"}
    assert kwargs["timeout"] == (10.0, 30.0)


@pytest.mark.parametrize(
    "method_name, http_method, endpoint",
    [
        ("put_draft_content", "PUT", "draft-content"),
        ("put_redirect", "PUT", "content"),
        ("put_intent", "PUT", "publish-intent"),
    ],
)
@patch("publishing_sync.core.client.requests.Session.request")
def test_endpoint_routing(
    mock_request, method_name, http_method, endpoint, mock_config
):
    mock_request.return_value = _response(200, {})

    client = PublishingApiClient(mock_config)
    getattr(client, method_name)("/government/x", {})

    args, _ = mock_request.call_args
    assert args == (
        http_method,
        f"https://publishing-api.example.com/{endpoint}/government/x",
    )


@patch("publishing_sync.core.client.requests.Session.request")
def test_destroy_intent_ignores_not_found(mock_request, mock_config):
    """Test that deleting an absent publish intent succeeds."""
    mock_request.return_value = _response(404, text="not found")

    client = PublishingApiClient(mock_config)
    assert client.destroy_intent("/government/x") == {}

    args, kwargs = mock_request.call_args
    assert args[0] == "DELETE"
    assert kwargs["json"] is None


@patch("publishing_sync.core.client.requests.Session.request")
def test_put_content_not_found_is_rejected(mock_request, mock_config):
    mock_request.return_value = _response(404, text="not found")

    client = PublishingApiClient(mock_config)
    with pytest.raises(DeliveryRejectedError) as exc_info:
        client.put_content("/government/x", {})

    assert exc_info.value.status_code == 404


@pytest.mark.parametrize("status", [429, 500, 502, 503, 504])
@patch("publishing_sync.core.client.requests.Session.request")
def test_retryable_status_is_transient(mock_request, status, mock_config):
    mock_request.return_value = _response(status)

    client = PublishingApiClient(mock_config)
    with pytest.raises(TransientDeliveryError) as exc_info:
        client.put_content("/government/x", {})

    assert exc_info.value.status_code == status
    assert exc_info.value.path == "/government/x"


@patch("publishing_sync.core.client.requests.Session.request")
def test_validation_error_is_rejected(mock_request, mock_config):
    """Test that a 422 is not retried."""
    mock_request.return_value = _response(422, text='{"error": "bad"}')

    client = PublishingApiClient(mock_config)
    with pytest.raises(DeliveryRejectedError, match="422"):
        client.put_content("/government/x", {})


@pytest.mark.parametrize(
    "exc", [requests.ConnectionError("refused"), requests.Timeout("slow")]
)
@patch("publishing_sync.core.client.requests.Session.request")
def test_network_errors_are_transient(mock_request, exc, mock_config):
    mock_request.side_effect = exc

    client = PublishingApiClient(mock_config)
    with pytest.raises(TransientDeliveryError):
        client.put_content("/government/x", {})


@patch("publishing_sync.core.client.requests.Session.request")
def test_invalid_base_path_sends_nothing(mock_request, mock_config):
    client = PublishingApiClient(mock_config)

    with pytest.raises(ValueError, match="Invalid base path"):
        client.put_content("government/x", {})

    mock_request.assert_not_called()


@patch("publishing_sync.core.client.requests.Session.request")
def test_non_json_body_returns_empty_dict(mock_request, mock_config):
    response = _response(200, {})
    response.json.side_effect = ValueError("not json")
    mock_request.return_value = response

    client = PublishingApiClient(mock_config)
    assert client.put_content("/government/x", {}) == {}


# Validator tests
@pytest.mark.parametrize(
    "path, expected_valid",
    [
        ("/government/case-studies/x", True),
        ("/government/case-studies/x.fr", True),
        ("", False),
        ("   ", False),
        ("government/x", False),
        ("/government/../etc", False),
        ("/government//x", False),
        ("/government/a b", False),
    ],
)
def test_validate_base_path(path, expected_valid):
    is_valid, error_msg = validate_base_path(path)
    assert is_valid is expected_valid
    assert (error_msg == "") is expected_valid


@pytest.mark.parametrize(
    "locale, expected_valid",
    [
        ("en", True),
        ("cy", True),
        ("zh-tw", True),
        ("es-419", True),
        ("", False),
        ("EN", False),
        ("e", False),
        ("en_GB", False),
    ],
)
def test_validate_locale(locale, expected_valid):
    is_valid, _ = validate_locale(locale)
    assert is_valid is expected_valid
