"""Pytest configuration and fixtures."""
import json
import os
from unittest.mock import Mock

import pytest
import requests

# Set test environment variables
os.environ["NODE_SDK_ENV"] = "test"
os.environ["NODE_SDK_LOG_JSON"] = "false"
os.environ.pop("NODE_SDK_FINDYMAIL_API_KEY", None)
os.environ.pop("NODE_SDK_FINDYMAIL_HEADER_SCHEME", None)


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings so monkeypatched env vars are picked up."""
    from node_sdk.config import reset_settings

    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def make_response():
    """Build a real requests.Response with a JSON (or raw) body."""

    def _make(status_code=200, body=None, raw=None, url="https://app.findymail.com/api/x"):
        response = requests.Response()
        response.status_code = status_code
        response.reason = "OK" if status_code < 400 else "Error"
        response.url = url
        if raw is not None:
            response._content = raw.encode()
        else:
            response._content = json.dumps(body if body is not None else {}).encode()
        return response

    return _make


@pytest.fixture
def http_client(make_response):
    """HttpClient stand-in; set ``.request.side_effect`` or ``.return_value``."""
    from node_sdk import HttpResponse

    client = Mock()
    client.request.return_value = HttpResponse(make_response(200, {"ok": True}))
    return client


@pytest.fixture
def make_node(http_client):
    """Create a FindyMailNode wired to a context and the mocked transport."""
    from findymail import CREDENTIAL_TYPES, FindyMailNode
    from node_sdk import NodeExecutionContext

    def _make(parameters, items=None, continue_on_fail=False, item_parameters=None,
              credentials=None):
        context = NodeExecutionContext(
            parameters=parameters,
            credentials=credentials or {"findyMailApi": {"apiKey": "test-key"}},
            input_data=items if items is not None else [{"json": {}}],
            credential_types=CREDENTIAL_TYPES,
            item_parameters=item_parameters,
            http_client=http_client,
        )
        node = FindyMailNode(continue_on_fail=continue_on_fail)
        node.set_context(context)
        return node

    return _make
