"""Tests for CLI commands."""
import json
from argparse import Namespace
from unittest.mock import patch

import pytest

from findymail.cli import cmd_operations, cmd_run, cmd_test_credential, load_items, parse_params
from node_sdk import HttpResponse


def run_args(**overrides):
    args = dict(
        operation="verifyEmail",
        param=[],
        items=None,
        continue_on_fail=False,
        api_key="cli-key",
        header_scheme=None,
    )
    args.update(overrides)
    return Namespace(**args)


class TestParseParams:
    """Test key=value parameter parsing."""

    def test_strings_lists_and_options(self):
        params = parse_params([
            "name=John Doe",
            "domain=example.com",
            "jobTitles=CTO",
            "jobTitles=CEO",
            "additionalOptions.webhook_url=https://h.example.com",
            "additionalOptions.with_profile=true",
        ])

        assert params == {
            "name": "John Doe",
            "domain": "example.com",
            "jobTitles": ["CTO", "CEO"],
            "additionalOptions": {"webhook_url": "https://h.example.com", "with_profile": True},
        }

    def test_json_list_and_numeric_string(self):
        params = parse_params(['jobTitles=["A", "B"]', "name=123"])
        assert params == {"jobTitles": ["A", "B"], "name": "123"}

    def test_missing_separator(self):
        with pytest.raises(ValueError, match="Expected key=value"):
            parse_params(["name"])


class TestLoadItems:
    """Test items file loading."""

    def test_default_single_item(self):
        assert load_items(None) == [{"json": {}}]

    def test_wraps_plain_objects(self, tmp_path):
        path = tmp_path / "items.json"
        path.write_text(json.dumps([{"email": "a@x.com"}, {"json": {"email": "b@x.com"}}]))

        assert load_items(str(path)) == [
            {"json": {"email": "a@x.com"}},
            {"json": {"email": "b@x.com"}},
        ]

    def test_rejects_non_array(self, tmp_path):
        path = tmp_path / "items.json"
        path.write_text("{}")
        with pytest.raises(ValueError):
            load_items(str(path))


class TestCmdRun:
    """Test run command."""

    @patch("findymail.cli.setup_logging")
    @patch("node_sdk.http.requests.request")
    def test_run_prints_results(self, mock_request, mock_logging, make_response, capsys):
        mock_request.return_value = make_response(200, {"email": "a@example.com", "verified": True})

        result = cmd_run(run_args(param=["email=a@example.com"]))

        assert result == 0
        output = json.loads(capsys.readouterr().out)
        assert output == [{"json": {"email": "a@example.com", "verified": True}, "pairedItem": {"item": 0}}]
        assert mock_request.call_args.kwargs["headers"]["X-API-Key"] == "cli-key"

    @patch("findymail.cli.setup_logging")
    @patch("node_sdk.http.requests.request")
    def test_run_aborts_on_failure(self, mock_request, mock_logging, capsys):
        result = cmd_run(run_args())

        assert result == 1
        assert "Missing required parameter(s): Email [item 0]" in capsys.readouterr().err
        mock_request.assert_not_called()

    @patch("findymail.cli.setup_logging")
    @patch("node_sdk.http.requests.request")
    def test_run_continue_on_fail(self, mock_request, mock_logging, capsys):
        result = cmd_run(run_args(continue_on_fail=True))

        assert result == 0
        output = json.loads(capsys.readouterr().out)
        assert output[0]["json"] == {"error": "Missing required parameter(s): Email"}

    @patch("findymail.cli.setup_logging")
    @patch("node_sdk.http.requests.request")
    def test_api_key_from_settings(self, mock_request, mock_logging, monkeypatch, make_response):
        monkeypatch.setenv("NODE_SDK_FINDYMAIL_API_KEY", "env-key")
        monkeypatch.setenv("NODE_SDK_FINDYMAIL_HEADER_SCHEME", "bearer")
        mock_request.return_value = make_response(200, {})

        cmd_run(run_args(api_key=None, param=["email=a@example.com"]))

        assert mock_request.call_args.kwargs["headers"]["Authorization"] == "Bearer env-key"


class TestCmdTestCredential:
    """Test test-credential command."""

    @patch("findymail.cli.setup_logging")
    @patch("findymail.cli.FindyMailApiCredential.test")
    def test_success(self, mock_test, mock_logging, capsys):
        mock_test.return_value = {"success": True, "message": "ok", "data": {"credits": 3}}

        assert cmd_test_credential(Namespace(api_key="k", header_scheme="apiKey")) == 0
        assert '"credits": 3' in capsys.readouterr().out

    @patch("findymail.cli.setup_logging")
    @patch("findymail.cli.FindyMailApiCredential.test")
    def test_failure(self, mock_test, mock_logging):
        mock_test.return_value = {"success": False, "message": "Invalid API key."}

        assert cmd_test_credential(Namespace(api_key="k", header_scheme=None)) == 1


def test_cmd_operations_lists_table(capsys):
    assert cmd_operations(Namespace()) == 0
    out = capsys.readouterr().out
    assert "findEmployees: POST https://app.findymail.com/api/search/employees" in out
    assert "jobTitles -> job_titles (required)" in out
    assert "one of: companyName -> name" in out
