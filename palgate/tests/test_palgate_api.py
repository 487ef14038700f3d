"""Tests for palgate_api.py — URL building, headers, error mapping."""

import os
import sys
from unittest.mock import MagicMock, patch

import pytest
import requests

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
import palgate_api as api  # noqa: E402

TOKEN = "11" + "AB" * 22


def _response(status=200, body=None, text=""):
    resp = MagicMock()
    resp.status_code = status
    resp.text = text
    if body is None:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = body
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(response=resp)
    return resp


def _session(resp):
    session = MagicMock()
    session.get.return_value = resp
    return session


class TestBuildUrl:
    def test_relative(self):
        assert api.build_url("devices/") == "https://api1.pal-es.com/v1/bt/devices/"

    def test_leading_slash(self):
        assert api.build_url("/devices/") == "https://api1.pal-es.com/v1/bt/devices/"

    def test_absolute_passthrough(self):
        url = "https://example.com/x"
        assert api.build_url(url) == url


class TestCallApi:
    def test_sends_token_header_and_returns_json(self):
        session = _session(_response(body={"status": "ok"}))
        result = api.call_api("devices/", TOKEN, session=session)
        assert result == {"status": "ok"}
        session.get.assert_called_once_with(
            "https://api1.pal-es.com/v1/bt/devices/",
            headers={"x-bt-token": TOKEN},
            timeout=api.DEFAULT_TIMEOUT,
        )

    def test_http_error_with_json_body(self):
        session = _session(_response(status=401, body={"err": "bad token"}))
        with pytest.raises(api.PalGateApiError, match="API call error: 401") as exc:
            api.call_api("devices/", TOKEN, session=session)
        assert "bad token" in str(exc.value)

    def test_http_error_with_text_body(self):
        session = _session(_response(status=500, text="boom"))
        with pytest.raises(api.PalGateApiError, match="API call error: 500 - boom"):
            api.call_api("devices/", TOKEN, session=session)

    def test_transport_error(self):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("no route")
        with pytest.raises(api.PalGateApiError, match="API call failed: no route"):
            api.call_api("devices/", TOKEN, session=session)

    def test_invalid_json(self):
        session = _session(_response(body=None, text="<html>"))
        with pytest.raises(api.PalGateApiError, match="invalid JSON"):
            api.call_api("devices/", TOKEN, session=session)

    def test_shared_session_has_default_headers(self):
        with patch("palgate_api._session", None):
            session = api.get_session()
            assert session.headers["Accept-Language"] == "en-us"
            assert session.headers["Content-Type"] == "application/json"
            assert api.get_session() is session


class TestSplitDeviceId:
    def test_plain(self):
        assert api.split_device_id("ABC123") == ("ABC123", 1)

    def test_with_output(self):
        assert api.split_device_id("ABC123:2") == ("ABC123", 2)

    def test_zero_output_ignored(self):
        assert api.split_device_id("ABC123:0") == ("ABC123:0", 1)

    def test_non_numeric_suffix_ignored(self):
        assert api.split_device_id("ABC:xyz") == ("ABC:xyz", 1)

    def test_only_last_colon_splits(self):
        assert api.split_device_id("A:B:3") == ("A:B", 3)


class TestEndpoints:
    def _called_url(self, session):
        return session.get.call_args[0][0]

    def test_open_gate_default_output(self):
        session = _session(_response(body={}))
        api.open_gate("DEV1", TOKEN, session=session)
        assert self._called_url(session).endswith("device/DEV1/open-gate?outputNum=1")

    def test_open_gate_selected_output(self):
        session = _session(_response(body={}))
        api.open_gate("DEV1:3", TOKEN, session=session)
        assert self._called_url(session).endswith("device/DEV1/open-gate?outputNum=3")

    def test_validate_token(self):
        session = _session(_response(body={}))
        with patch("palgate_api.time.time", return_value=1700000000.4):
            api.validate_token(TOKEN, session=session)
        assert self._called_url(session).endswith("user/check-token?ts=1700000000&ts_diff=0")

    def test_get_devices(self):
        session = _session(_response(body={"devices": []}))
        assert api.get_devices(TOKEN, session=session) == {"devices": []}
        assert self._called_url(session).endswith("/devices/")

    def test_get_device_info(self):
        session = _session(_response(body={"id": "DEV1"}))
        api.get_device_info(TOKEN, "DEV1", session=session)
        assert self._called_url(session).endswith("device/DEV1/")

    def test_poll_link_sends_empty_token(self):
        session = _session(_response(body={}))
        api.poll_link("uuid-1", session=session)
        assert self._called_url(session).endswith("un/secondary/init/uuid-1")
        assert session.get.call_args[1]["headers"] == {"x-bt-token": ""}
