"""
PalGate cloud API client.

Every request carries a freshly generated temporal token in the x-bt-token
header. Responses are JSON; HTTP errors are raised as PalGateApiError with
the status code and body.
"""

import json
import re
import time

import requests

from token_constants import BASE_URL, TOKEN_HEADER

DEFAULT_TIMEOUT = 10  # seconds

DEFAULT_HEADERS = {
    "Accept": "*/*",
    "Accept-Language": "en-us",
    "Content-Type": "application/json",
}

_session = None


class PalGateApiError(RuntimeError):
    pass


def get_session():
    """Shared keep-alive session, created on first use."""
    global _session
    if _session is None:
        _session = requests.Session()
        _session.headers.update(DEFAULT_HEADERS)
    return _session


def build_url(endpoint):
    if endpoint.startswith(("http://", "https://")):
        return endpoint
    return BASE_URL + endpoint.lstrip("/")


def call_api(endpoint, token, session=None, timeout=DEFAULT_TIMEOUT):
    """GET an API endpoint and return the decoded JSON body.

    Args:
        endpoint: Path relative to BASE_URL, or an absolute URL.
        token: Temporal token for the x-bt-token header ('' for none).
        session: requests.Session to use (defaults to the shared one).
        timeout: Request timeout in seconds.
    """
    session = session or get_session()
    url = build_url(endpoint)
    try:
        resp = session.get(url, headers={TOKEN_HEADER: token}, timeout=timeout)
        resp.raise_for_status()
    except requests.HTTPError as e:
        raise PalGateApiError(
            f"API call error: {e.response.status_code} - {_error_body(e.response)}"
        ) from e
    except requests.RequestException as e:
        raise PalGateApiError(f"API call failed: {e}") from e
    try:
        return resp.json()
    except ValueError as e:
        raise PalGateApiError(f"API call failed: invalid JSON response ({e})") from e


def _error_body(response):
    try:
        return json.dumps(response.json(), indent=2)
    except ValueError:
        return response.text


def split_device_id(device_id):
    """Split 'DEVICE:N' into ('DEVICE', N). Plain ids map to output 1."""
    if ":" in device_id:
        base_id, possible_output = device_id.rsplit(":", 1)
        if re.fullmatch(r"\d+", possible_output) and int(possible_output) > 0:
            return base_id, int(possible_output)
    return device_id, 1


def validate_token(token, session=None):
    ts = int(time.time())
    return call_api(f"user/check-token?ts={ts}&ts_diff=0", token, session=session)


def open_gate(device_id, token, session=None):
    """Open a gate. A trailing ':N' on device_id selects output N."""
    base_id, output_num = split_device_id(device_id)
    return call_api(f"device/{base_id}/open-gate?outputNum={output_num}", token, session=session)


def get_devices(token, session=None):
    return call_api("devices/", token, session=session)


def get_device_info(token, device_id, session=None):
    return call_api(f"device/{device_id}/", token, session=session)


def poll_link(unique_id, session=None):
    """Check whether the app has scanned the linking QR code yet."""
    return call_api(f"un/secondary/init/{unique_id}", "", session=session)
