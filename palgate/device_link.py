"""
Device linking flow.

Links this client as a secondary device of a PalGate account:
  1. Generate a unique id and show it as a QR code ({"id": "<uuid>"}).
  2. The user scans it in the PalGate app (Settings -> Device Linking).
  3. Poll un/secondary/init/<id> until the response carries the user and
     secondary fields, which hold the phone number, session token and
     token type.
"""

import json
import sys
import time
import uuid

import qrcode

import palgate_api

LINK_TIMEOUT = 60  # seconds
POLL_INTERVAL = 3  # seconds


class LinkTimeout(RuntimeError):
    pass


def new_link_id():
    return str(uuid.uuid4())


def qr_payload(unique_id):
    return json.dumps({"id": unique_id})


def render_qr(payload, out=None):
    """Print the payload as a terminal QR code."""
    qr = qrcode.QRCode(border=1)
    qr.add_data(payload)
    qr.make(fit=True)
    qr.print_ascii(out=out or sys.stdout, invert=True)


def parse_link_response(response):
    """Extract linking data, or None if the code has not been scanned yet."""
    if not isinstance(response, dict):
        return None
    user = response.get("user")
    secondary = response.get("secondary")
    if not user or not secondary:
        return None
    return {
        "phoneNumber": user.get("id"),
        "sessionToken": user.get("token"),
        "tokenType": secondary,
    }


def wait_for_link(unique_id, timeout=LINK_TIMEOUT, interval=POLL_INTERVAL,
                  poll=None, sleep=time.sleep, clock=time.monotonic):
    """Poll the linking endpoint until the app confirms, or time out.

    API errors while polling are treated as "not yet" and retried.

    Returns:
        Dict with phoneNumber, sessionToken, tokenType.

    Raises:
        LinkTimeout: No confirmation within `timeout` seconds.
    """
    poll = poll or palgate_api.poll_link
    start = clock()
    while True:
        try:
            linking = parse_link_response(poll(unique_id))
        except palgate_api.PalGateApiError as e:
            print(f"Link poll failed, retrying: {e}", file=sys.stderr)
            linking = None
        if linking is not None:
            return linking
        if clock() - start > timeout:
            raise LinkTimeout("Device linking timed out.")
        sleep(interval)


def start_device_linking(timeout=LINK_TIMEOUT, interval=POLL_INTERVAL, poll=None):
    """Run the full linking flow on the terminal."""
    unique_id = new_link_id()
    print("Please scan this QR code with your PalGate app to link your device:")
    render_qr(qr_payload(unique_id))
    print("Waiting for device linking response...")
    return wait_for_link(unique_id, timeout=timeout, interval=interval, poll=poll)
