#!/usr/bin/env python3
"""
PalGate CLI — generate temporal tokens and call the PalGate API.

Usage:
    python palgate/palgate_cli.py token    [-t TOKEN -p PHONE -T TYPE] [--timestamp TS]
    python palgate/palgate_cli.py validate [-t TOKEN -p PHONE -T TYPE]
    python palgate/palgate_cli.py devices  [-t TOKEN -p PHONE -T TYPE]
    python palgate/palgate_cli.py gates    [-t TOKEN -p PHONE -T TYPE]
    python palgate/palgate_cli.py info     -d DEVICE_ID [-t TOKEN -p PHONE -T TYPE]
    python palgate/palgate_cli.py open     -d DEVICE_ID[:OUTPUT] [-t TOKEN -p PHONE -T TYPE]
    python palgate/palgate_cli.py link                 # QR linking, saves ~/.palgate-cli.json
    python palgate/palgate_cli.py config [--auto]      # link + add Homebridge platform

Credentials not given on the command line are read from ~/.palgate-cli.json.
Add -v before the command for debug output.
"""

import argparse
import json
import sys

import device_link
import palgate_api
import palgate_config
from gate_outputs import gates_for_device
from token_gen import generate_token, parse_session_token

VERBOSE = False

CREDENTIAL_KEYS = ("token", "phoneNumber", "tokenType")


def debug(*parts):
    if VERBOSE:
        print("[DEBUG]", *parts)


def print_json(obj):
    print(json.dumps(obj, indent=2))


class MissingOption(Exception):
    pass


def resolve_options(args, keys):
    """Fill missing options from the local config file.

    Returns a dict keyed by the config names (token, phoneNumber, ...).
    """
    given = {
        "token": args.token,
        "phoneNumber": args.phone_number,
        "tokenType": args.token_type,
        "deviceId": getattr(args, "device_id", None),
    }
    file_config = None
    resolved = {}
    for key in keys:
        value = given.get(key)
        if value in (None, ""):
            if file_config is None:
                file_config = palgate_config.load_local_config()
            value = file_config.get(key)
            if value in (None, ""):
                raise MissingOption(
                    f"Missing required parameter: {key} and no value found in "
                    f"{palgate_config.local_config_path()}"
                )
            debug(f"Loaded {key} from local config file.")
        resolved[key] = value
    return resolved


def temporal_token(opts, timestamp=None):
    return generate_token(
        parse_session_token(str(opts["token"])),
        opts["phoneNumber"],
        opts["tokenType"],
        timestamp=timestamp,
        timestamp_offset=palgate_config.get_timestamp_offset(),
        master_key=palgate_config.get_master_key(),
    )


# --- Commands ---


def cmd_token(args):
    opts = resolve_options(args, CREDENTIAL_KEYS)
    token = temporal_token(opts, timestamp=args.timestamp)
    print("Generated temporal token")
    print_json({"token": token})
    return 0


def cmd_validate(args):
    opts = resolve_options(args, CREDENTIAL_KEYS)
    token = temporal_token(opts)
    debug("Generated temporal token for validation:", token)
    response = palgate_api.validate_token(token)
    print("Token validated successfully")
    print_json({"response": response})
    return 0


def cmd_devices(args):
    opts = resolve_options(args, CREDENTIAL_KEYS)
    token = temporal_token(opts)
    debug("Generated temporal token for getting devices:", token)
    response = palgate_api.get_devices(token)
    print("Devices retrieved successfully")
    print_json({"response": response})
    return 0


def cmd_gates(args):
    opts = resolve_options(args, CREDENTIAL_KEYS)
    token = temporal_token(opts)
    response = palgate_api.get_devices(token)
    devices = response.get("devices") if isinstance(response, dict) else None
    if not isinstance(devices, list):
        raise palgate_api.PalGateApiError("Invalid devices response: missing devices array.")
    debug("Discovered", len(devices), "device(s)")
    gates = []
    for device in devices:
        gates.extend(gates_for_device(device))
    print_json({"gates": gates})
    return 0


def cmd_info(args):
    opts = resolve_options(args, ("deviceId",) + CREDENTIAL_KEYS)
    debug("Device ID is:", opts["deviceId"])
    token = temporal_token(opts)
    response = palgate_api.get_device_info(token, opts["deviceId"])
    print("Device info retrieved successfully")
    print_json({"response": response})
    return 0


def cmd_open(args):
    opts = resolve_options(args, ("deviceId",) + CREDENTIAL_KEYS)
    debug("Device ID is:", opts["deviceId"])
    token = temporal_token(opts)
    debug("Generated temporal token for opening gate:", token)
    response = palgate_api.open_gate(opts["deviceId"], token)
    print("Gate opened successfully")
    print_json({"response": response})
    return 0


def _link_and_save():
    linking = device_link.start_device_linking()
    debug("Device linking successful!")
    debug("Phone Number:", linking["phoneNumber"])
    debug("Token Type:", linking["tokenType"])
    config = palgate_config.linking_to_local_config(linking)
    print("Configuration generated")
    print_json({"config": config})
    path = palgate_config.save_local_config(config)
    print(f"Local configuration saved to {path}")
    return linking


def cmd_link(args):
    _link_and_save()
    return 0


def cmd_config(args):
    linking = _link_and_save()
    if args.auto:
        platform = palgate_config.build_platform_config(linking)
        path = palgate_config.append_homebridge_platform(platform)
        print(f"Homebridge configuration updated and saved to {path}")
        print("New Platform Added:")
        print_json(platform)
        print("Note: You will need to restart Homebridge for the platform to initialise")
    return 0


# --- Main ---


COMMANDS = {
    "token": cmd_token,
    "validate": cmd_validate,
    "devices": cmd_devices,
    "gates": cmd_gates,
    "info": cmd_info,
    "open": cmd_open,
    "link": cmd_link,
    "config": cmd_config,
}


def build_parser():
    creds = argparse.ArgumentParser(add_help=False)
    creds.add_argument("-t", "--token", help="Session token (32 hex chars)")
    creds.add_argument("-p", "--phone-number", help="Account phone number")
    creds.add_argument("-T", "--token-type", help="Token type: 0=SMS, 1=primary, 2=secondary")

    device = argparse.ArgumentParser(add_help=False)
    device.add_argument("-d", "--device-id", help="Device id, optionally DEVICE_ID:OUTPUT")

    parser = argparse.ArgumentParser(description="PalGate token generator and API client")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug output")
    sub = parser.add_subparsers(dest="command", required=True)

    p_token = sub.add_parser("token", parents=[creds], help="Generate a temporal token")
    p_token.add_argument("--timestamp", type=int, default=None,
                         help="Unix seconds to embed (default: now)")
    sub.add_parser("validate", parents=[creds], help="Validate credentials against the API")
    sub.add_parser("devices", parents=[creds], help="List devices")
    sub.add_parser("gates", parents=[creds], help="List gates (one per enabled output)")
    sub.add_parser("info", parents=[creds, device], help="Show device info")
    sub.add_parser("open", parents=[creds, device], help="Open a gate")
    sub.add_parser("link", help="Link as a secondary device (QR code)")
    p_config = sub.add_parser("config",
                              help="Link and print configuration")
    p_config.add_argument("-a", "--auto", action="store_true",
                          help="Append the platform to ~/.homebridge/config.json")
    return parser


def main(argv=None):
    global VERBOSE
    args = build_parser().parse_args(argv)
    VERBOSE = args.verbose

    try:
        return COMMANDS[args.command](args)
    except MissingOption as e:
        print(e, file=sys.stderr)
        return 1
    except palgate_config.ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Invalid credentials: {e}", file=sys.stderr)
        return 1
    except palgate_api.PalGateApiError as e:
        print(f"{args.command} failed: {e}", file=sys.stderr)
        return 1
    except device_link.LinkTimeout as e:
        print(f"Device linking failed: {e}", file=sys.stderr)
        return 1
    except FileNotFoundError as e:
        print(e, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
