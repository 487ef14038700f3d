"""
Configuration for the PalGate client.

Sources:
  - Environment overrides for the client constants:
      PALGATE_MASTER_KEY        hex-encoded, 16 bytes (replaces T_C_KEY)
      PALGATE_TIMESTAMP_OFFSET  integer seconds (replaces TIMESTAMP_OFFSET)
  - Local credential file written by the linking flow:
      ~/.palgate-cli.json  (override path with PALGATE_CLI_CONFIG)
  - Homebridge config, for `palgate_cli.py config --auto`:
      ~/.homebridge/config.json
"""

import json
import os
import sys

from token_constants import KEY_SIZE, T_C_KEY, TIMESTAMP_OFFSET

LOCAL_CONFIG_PATH = os.path.join(os.path.expanduser("~"), ".palgate-cli.json")
HOMEBRIDGE_CONFIG_PATH = os.path.join(os.path.expanduser("~"), ".homebridge", "config.json")

PLATFORM_NAME = "PalGate Platform"
PLATFORM_ALIAS = "PalGatePlatform"
DEFAULT_ACCESSORY_TYPE = "garageDoor"
DEFAULT_GATE_CLOSE_DELAY_MS = 5000


class ConfigError(ValueError):
    pass


def get_master_key():
    """Return the client master key, honouring PALGATE_MASTER_KEY."""
    key_hex = os.environ.get("PALGATE_MASTER_KEY", "")
    if not key_hex:
        return T_C_KEY
    try:
        key = bytes.fromhex(key_hex)
    except ValueError:
        raise ConfigError(f"PALGATE_MASTER_KEY must be hex-encoded, got {key_hex!r}") from None
    if len(key) != KEY_SIZE:
        raise ConfigError(
            f"PALGATE_MASTER_KEY must be {KEY_SIZE} bytes, got {len(key)}"
        )
    return key


def get_timestamp_offset():
    """Return the timestamp offset, honouring PALGATE_TIMESTAMP_OFFSET."""
    raw = os.environ.get("PALGATE_TIMESTAMP_OFFSET", "")
    if not raw:
        return TIMESTAMP_OFFSET
    try:
        return int(raw, 0)
    except ValueError:
        raise ConfigError(f"PALGATE_TIMESTAMP_OFFSET must be an integer, got {raw!r}") from None


def local_config_path():
    return os.environ.get("PALGATE_CLI_CONFIG") or LOCAL_CONFIG_PATH


def load_local_config(path=None):
    """Load saved credentials. Missing, empty or invalid files yield {}."""
    path = path or local_config_path()
    if not os.path.exists(path):
        return {}
    with open(path, "r") as f:
        content = f.read().strip()
    if not content:
        print("WARNING: local configuration file is empty, ignoring it", file=sys.stderr)
        return {}
    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        print(f"WARNING: {path} is not valid JSON, ignoring it", file=sys.stderr)
        return {}
    if not isinstance(data, dict):
        print(f"WARNING: {path} does not hold a JSON object, ignoring it", file=sys.stderr)
        return {}
    return data


def save_local_config(config, path=None):
    """Write credentials as pretty JSON, readable by the owner only."""
    path = path or local_config_path()
    with open(path, "w") as f:
        json.dump(config, f, indent=2)
    os.chmod(path, 0o600)
    return path


def linking_to_local_config(linking):
    """Map linking flow output to the local config schema."""
    return {
        "phoneNumber": linking["phoneNumber"],
        "token": linking["sessionToken"],
        "tokenType": int(linking["tokenType"]),
    }


def build_platform_config(linking):
    """Build a Homebridge platform entry from linking flow output."""
    return {
        "name": PLATFORM_NAME,
        "platform": PLATFORM_ALIAS,
        "token": linking["sessionToken"],
        "phoneNumber": linking["phoneNumber"],
        "tokenType": int(linking["tokenType"]),
        "accessoryType": DEFAULT_ACCESSORY_TYPE,
        "gateCloseDelay": DEFAULT_GATE_CLOSE_DELAY_MS,
    }


def append_homebridge_platform(platform, path=None):
    """Append a platform entry to the Homebridge config file."""
    path = path or HOMEBRIDGE_CONFIG_PATH
    if not os.path.exists(path):
        raise FileNotFoundError(
            f"Homebridge config not found at {path}. "
            "Please ensure Homebridge is installed and configured."
        )
    with open(path, "r") as f:
        try:
            hb_config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Homebridge config {path} is not valid JSON: {e}") from None
    if not isinstance(hb_config, dict):
        raise ConfigError(f"Homebridge config {path} does not hold a JSON object")
    if not isinstance(hb_config.get("platforms"), list):
        hb_config["platforms"] = []
    hb_config["platforms"].append(platform)
    with open(path, "w") as f:
        json.dump(hb_config, f, indent=2)
    return path
