"""Multi-output gate controllers.

Some controllers drive several gates. The devices API reports them as
output1/output2/... flags with optional name1/name2/... labels. Each enabled
output is addressed as DEVICE_ID:N (see palgate_api.split_device_id).
"""


def detect_multi_output_devices(device):
    """Return enabled outputs of a multi-output device.

    Args:
        device: Device dict from the devices API.

    Returns:
        List of {"outputNum": int, "name": str | None}, or [] when the
        device has at most one enabled output.
    """
    outputs = []
    output_num = 1
    while f"output{output_num}" in device:
        enabled = device[f"output{output_num}"] is True
        disabled = device.get(f"output{output_num}Disabled") is True
        if enabled and not disabled:
            outputs.append({
                "outputNum": output_num,
                "name": device.get(f"name{output_num}") or None,
            })
        output_num += 1
    return outputs if len(outputs) > 1 else []


def generate_gate_entries(device_id, outputs, default_name):
    """Expand a device into one gate entry per enabled output."""
    if not outputs:
        return [{"deviceId": device_id, "name": default_name}]

    entries = []
    for output in outputs:
        num = output["outputNum"]
        if output["name"]:
            name = output["name"]
        elif default_name:
            name = f"{default_name} - Output {num}"
        else:
            name = f"Output {num}"
        entries.append({"deviceId": f"{device_id}:{num}", "name": name})
    return entries


def gates_for_device(device):
    """Gate entries for one device record from the devices API."""
    device_id = device.get("id") or device.get("_id")
    default_name = device.get("name1") or device_id
    outputs = detect_multi_output_devices(device)
    return generate_gate_entries(device_id, outputs, default_name)
