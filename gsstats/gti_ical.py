"""Interactive calibration of touch interfaces through their sysfs nodes."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class IcalTarget:
    """Properties and sysfs node belonging to one touch interface."""

    state_prop: str
    result_prop: str
    sysfs: str


DEFAULT_TARGETS = (
    IcalTarget(
        "vendor.touch.gti0.ical.state",
        "vendor.touch.gti0.ical.result",
        "/sys/devices/virtual/goog_touch_interface/gti.0/interactive_calibrate",
    ),
    IcalTarget(
        "vendor.touch.gti1.ical.state",
        "vendor.touch.gti1.ical.result",
        "/sys/devices/virtual/goog_touch_interface/gti.1/interactive_calibrate",
    ),
)

_SECOND_DEVICE_NAMES = ("1", "gti1", "gti.1")


def select_target(device) -> int:
    """Return 1 when ``device`` is a prefix of a second-interface name, else 0."""
    length = len(device)
    for name in _SECOND_DEVICE_NAMES:
        if name[:length] == device:
            return 1
    return 0


def run_calibration(args, properties, targets=DEFAULT_TARGETS) -> None:
    """Run one calibration command, recording progress in ``properties``.

    ``args`` holds the device and the command; the command ``read`` (or a
    prefix of it) reads the node's result, any other command is written to it.
    """
    if len(args) < 2:
        _log.warning("No target dev or command for interactive_calibrate sysfs.")
        properties[targets[0].state_prop] = "done"
        properties[targets[1].state_prop] = "done"
        return

    device, command = args[0], args[1]
    target = targets[select_target(device)]

    properties[target.result_prop] = "na"
    properties[target.state_prop] = "running"
    if not os.access(target.sysfs, os.F_OK | os.R_OK | os.W_OK):
        _log.warning("Can't access %s", target.sysfs)
        properties[target.state_prop] = "done"
        return

    try:
        handle = open(target.sysfs, "r+", encoding="utf-8", errors="replace")
    except OSError:
        _log.warning("Can't open %s", target.sysfs)
        properties[target.state_prop] = "done"
        return

    with handle:
        if "read".startswith(command):
            line = handle.readline()
            properties[target.state_prop] = "read"
            properties[target.result_prop] = line
            _log.info("read: %s => %s", target.sysfs, line)
        else:
            properties[target.state_prop] = command
            handle.write(command)
            _log.info("write: %s => %s", command, target.sysfs)
        properties[target.state_prop] = "done"


def main(argv=None) -> int:
    """Run a calibration command and print the resulting properties."""
    if argv is None:
        argv = sys.argv[1:]
    logging.basicConfig(level=logging.INFO, stream=sys.stdout, format="%(message)s")
    properties: dict[str, str] = {}
    run_calibration(list(argv), properties)
    for name, value in properties.items():
        print(f"[{name}]: [{value.rstrip()}]")
    return 0