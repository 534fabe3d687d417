# SPDX-License-Identifier: GPL-3.0-or-later
#
# Copyright 2025 Jason Gerecke <jason.gerecke@wacom.com>
# Copyright 2025 Wacom Co., Ltd.
#
# See the NOTICE file distributed with this work for additional information
# regarding copyright ownership.

"""Change the video input of monitors that expose their DDC/CI.

The capabilities string of each monitor is read (or taken from the cache)
to find out whether it supports input selection (VCP code 0x60) and which
inputs it advertises. Without a command, the monitors and their inputs are
listed and the input to switch to is chosen interactively.

Usage:
    ddc-input [options] <path> [<path> ...]
    ddc-input [options] <path> dump
    ddc-input [options] <path> list
    ddc-input [options] <path> inputs
    ddc-input [options] <path> set <INPUT>

Options:
    -v, --verbose  Print diagnostic messages, including DDC/CI traffic.
    --no-cache     Always read the capabilities from the monitor.
    --clear-cache  Empty the capabilities cache before doing anything else.
    -h, --help     Show this message.
    --version      Print the program version.

Arguments:
    <path>         Path to the device to be controlled. Supported devices
                   include serial device nodes (e.g. `/dev/ttyUSB0`),
                   PyFtdi URLs (e.g. `ftdi://ftdi:232h/1`), and I2C device
                   nodes (e.g. `/dev/i2c-3`).
    dump           Print the raw capabilities string.
    list           Print the VCP codes and values the monitor supports.
    inputs         Print the supported inputs, marking the current one.
    set            Switch to the given input.
    <INPUT>        One of displayport-1, displayport-2, hdmi-1, hdmi-2, or
                   the VCP 0x60 value of the input (e.g. "0x11").

    Capabilities strings are cached in $DDC_INPUT_CACHE_DIR (by default
    ~/.cache/ddc_input) since reading them takes several seconds.

Examples:
    # Choose a monitor and input interactively
    ddc-input /dev/i2c-3 /dev/i2c-4

    # Switch the monitor at /dev/ttyUSB0 to its first HDMI input
    ddc-input /dev/ttyUSB0 set hdmi-1

    # Show which inputs the monitor at ftdi://ftdi:232h/1 supports
    ddc-input ftdi://ftdi:232h/1 inputs
"""

import logging
import sqlite3
import sys
from contextlib import ExitStack

from . import __version__, config
from .cache import CapabilitiesCache
from .capabilities import Input
from .monitor import Monitor, open_monitors

logger = logging.getLogger(__name__)

COMMANDS = ["dump", "list", "inputs", "set"]


def setup_logging(verbose):
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(f"{config.PROGRAM_NAME}: %(levelname)s: %(message)s"))
    package_logger = logging.getLogger("ddc_input")
    package_logger.handlers[:] = [handler]
    package_logger.setLevel(logging.DEBUG if verbose else logging.ERROR)


def get_choice(prompt, choices):
    """
    Ask until one of the numeric 'choices' is entered. Returns None if
    the input ends first.
    """
    choices_string = "/".join(str(choice) for choice in choices)
    while True:
        try:
            answer = input(f"{prompt} ({choices_string}): ")
        except EOFError:
            return None
        try:
            choice = int(answer.strip())
        except ValueError:
            continue
        if choice in choices:
            return choice


def format_capabilities(capabilities):
    """
    Produce a user-friendly listing of the decoded VCP codes.

    >>> from ddc_input.parser import parse_capabilities_string
    >>> caps = parse_capabilities_string("(vcp(10 60(11 0F)))")
    >>> print(format_capabilities(caps))
    vcp:
      - 0x10
      - 0x60: 0x11 0x0F
    """
    if capabilities.vcp is None:
        return "vcp: none"
    lines = ["vcp:"]
    for vcp_code in capabilities.vcp:
        line = f"  - 0x{vcp_code.code:02X}"
        if vcp_code.values:
            line += ": " + " ".join(f"0x{value:02X}" for value in vcp_code.values)
        lines.append(line)
    return "\n".join(lines)


def print_inputs(inputs, current):
    for i, item in enumerate(inputs, start=1):
        if item == current:
            print(f"{i}) {item} (*)")
        else:
            print(f"{i}) {item}")


def run_command(path, command, args, cache):
    if command == "set":
        if len(args) != 1:
            print(__doc__, file=sys.stderr)
            return 2
        target = Input.from_name(args[0])

    with Monitor(path, cache=cache) as monitor:
        if command == "dump":
            print(monitor.capabilities_string)
        elif command == "list":
            print(format_capabilities(monitor.capabilities))
        elif command == "inputs":
            inputs = monitor.capabilities.supported_inputs()
            if inputs is None:
                logger.error(f"Monitor '{monitor.name}' does not support input select")
                return 1
            print_inputs(inputs, monitor.input())
        elif command == "set":
            monitor.set_input(target)
            print(f"Set input of {monitor.name} to {target}")
    return 0


def run_interactive(paths, cache):
    with ExitStack() as stack:
        monitors = []
        for monitor in open_monitors(paths, stack, cache=cache):
            if monitor.capabilities.has_input_select():
                monitors.append(monitor)
            else:
                logger.warning(
                    f"Ignoring monitor '{monitor.name}' since it doesn't support input select"
                )

        if len(monitors) == 0:
            print(
                f"{config.PROGRAM_NAME}: unable to find a monitor, try "
                f"`{config.PROGRAM_NAME} --verbose` for more information",
                file=sys.stderr,
            )
            return 0

        for i, monitor in enumerate(monitors, start=1):
            print(f"{i}) {monitor.name}")
        choice = get_choice("Monitor", list(range(1, len(monitors) + 1)))
        if choice is None:
            return 1
        monitor = monitors[choice - 1]

        current = monitor.input()
        inputs = monitor.capabilities.supported_inputs()
        if len(inputs) == 0:
            logger.error(f"Monitor '{monitor.name}' does not advertise any known input")
            return 1
        print_inputs(inputs, current)
        choice = get_choice("Input", list(range(1, len(inputs) + 1)))
        if choice is None:
            return 1
        monitor.set_input(inputs[choice - 1])
    return 0


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]

    verbose = False
    use_cache = True
    clear_cache = False
    args = []
    for arg in argv:
        if arg in ["-h", "--help"]:
            print(__doc__)
            return 0
        elif arg == "--version":
            print(f"{config.PROGRAM_NAME} {__version__}")
            return 0
        elif arg in ["-v", "--verbose"]:
            verbose = True
        elif arg == "--no-cache":
            use_cache = False
        elif arg == "--clear-cache":
            clear_cache = True
        elif arg.startswith("-"):
            print(f"Unknown option {arg}", file=sys.stderr)
            print(__doc__, file=sys.stderr)
            return 2
        else:
            args.append(arg)

    setup_logging(verbose)
    cache = CapabilitiesCache() if use_cache else None

    try:
        if clear_cache:
            CapabilitiesCache().clear()
            if len(args) == 0:
                return 0
        if len(args) == 0:
            print(__doc__, file=sys.stderr)
            return 2
        if len(args) >= 2 and args[1] in COMMANDS:
            return run_command(args[0], args[1], args[2:], cache)
        return run_interactive(args, cache)
    except (OSError, ValueError, sqlite3.Error) as e:
        logger.error(e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
