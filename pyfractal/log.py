"""Verbose-gated diagnostic output."""

import sys

VERBOSE = False


def set_verbose(flag: bool):
    global VERBOSE
    VERBOSE = bool(flag)


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


def error(message):
    print(f"error: {message}", file=sys.stderr)
