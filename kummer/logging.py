"""
Logging configuration for the command line.

Logger names have at most 6 characters (field, frob, gens, embed,
reduce, main) so that messages are aligned.
"""

import logging
import sys

FORMAT = "{relativeCreatedSecs: >9.3f}s {levelname[0]} {name:<6s} {message}"


def _relative_seconds(record):
    record.relativeCreatedSecs = record.relativeCreated / 1000.0
    return True


def setup(level, stream=None):
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(FORMAT, style="{"))
    handler.addFilter(_relative_seconds)
    logging.basicConfig(level=level, force=True, handlers=[handler])
