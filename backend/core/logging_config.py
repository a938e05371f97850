"""Process-wide logging setup.

Modules log through ``logging.getLogger(__name__)``; anything passed via
``extra=`` is appended to the line as ``key=value`` pairs so movement ids and
inventory ids can be grepped out of the output.
"""

import logging
import sys

_RESERVED = set(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message", "asctime"}

_configured = False


class ContextFormatter(logging.Formatter):
    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = {k: v for k, v in record.__dict__.items() if k not in _RESERVED}
        if context:
            line += " " + " ".join(f"{k}={v}" for k, v in sorted(context.items()))
        return line


def configure_logging(level: str = "INFO") -> None:
    """Install one stream handler on the root logger. Safe to call twice."""
    global _configured
    root = logging.getLogger()
    root.setLevel(level)
    if _configured:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ContextFormatter())
    root.addHandler(handler)
    _configured = True
