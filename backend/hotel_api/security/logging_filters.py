"""Logging filters that scrub guest contact details."""

from __future__ import annotations

import logging
import re

_EMAIL_PATTERN = re.compile(r"([\w.+-])[\w.+-]*@([\w-]+(?:\.[\w-]+)+)")
# Phone-like digit runs, skipping anything shaped like a UUID.
_PHONE_PATTERN = re.compile(
    r"(?<![\w-])(?![0-9a-fA-F]{8}-[0-9a-fA-F]{4}-)\+?\d[\d\s().-]{6,}(\d{4})(?![\w-])"
)


def redact(message: str) -> str:
    """Mask e-mail local parts and all but the last four phone digits."""
    message = _EMAIL_PATTERN.sub(r"\1***@\2", message)
    return _PHONE_PATTERN.sub(r"***-***-\1", message)


class SensitiveFilter(logging.Filter):
    """Replace guest contact details in log messages with masked values."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            message = record.getMessage()
            scrubbed = redact(message)
            if scrubbed != message:
                record.msg = scrubbed
                record.args = None
        return True


__all__ = ["SensitiveFilter", "redact"]
