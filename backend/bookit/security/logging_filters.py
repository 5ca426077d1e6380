"""Logging filters that scrub purchaser contact details."""

from __future__ import annotations

import logging
import re

_EMAIL_PATTERN = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+")
_PHONE_PATTERN = re.compile(r"(?<![\w+])\+?\d{10,15}(?!\w)")


def redact(text: str) -> str:
    """Mask email addresses and phone numbers in free text."""
    text = _EMAIL_PATTERN.sub("**EMAIL**", text)
    return _PHONE_PATTERN.sub("**PHONE**", text)


class SensitiveFilter(logging.Filter):
    """Replace contact details in log records with redaction markers."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = redact(record.msg)
        if record.args:
            if isinstance(record.args, dict):
                record.args = {
                    key: redact(value) if isinstance(value, str) else value
                    for key, value in record.args.items()
                }
            else:
                record.args = tuple(
                    redact(arg) if isinstance(arg, str) else arg for arg in record.args
                )
        return True


__all__ = ["SensitiveFilter", "redact"]
