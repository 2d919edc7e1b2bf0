"""Logging filters that scrub client contact details."""

from __future__ import annotations

import logging
import re

from petcare.security.redact import mask_email, mask_phone

_EMAIL_PATTERN = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+")
# e.g. +55 (11) 91234-5678, 555-123-4567; ids and ISO dates must not match.
_PHONE_PATTERN = re.compile(
    r"(?<![\w-])(?:\+\d{1,3}[\s.-]?)?(?:\(?\d{2,3}\)?[\s.-]?)?\d{3,5}[\s.-]?\d{4}(?![\w-])"
)


def scrub(text: str) -> str:
    text = _EMAIL_PATTERN.sub(lambda match: mask_email(match.group()) or "", text)
    return _PHONE_PATTERN.sub(lambda match: mask_phone(match.group()) or "", text)


class SensitiveFilter(logging.Filter):
    """Mask e-mail addresses and phone numbers in log messages and arguments."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = scrub(record.msg)
        if isinstance(record.args, tuple):
            record.args = tuple(
                scrub(arg) if isinstance(arg, str) else arg for arg in record.args
            )
        return True


__all__ = ["SensitiveFilter", "scrub"]
