"""Log redaction for visitor and mail-account data.

Contact submissions carry names and addresses, and the SMTP account carries
a password. Logs keep only enough to correlate requests: the first
letter and domain of an address, the network part of an IPv4 address.
"""
import re
from typing import Callable, List, Tuple, Union

Replacement = Union[str, Callable[[re.Match], str]]


def _mask_address(match: re.Match) -> str:
    local, _, domain = match.group().partition("@")
    return f"{local[0]}***@{domain}"


# Applied in order; addresses go first so their domains are not mistaken
# for other tokens.
_RULES: List[Tuple[re.Pattern, Replacement]] = [
    (re.compile(r"[\w.+-]+@[\w.-]+\.\w+"), _mask_address),
    (re.compile(r"\b(\d{1,3}\.\d{1,3}\.\d{1,3}\.)\d{1,3}\b"), r"\1***"),
    (
        re.compile(r"eyJ[\w-]+\.eyJ[\w-]+\.[\w-]+"),
        "[JWT_REDACTED]",
    ),
    (re.compile(r"\b[a-fA-F0-9]{32,}\b"), "[API_KEY_REDACTED]"),
    (
        re.compile(
            r'(password|passwd|pwd|pass|secret)["\']?\s*[:=]\s*["\']?[^"\'&\s]+',
            re.IGNORECASE,
        ),
        r"\1=[REDACTED]",
    ),
]


def redact_pii(message) -> str:
    """Return ``message`` as text with addresses, IPs and secrets masked."""
    if not isinstance(message, str):
        return str(message)

    for pattern, replacement in _RULES:
        message = pattern.sub(replacement, message)
    return message
