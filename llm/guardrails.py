"""
Output Safety Filter for the Bizplan Assistant.

Post-LLM redaction of secrets and internal addresses before free-text
output reaches the user. NIMProvider applies it to every non-guided
completion; guided JSON is left untouched.
"""

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class FilterResult:
    """Result of output filtering."""
    text: str
    redactions: int = 0

    @property
    def redacted(self) -> bool:
        return self.redactions > 0


class OutputFilter:
    """
    Masks sensitive fragments in LLM output.

    Order matters:
    1. Secret tokens (sk-...)
    2. Local addresses (localhost, 127.0.0.1, 0.0.0.0 with optional scheme/port)
    3. key/api_key assignments
    """

    SECRET_PATTERN = re.compile(r"(sk-[a-zA-Z0-9_\-]{16,})")

    LOCAL_ADDRESS_PATTERN = re.compile(
        r"(https?://)?(localhost|127\.0\.0\.1|0\.0\.0\.0)(:\d+)?",
        re.IGNORECASE,
    )

    KEY_ASSIGNMENT_PATTERN = re.compile(
        r"((api[_-]?key|key)\s*[:=]\s*)([^\s]+)",
        re.IGNORECASE,
    )

    SECRET_MASK = "[secret]"
    REDACTED_MASK = "[redacted]"

    def filter(self, text: str) -> FilterResult:
        """
        Redact sensitive fragments.

        Args:
            text: LLM-generated text

        Returns:
            FilterResult with masked text and redaction count
        """
        out, secrets = self.SECRET_PATTERN.subn(self.SECRET_MASK, text or "")
        out, addresses = self.LOCAL_ADDRESS_PATTERN.subn(self.REDACTED_MASK, out)
        out, keys = self.KEY_ASSIGNMENT_PATTERN.subn(
            f"{self.REDACTED_MASK}: {self.SECRET_MASK}", out
        )

        redactions = secrets + addresses + keys
        if redactions:
            logger.warning(f"Output filter applied {redactions} redaction(s)")

        return FilterResult(text=out, redactions=redactions)


_default_filter = OutputFilter()


def filter_output(text: str) -> FilterResult:
    """Redact secrets and local addresses from free-text output."""
    return _default_filter.filter(text)
