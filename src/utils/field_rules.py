"""
Ordered regex rules for pulling named fields out of normalized email text.
"""
import re
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Pattern


@dataclass(frozen=True)
class FieldRule:
    """A field with a primary pattern and an optional fallback pattern.

    Each pattern must capture the value in group 1. The fallback is only
    tried when the primary does not match.
    """
    name: str
    primary: Pattern[str]
    fallback: Optional[Pattern[str]] = None

    @classmethod
    def compile(cls, name: str, primary: str, fallback: Optional[str] = None,
                flags: int = 0, fallback_flags: Optional[int] = None) -> "FieldRule":
        """``fallback_flags`` defaults to ``flags``."""
        if fallback_flags is None:
            fallback_flags = flags
        return cls(
            name=name,
            primary=re.compile(primary, flags),
            fallback=re.compile(fallback, fallback_flags) if fallback else None,
        )

    def match(self, text: str) -> Optional[str]:
        for pattern in (self.primary, self.fallback):
            if pattern is None:
                continue
            found = pattern.search(text)
            if found:
                return found.group(1).strip()
        return None


def extract_fields(text: str, rules: Iterable[FieldRule]) -> Dict[str, Optional[str]]:
    """Apply every rule independently and return a partial record."""
    text = text or ""
    return {rule.name: rule.match(text) for rule in rules}


def parse_amount(value: Optional[str]) -> Optional[float]:
    """Parse a number with thousands separators, e.g. ``1,250.50``."""
    if not value:
        return None
    try:
        return float(value.replace(",", ""))
    except ValueError:
        return None
