"""
Infers how long a recipe step takes from its free-text description,
e.g. "Simmer for 1 hour 30 minutes" -> 5400 seconds.
"""

import re
from typing import Dict, Optional, Sequence, Tuple

# (seconds per unit, spellings); longer spellings win over their prefixes
UNIT_TABLE: Sequence[Tuple[int, Tuple[str, ...]]] = (
    (60, ("minute", "min", "m")),
    (1, ("second", "sec", "s")),
    (3600, ("hour", "hr", "h")),
)


class DurationParser:
    def __init__(self, units: Sequence[Tuple[int, Tuple[str, ...]]] = UNIT_TABLE):
        self.multipliers: Dict[str, int] = {}
        spellings = []
        for seconds, words in units:
            for word in words:
                self.multipliers.setdefault(word.lower(), seconds)
                spellings.append(word)
        spellings.sort(key=len, reverse=True)
        self.pattern = re.compile(
            r"([0-9]+)\s*(" + "|".join(map(re.escape, spellings)) + ")", re.IGNORECASE
        )

    def parse(self, text: str) -> Optional[int]:
        """Sum every <number><unit> occurrence; None when there is none."""
        total = 0
        found = False
        for match in self.pattern.finditer(text or ""):
            found = True
            total += int(match.group(1)) * self.multipliers[match.group(2).lower()]
        return total if found else None


_default_parser = DurationParser()


def parse_duration(text: str) -> Optional[int]:
    return _default_parser.parse(text)


def has_duration(text: str) -> bool:
    """Whether a step could ever get a timer (a parsed 0 still counts)."""
    return parse_duration(text) is not None


def format_mmss(seconds: int) -> str:
    mm, ss = divmod(max(0, int(seconds)), 60)
    return f"{mm:02d}:{ss:02d}"
