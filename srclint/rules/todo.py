"""Flag work-in-progress marker comments."""

from __future__ import annotations

import re
from typing import Dict, Optional, Pattern

from srclint.tier import Tier

from . import NO_MATCH, Verdict


class MarkerRule:
    """Report lines whose comment carries a given marker word."""

    def __init__(self, marker: str) -> None:
        self.marker = marker
        self._pattern: Pattern[str] = re.compile(rf"#.*\b{re.escape(marker)}\b")

    def lint(self, line: str) -> Verdict:
        if self._pattern.search(line):
            return f"{self.marker} comment", True
        return NO_MATCH


def get_rules(options: Optional[dict] = None) -> Dict[Tier, dict]:
    return {
        Tier.STATELESS: {
            "todo:todo": MarkerRule("TODO"),
            "todo:fixme": MarkerRule("FIXME"),
            "todo:xxx": MarkerRule("XXX"),
        },
    }
