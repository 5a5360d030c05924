"""Rule tier definitions."""

from __future__ import annotations

from enum import Enum


class Tier(str, Enum):
    """Enumerate the rule tiers in pipeline order, plus the parse step itself."""

    STATELESS = "stateless"
    STATEFUL = "stateful"
    PARSING = "parsing"
    PARSER = "parser"

    @property
    def is_line_scoped(self) -> bool:
        """Return True for tiers that run during the line pass."""

        return self in (Tier.STATELESS, Tier.STATEFUL)
