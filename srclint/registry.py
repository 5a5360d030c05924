"""Rule registry: three per-tier name-to-rule mappings and their filtering."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Set

from .errors import RegistryFrozenError
from .rules import ParsingRule, StatefulRule, StatelessRule
from .rules import style, syntax, todo
from .tier import Tier

logger = logging.getLogger(__name__)

CATEGORY_SEPARATOR = ":"
RULE_MODULES = (style, todo, syntax)


def category(name: str) -> str:
    """Return the category of a rule name, or ``""`` if it has none."""

    head, separator, _ = name.partition(CATEGORY_SEPARATOR)
    return head if separator else ""


class RuleRegistry:
    """Hold the enabled rules of each tier.

    Removals are scheduled with :meth:`remove_by_category` and
    :meth:`remove_by_name` and take effect on :meth:`apply`, after which the
    registry is frozen for the rest of the run.
    """

    def __init__(self) -> None:
        self.stateless: Dict[str, StatelessRule] = {}
        self.stateful: Dict[str, StatefulRule] = {}
        self.parsing: Dict[str, ParsingRule] = {}
        self._pending: Set[str] = set()
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def tier(self, tier: Tier) -> Dict[str, object]:
        mappings = {
            Tier.STATELESS: self.stateless,
            Tier.STATEFUL: self.stateful,
            Tier.PARSING: self.parsing,
        }
        return mappings[tier]

    def _check_mutable(self) -> None:
        if self._frozen:
            raise RegistryFrozenError("rule registry cannot change once filtering is applied")

    def register(self, tier: Tier, name: str, rule: object) -> None:
        self._check_mutable()
        self.tier(tier)[name] = rule

    def remove_by_category(self, wanted: str) -> None:
        """Schedule every rule in category ``wanted``, in any tier, for removal."""

        self._check_mutable()
        if not wanted:
            return
        for mapping in (self.stateless, self.stateful, self.parsing):
            self._pending.update(name for name in mapping if category(name) == wanted)

    def remove_by_name(self, name: str) -> None:
        self._check_mutable()
        self._pending.add(name)

    def apply(self) -> None:
        """Delete every scheduled name from all three tiers and freeze."""

        if self._frozen:
            return
        for name in sorted(self._pending):
            removed = False
            for mapping in (self.stateless, self.stateful, self.parsing):
                if mapping.pop(name, None) is not None:
                    removed = True
            if not removed:
                logger.debug("Disabled rule %s is not registered", name)
        self._pending.clear()
        self._frozen = True

    def names(self) -> List[str]:
        """Return the sorted union of rule names across all tiers."""

        return sorted(set(self.stateless) | set(self.stateful) | set(self.parsing))

    def counts(self) -> Dict[Tier, int]:
        return {
            Tier.STATELESS: len(self.stateless),
            Tier.STATEFUL: len(self.stateful),
            Tier.PARSING: len(self.parsing),
        }


def build_registry(options: Optional[dict] = None) -> RuleRegistry:
    """Create a registry holding the default rule set."""

    registry = RuleRegistry()
    for module in RULE_MODULES:
        for tier, rules in module.get_rules(options).items():
            for name, rule in rules.items():
                registry.register(tier, name, rule)
    return registry


def filter_registry(
    registry: RuleRegistry,
    disabled_names: Iterable[str] = (),
    disabled_categories: Iterable[str] = (),
) -> RuleRegistry:
    """Apply name and category disables to ``registry`` and freeze it."""

    for wanted in disabled_categories:
        registry.remove_by_category(wanted)
    for name in disabled_names:
        registry.remove_by_name(name)
    registry.apply()
    return registry
