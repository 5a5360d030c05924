import pytest

from srclint.errors import RegistryFrozenError
from srclint.registry import RuleRegistry, build_registry, category, filter_registry
from srclint.rules.style import TabsRule
from srclint.rules.syntax import ValidParseRule
from srclint.tier import Tier


def test_category_splits_on_first_separator():
    assert category("style:linelen") == "style"
    assert category("deprecated:os:path") == "deprecated"
    assert category("nocategory") == ""


def test_default_registry_covers_all_tiers():
    registry = build_registry()

    assert "style:linelen" in registry.stateless
    assert "style:trailingnewline" in registry.stateful
    assert "syntax:validparse" in registry.parsing
    assert registry.counts() == {Tier.STATELESS: 7, Tier.STATEFUL: 2, Tier.PARSING: 6}


def test_disable_category_removes_rules_from_every_tier():
    registry = filter_registry(build_registry(), disabled_categories=["style"])

    assert not [name for name in registry.names() if name.startswith("style:")]
    assert "todo:todo" in registry.names()
    assert "syntax:validparse" in registry.names()


def test_disabling_twice_matches_disabling_once():
    once = filter_registry(build_registry(), ["todo:xxx"], ["deprecated"])
    twice = filter_registry(build_registry(), ["todo:xxx", "todo:xxx"], ["deprecated", "deprecated"])

    assert once.names() == twice.names()


def test_remove_by_name_applies_to_all_tiers():
    registry = RuleRegistry()
    registry.register(Tier.STATELESS, "mixed:rule", TabsRule())
    registry.register(Tier.PARSING, "mixed:rule", ValidParseRule())

    registry.remove_by_name("mixed:rule")
    registry.apply()

    assert registry.names() == []


def test_removing_unknown_name_is_accepted():
    registry = build_registry()
    before = registry.names()

    registry.remove_by_name("style:doesnotexist")
    registry.remove_by_category("nosuchcategory")
    registry.apply()

    assert registry.names() == before


def test_name_without_separator_never_matches_category():
    registry = RuleRegistry()
    registry.register(Tier.STATELESS, "weird", TabsRule())

    registry.remove_by_category("weird")
    registry.remove_by_category("")
    registry.apply()

    assert registry.names() == ["weird"]


def test_registry_is_frozen_after_apply():
    registry = build_registry()
    registry.apply()
    registry.apply()

    assert registry.frozen
    with pytest.raises(RegistryFrozenError):
        registry.remove_by_name("style:tabs")
    with pytest.raises(RegistryFrozenError):
        registry.register(Tier.STATELESS, "style:extra", TabsRule())


def test_rule_options_configure_thresholds():
    registry = build_registry({"style:linelen": {"max": 100}, "style:filesize": {"max": 10}})

    assert registry.stateless["style:linelen"].max_length == 100
    assert registry.stateful["style:filesize"].max_lines == 10
