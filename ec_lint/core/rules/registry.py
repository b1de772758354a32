"""
Rule Registry.

The rule table: every built-in rule, in the order the engine runs them.
Order matters because fixes made by earlier rules (end_of_line) are seen by
later ones (insert_final_newline).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .charset import CharsetRule
from .indentation import IndentSizeRule, IndentStyleRule, TabWidthRule
from .newlines import EndOfLineRule, InsertFinalNewlineRule
from .whitespace import MaxLineLengthRule, TrimTrailingWhitespaceRule

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from .base import Rule


class RuleRegistry:
    """
    Ordered table of rules, keyed by setting name.

    Rules run in registration order.
    """

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        self.rules: dict[str, Rule] = {}
        for rule in rules:
            self.register_rule(rule)

    def register_rule(self, rule: Rule) -> None:
        """Register a rule; re-registering a name replaces it in place."""
        self.rules[rule.name] = rule

    def get_rule(self, name: str) -> Rule | None:
        """Get a rule by setting name."""
        return self.rules.get(name)

    @property
    def names(self) -> list[str]:
        """Setting names in table order."""
        return list(self.rules)

    def configured(self, settings: Iterable[str]) -> list[Rule]:
        """Rules whose setting is present, in table order. Unknown keys are ignored."""
        present = set(settings)
        return [rule for name, rule in self.rules.items() if name in present]

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.rules.values())

    def __len__(self) -> int:
        return len(self.rules)

    def __contains__(self, name: object) -> bool:
        return name in self.rules


def build_registry() -> RuleRegistry:
    """Build the built-in rule table."""
    return RuleRegistry(
        [
            CharsetRule(),
            IndentStyleRule(),
            IndentSizeRule(),
            TabWidthRule(),
            TrimTrailingWhitespaceRule(),
            EndOfLineRule(),
            InsertFinalNewlineRule(),
            MaxLineLengthRule(),
        ]
    )
