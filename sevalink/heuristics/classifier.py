"""Rule-table heuristic classifier.

This module provides the HeuristicClassifier class for:
- Loading the multilingual rule table from a JSON config file
- Categorizing free text with a fixed, explicit precedence
- Scoring priority as an independent pass over the same text

It is the fallback whenever the AI adapter cannot answer, so every public
method is total: no input makes it raise.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path

from sevalink.models import Category, Priority

_REQUIRED_KEYS = {
    "precedence",
    "conversational",
    "category_rules",
    "priority_precedence",
    "priority_rules",
}


@dataclass(frozen=True)
class CompiledRule:
    id: str
    language: str
    target: str
    patterns: tuple[re.Pattern[str], ...]

    def matches(self, text: str) -> bool:
        return any(p.search(text) for p in self.patterns)


class HeuristicClassifier:
    """Keyword/regex classifier driven by a single rule table."""

    def __init__(self, rules_path: str) -> None:
        """Initialize the classifier with rules from config.

        Args:
            rules_path: Path to the classifier-rules.json config file.

        Raises:
            FileNotFoundError: If the config file doesn't exist.
            ValueError: If the config file is invalid.
        """
        self._rules_path = rules_path
        self._precedence: list[Category] = []
        self._priority_precedence: list[Priority] = []
        self._conversational: list[re.Pattern[str]] = []
        self._category_rules: dict[Category, list[CompiledRule]] = {}
        self._priority_rules: dict[Priority, list[CompiledRule]] = {}
        self._load_rules()

    def _load_rules(self) -> None:
        path = Path(self._rules_path)
        if not path.exists():
            raise FileNotFoundError(f"Classifier rules not found: {self._rules_path}")

        try:
            config = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in classifier rules: {e}") from e

        missing = _REQUIRED_KEYS - set(config.keys())
        if missing:
            raise ValueError(f"Missing required keys in classifier rules: {missing}")

        try:
            self._precedence = [Category(c) for c in config["precedence"]]
            self._priority_precedence = [Priority(p) for p in config["priority_precedence"]]
        except ValueError as e:
            raise ValueError(f"Unknown category or priority in precedence: {e}") from e

        if Category.GENERAL_INQUIRY in self._precedence:
            raise ValueError("general_inquiry is the default and cannot be ranked")

        self._conversational = [
            re.compile(p, re.IGNORECASE) for p in config["conversational"]
        ]

        self._category_rules = {c: [] for c in self._precedence}
        for raw in config["category_rules"]:
            rule = _compile_rule(raw, "category")
            category = Category(rule.target)
            if category not in self._category_rules:
                raise ValueError(f"Rule {rule.id} targets unranked category {category.value}")
            self._category_rules[category].append(rule)

        self._priority_rules = {p: [] for p in self._priority_precedence}
        for raw in config["priority_rules"]:
            rule = _compile_rule(raw, "priority")
            priority = Priority(rule.target)
            if priority not in self._priority_rules:
                raise ValueError(f"Rule {rule.id} targets unranked priority {priority.value}")
            self._priority_rules[priority].append(rule)

    @property
    def precedence(self) -> list[Category]:
        return list(self._precedence)

    def is_conversational(self, text: str) -> bool:
        """True for bare greetings, thanks and arithmetic."""
        stripped = text.strip()
        return any(p.search(stripped) for p in self._conversational)

    def matching_rules(self, text: str) -> list[str]:
        """Return the ids of every category rule that fires on *text*."""
        return [
            rule.id
            for category in self._precedence
            for rule in self._category_rules[category]
            if rule.matches(text)
        ]

    def categorize(self, text: str) -> Category:
        if not text or self.is_conversational(text):
            return Category.GENERAL_INQUIRY
        for category in self._precedence:
            if any(rule.matches(text) for rule in self._category_rules[category]):
                return category
        return Category.GENERAL_INQUIRY

    def priority(self, text: str) -> Priority:
        if not text:
            return Priority.MEDIUM
        for priority in self._priority_precedence:
            if any(rule.matches(text) for rule in self._priority_rules[priority]):
                return priority
        return Priority.MEDIUM

    def classify(self, text: str) -> tuple[Category, Priority]:
        """Categorize and score *text*, applying category-level priority overrides.

        Emergencies are always urgent and general inquiries always low; the
        other categories keep the independent priority pass.
        """
        category = self.categorize(text)
        if category == Category.EMERGENCY:
            return category, Priority.URGENT
        if category == Category.GENERAL_INQUIRY:
            return category, Priority.LOW
        return category, self.priority(text)


def _compile_rule(raw: dict[str, object], target_key: str) -> CompiledRule:
    try:
        rule_id = str(raw["id"])
        target = str(raw[target_key])
        patterns = raw["patterns"]
    except KeyError as e:
        raise ValueError(f"Rule is missing field {e}: {raw}") from e
    if not isinstance(patterns, list) or not patterns:
        raise ValueError(f"Rule {rule_id} must have a non-empty patterns list")
    try:
        compiled = tuple(re.compile(str(p), re.IGNORECASE) for p in patterns)
    except re.error as e:
        raise ValueError(f"Rule {rule_id} has an invalid pattern: {e}") from e
    return CompiledRule(
        id=rule_id,
        language=str(raw.get("language", "any")),
        target=target,
        patterns=compiled,
    )
