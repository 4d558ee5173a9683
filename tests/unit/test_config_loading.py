"""Tests for config file loading and validation."""

from __future__ import annotations

import json
import re
from pathlib import Path

from sevalink.models import Category, Priority

CONFIG_DIR = Path(__file__).parent.parent.parent / "config"


def _rules() -> dict[str, object]:
    return json.loads((CONFIG_DIR / "classifier-rules.json").read_text(encoding="utf-8"))


def test_classifier_rules_is_valid_json() -> None:
    assert isinstance(_rules(), dict)


def test_precedence_is_blood_emergency_elder_complaint() -> None:
    assert _rules()["precedence"] == [
        "blood_request", "emergency", "elder_support", "complaint",
    ]


def test_category_rules_have_required_fields() -> None:
    for rule in _rules()["category_rules"]:  # type: ignore[union-attr]
        assert {"id", "category", "language", "patterns"} <= set(rule)
        assert Category(rule["category"]) != Category.GENERAL_INQUIRY
        assert rule["patterns"]


def test_every_ranked_category_covers_three_languages() -> None:
    languages: dict[str, set[str]] = {}
    for rule in _rules()["category_rules"]:  # type: ignore[union-attr]
        languages.setdefault(rule["category"], set()).add(rule["language"])
    for category in _rules()["precedence"]:  # type: ignore[union-attr]
        assert {"en", "hi", "te"} <= languages[category]


def test_rule_ids_unique() -> None:
    rules = _rules()
    ids = [r["id"] for r in rules["category_rules"] + rules["priority_rules"]]  # type: ignore[operator]
    assert len(ids) == len(set(ids))


def test_priority_rules_target_known_priorities() -> None:
    for rule in _rules()["priority_rules"]:  # type: ignore[union-attr]
        assert Priority(rule["priority"]) != Priority.MEDIUM


def test_all_patterns_compile() -> None:
    rules = _rules()
    for rule in rules["category_rules"] + rules["priority_rules"]:  # type: ignore[operator]
        for pattern in rule["patterns"]:
            re.compile(pattern)
    for pattern in rules["conversational"]:  # type: ignore[union-attr]
        re.compile(pattern)
