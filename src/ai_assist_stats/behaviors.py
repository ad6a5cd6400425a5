# ABOUTME: Behavior tags and substring-based classification of IDE log lines.
# ABOUTME: Maps marker strings to the code/query actions of the two assist tools.

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable


class BehaviorTag(Enum):
    """Counted behavior categories.

    Values double as the attribute names of ``DailyStats``.
    """

    TOTAL_RECORDS = "total_records"
    PRIMARY_CODE = "primary_code"
    PRIMARY_QUERY = "primary_query"
    SECONDARY_CODE = "secondary_code"
    SECONDARY_QUERY = "secondary_query"


@dataclass(frozen=True)
class MarkerRule:
    """A fixed substring that marks one behavior."""

    tag: BehaviorTag
    marker: str


# Primary tool: Tongyi Lingma IDE plugin
PRIMARY_CODE_MARKER = (
    "com.alibabacloud.intellij.cosy.editor.CosyEditorActionHandler - execute action:EditorTab"
)
PRIMARY_QUERY_MARKER = "Select model is"
# Secondary tool: GitHub Copilot endpoints
SECONDARY_CODE_MARKER = (
    "https://proxy.individual.githubcopilot.com/v1/engines/copilot-codex/completions"
)
SECONDARY_QUERY_MARKER = "https://api.individual.githubcopilot.com/chat/completions"

DEFAULT_MARKER_RULES: tuple[MarkerRule, ...] = (
    MarkerRule(BehaviorTag.PRIMARY_CODE, PRIMARY_CODE_MARKER),
    MarkerRule(BehaviorTag.PRIMARY_QUERY, PRIMARY_QUERY_MARKER),
    MarkerRule(BehaviorTag.SECONDARY_CODE, SECONDARY_CODE_MARKER),
    MarkerRule(BehaviorTag.SECONDARY_QUERY, SECONDARY_QUERY_MARKER),
)


class BehaviorClassifier:
    """Classify a log line by case-sensitive substring containment."""

    def __init__(self, rules: Iterable[MarkerRule] = DEFAULT_MARKER_RULES) -> None:
        self.rules: tuple[MarkerRule, ...] = tuple(rules)
        for rule in self.rules:
            if rule.tag is BehaviorTag.TOTAL_RECORDS:
                raise ValueError("total_records is counted for every line and takes no marker")
            if not rule.marker:
                raise ValueError(f"Empty marker for {rule.tag.value}")

    def classify(self, line: str) -> list[BehaviorTag]:
        """Return the tags whose markers occur in ``line``.

        Tags come back in declaration order, each at most once.
        ``TOTAL_RECORDS`` is never returned.
        """
        matched = {rule.tag for rule in self.rules if rule.marker in line}
        return [tag for tag in BehaviorTag if tag in matched]


def rules_with_overrides(
    overrides: dict[BehaviorTag, list[str]],
    base: Iterable[MarkerRule] = DEFAULT_MARKER_RULES,
) -> tuple[MarkerRule, ...]:
    """Replace the markers of each overridden tag, keep the rest of ``base``."""
    rules = [rule for rule in base if rule.tag not in overrides]
    for tag, markers in overrides.items():
        rules.extend(MarkerRule(tag, m) for m in markers)
    return tuple(sorted(rules, key=lambda r: list(BehaviorTag).index(r.tag)))
