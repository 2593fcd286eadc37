"""
Rule-based deinflection for kotoba-lookup.

A conjugated surface form is reduced to every reachable dictionary form by
repeatedly rewriting word suffixes. Rules come from a tab-separated table
(deinflect.txt):

    <header>
    negative                      <- reason string (index 0)
    past                          <- reason string (index 1)
    ない<TAB>る<TAB>260<TAB>0       <- rule: from, to, type mask, reason index

Each rule carries a 16-bit type mask. The low byte is the set of word types
the rule may fire on; the high byte is the set of types the produced word is
tagged with. Chaining rules through these tags recovers stacked inflections
such as passive + negative + past.
"""

import logging
from collections import deque
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

# Type bitmask of the untouched input word: every rule may fire on it
ALL_TYPES = 0xFF

# Separator between reason names in a derivation trail
REASON_SEPARATOR = " < "


# ============================================================================
# Data Structures
# ============================================================================

@dataclass(frozen=True, slots=True)
class Rule:
    """
    A single suffix rewrite rule.

    Attributes:
        from_suffix: Suffix of the inflected word
        to_suffix: Replacement suffix
        type_mask: Low byte = source types, high byte = result types
        reason_index: Index into the reason table
    """
    from_suffix: str
    to_suffix: str
    type_mask: int
    reason_index: int

    @property
    def source_types(self) -> int:
        return self.type_mask & 0xFF

    @property
    def result_types(self) -> int:
        return self.type_mask >> 8


@dataclass(frozen=True, slots=True)
class RuleGroup:
    """Rules sharing the same source suffix length."""
    from_length: int
    rules: Tuple[Rule, ...]


@dataclass(frozen=True, slots=True)
class Deinflection:
    """
    A candidate base form.

    Attributes:
        word: The candidate word
        type_bitmask: Word types this candidate may belong to
        reason_chain: Human-readable derivation trail ("" for the input itself)
    """
    word: str
    type_bitmask: int
    reason_chain: str


@dataclass(frozen=True, slots=True)
class DeinflectionData:
    """Parsed deinflect.txt: the reason table and the grouped rules."""
    reasons: Tuple[str, ...]
    rule_groups: Tuple[RuleGroup, ...]


# ============================================================================
# Parsing
# ============================================================================

def _parse_rule(fields: List[str]) -> Optional[Rule]:
    from_suffix, to_suffix, type_mask, reason_index = fields[:4]
    try:
        return Rule(
            from_suffix=from_suffix,
            to_suffix=to_suffix,
            type_mask=int(type_mask),
            reason_index=int(reason_index),
        )
    except ValueError:
        return None


def parse_deinflection_data(lines: Iterable[str]) -> DeinflectionData:
    """
    Parse the lines of deinflect.txt.

    The first line is a header and is discarded. A line with four non-empty
    tab-separated fields is a rule; any other line with a non-empty first
    field is a reason string. Rules are grouped by source suffix length as
    they appear, so consecutive rules of equal length share a group.

    Args:
        lines: Lines of the file, without line terminators

    Returns:
        DeinflectionData with reasons and rule groups in file order
    """
    reasons: List[str] = []
    groups: List[Tuple[int, List[Rule]]] = []
    current_length = -1

    iterator = iter(lines)
    next(iterator, None)  # Skip header

    for line_no, line in enumerate(iterator, start=2):
        fields = line.rstrip("\r").split("\t")
        if len(fields) >= 4 and all(fields[:4]):
            rule = _parse_rule(fields)
            if rule is None:
                logger.warning("deinflect.txt:%d: non-numeric rule fields: %r", line_no, line)
                continue
            if len(rule.from_suffix) != current_length:
                current_length = len(rule.from_suffix)
                groups.append((current_length, []))
            groups[-1][1].append(rule)
        elif fields[0]:
            reasons.append(fields[0])

    return DeinflectionData(
        reasons=tuple(reasons),
        rule_groups=tuple(RuleGroup(length, tuple(rules)) for length, rules in groups),
    )


# ============================================================================
# Deinflection
# ============================================================================

def deinflect(
    reasons: Tuple[str, ...],
    rule_groups: Iterable[RuleGroup],
    word: str,
) -> List[Deinflection]:
    """
    Produce every base form reachable from word through the rules.

    The traversal is breadth-first over a FIFO queue. Each produced word is
    recorded once; producing it again only ORs the new result types into the
    recorded candidate. A candidate that was already expanded is not expanded
    again with the merged types.

    Args:
        reasons: Reason table from deinflect.txt
        rule_groups: Grouped rules from deinflect.txt
        word: Normalized candidate word

    Returns:
        List of Deinflection; the input word itself is always first

    Example:
        >>> [d.word for d in deinflect(data.reasons, data.rule_groups, "たべない")]
        ['たべない', 'たべる']
    """
    rule_groups = tuple(rule_groups)
    results: List[Deinflection] = [Deinflection(word, ALL_TYPES, "")]
    positions: Dict[str, int] = {word: 0}
    queue = deque([0])

    while queue:
        current = results[queue.popleft()]
        length = len(current.word)

        for group in rule_groups:
            if length < group.from_length:
                continue

            suffix = current.word[length - group.from_length:]
            for rule in group.rules:
                if rule.from_suffix != suffix or not (current.type_bitmask & rule.source_types):
                    continue

                new_word = current.word[:length - group.from_length] + rule.to_suffix
                if not new_word:
                    continue

                position = positions.get(new_word)
                if position is not None:
                    settled = results[position]
                    results[position] = replace(
                        settled, type_bitmask=settled.type_bitmask | rule.result_types
                    )
                    continue

                if not 0 <= rule.reason_index < len(reasons):
                    logger.warning(
                        "Rule %s -> %s references missing reason #%d",
                        rule.from_suffix, rule.to_suffix, rule.reason_index,
                    )
                    continue

                reason = reasons[rule.reason_index]
                if current.reason_chain:
                    reason = reason + REASON_SEPARATOR + current.reason_chain

                positions[new_word] = len(results)
                queue.append(len(results))
                results.append(Deinflection(new_word, rule.result_types, reason))

    return results
