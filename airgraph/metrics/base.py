"""Shared types and the field extractor for command output."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Union

logger = logging.getLogger(__name__)


# ── Metric values ────────────────────────────────────────────────────

@dataclass(frozen=True)
class Known:
    """A metric value read (or derived) this cycle."""
    value: float


@dataclass(frozen=True)
class Unknown:
    """No data this cycle.  Distinct from zero and from an empty string."""

    def __repr__(self) -> str:
        return "UNKNOWN"


UNKNOWN = Unknown()

MetricValue = Union[Known, Unknown]


# ── Extraction rules ─────────────────────────────────────────────────

class RuleKind(str, Enum):
    OFFSET = "offset"
    REGEX = "regex"
    FIELDS = "fields"


Converter = Callable[[float], float]


@dataclass(frozen=True)
class ExtractionRule:
    """How to find one field (or one summary line of fields) in output text.

    ``locator`` is a literal label for OFFSET rules and a regular expression
    for REGEX and FIELDS rules.  ``metrics`` holds a single name except for
    FIELDS rules, which assign numeric tokens to names in declared order.
    """
    metrics: tuple[str, ...]
    locator: str
    kind: RuleKind
    group: int = 1
    offset: int | None = None
    convert: Converter | None = None
    complement: str | None = None
    zero_is_unknown: bool = False


def offset_rule(metric: str, label: str, *, offset: int | None = None,
                convert: Converter | None = None,
                zero_is_unknown: bool = False) -> ExtractionRule:
    return ExtractionRule(
        metrics=(metric,), locator=label, kind=RuleKind.OFFSET,
        offset=offset, convert=convert, zero_is_unknown=zero_is_unknown,
    )


def regex_rule(metric: str, pattern: str, group: int = 1, *,
               convert: Converter | None = None,
               zero_is_unknown: bool = False) -> ExtractionRule:
    return ExtractionRule(
        metrics=(metric,), locator=pattern, kind=RuleKind.REGEX,
        group=group, convert=convert, zero_is_unknown=zero_is_unknown,
    )


def fields_rule(metrics: Iterable[str], pattern: str, *,
                complement: str | None = None) -> ExtractionRule:
    names = tuple(metrics)
    if complement is not None and complement not in names:
        raise ValueError(f"Complement bucket {complement!r} not in {names}")
    return ExtractionRule(
        metrics=names, locator=pattern, kind=RuleKind.FIELDS,
        complement=complement,
    )


def per(divisor: float) -> Converter:
    """Unit conversion dividing the raw value, e.g. ``per(1000)`` for ms → s."""
    return lambda value: value / divisor


def times(factor: float) -> Converter:
    """Unit conversion multiplying the raw value, e.g. ``times(1024)`` for kB → bytes."""
    return lambda value: value * factor


# ── Transforms ───────────────────────────────────────────────────────

_NUMBER = r"-?\d+(?:\.\d+)?"
_NUMBER_TOKEN = re.compile(rf"({_NUMBER})%?")


def _parse_number(text: str) -> float | None:
    """Plain decimal numbers only; "nan", "inf" and "1_0" are not values."""
    text = text.strip()
    if not re.fullmatch(_NUMBER, text):
        return None
    return float(text)


def _finish(rule: ExtractionRule, raw: float | None) -> MetricValue:
    if raw is None:
        return UNKNOWN
    if rule.zero_is_unknown and raw == 0:
        return UNKNOWN
    if rule.convert is not None:
        raw = rule.convert(raw)
    return Known(raw)


def _find_label(line: str, label: str) -> int:
    """Position of *label* at the start of the line or of a comma-separated item."""
    if line.startswith(label):
        return 0
    pos = line.find("," + label)
    return pos + 1 if pos >= 0 else -1


def _apply_offset(rule: ExtractionRule, line: str) -> dict[str, MetricValue] | None:
    start = _find_label(line, rule.locator)
    if start < 0:
        return None
    offset = len(rule.locator) if rule.offset is None else rule.offset
    text = line[start + offset:].split(",", 1)[0]
    return {rule.metrics[0]: _finish(rule, _parse_number(text))}


def _apply_regex(rule: ExtractionRule, line: str) -> dict[str, MetricValue] | None:
    m = re.search(rule.locator, line)
    if not m:
        return None
    text = m.group(rule.group)
    raw = _parse_number(text) if text is not None else None
    return {rule.metrics[0]: _finish(rule, raw)}


def _apply_fields(rule: ExtractionRule, line: str) -> dict[str, MetricValue] | None:
    m = re.search(rule.locator, line)
    if not m:
        return None
    tokens = [float(t) for t in _NUMBER_TOKEN.findall(line[m.end():])]
    if len(tokens) < len(rule.metrics):
        logger.debug("Expected %d fields after %r, found %d",
                     len(rule.metrics), rule.locator, len(tokens))
        return {name: UNKNOWN for name in rule.metrics}

    values: dict[str, MetricValue] = {}
    for name, token in zip(rule.metrics, tokens):
        if name != rule.complement:
            values[name] = Known(token)
    if rule.complement is not None:
        # the device's own idle figure is unreliable; derive it instead
        busy = sum(v.value for v in values.values() if isinstance(v, Known))
        values[rule.complement] = Known(100.0 - busy)
    return {name: values[name] for name in rule.metrics}


_TRANSFORMS = {
    RuleKind.OFFSET: _apply_offset,
    RuleKind.REGEX: _apply_regex,
    RuleKind.FIELDS: _apply_fields,
}


# ── Extractor ────────────────────────────────────────────────────────

def extract(rules: Iterable[ExtractionRule],
            lines: Iterable[str]) -> dict[str, MetricValue]:
    """Apply *rules* to command output lines.

    Every target metric of every rule appears in the result; rules that
    never match leave their metrics Unknown.  The first matching line wins
    for each rule.
    """
    pending = list(rules)
    result: dict[str, MetricValue] = {
        name: UNKNOWN for rule in pending for name in rule.metrics
    }
    for line in lines:
        if not pending:
            break
        still_pending: list[ExtractionRule] = []
        for rule in pending:
            values = _TRANSFORMS[rule.kind](rule, line)
            if values is None:
                still_pending.append(rule)
            else:
                result.update(values)
        pending = still_pending

    for rule in pending:
        logger.debug("No match for %s", ", ".join(rule.metrics))
    return result
