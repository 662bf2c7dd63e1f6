"""Metric extraction — maps command names to extraction rulesets."""

from __future__ import annotations

from airgraph.metrics.base import ExtractionRule
from airgraph.metrics.system import CPU_RULES, LOADAVG_RULES, UPTIME_RULES
from airgraph.metrics.wireless import STATUS_RULES

RULESETS: dict[str, list[ExtractionRule]] = {
    "loadavg": LOADAVG_RULES,
    "cpu": CPU_RULES,
    "uptime": UPTIME_RULES,
    "status": STATUS_RULES,
}
