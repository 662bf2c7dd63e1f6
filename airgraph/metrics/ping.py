"""Ping summary ruleset — shared by the remote and the local ping."""

from __future__ import annotations

import shlex

from airgraph.metrics.base import ExtractionRule, per, regex_rule

# busybox: round-trip min/avg/max = 1.0/2.5/4.0 ms
# iputils: rtt min/avg/max/mdev = 1.0/2.5/4.0/0.5 ms
_RTT = r"min/avg/max(?:/mdev)?\s*=\s*(\d+(?:\.\d+)?)/(\d+(?:\.\d+)?)/(\d+(?:\.\d+)?)"
_LOSS = r"(\d+(?:\.\d+)?)% packet loss"


def ping_command(target: str, count: int) -> str:
    return f"ping -c {count} -q {shlex.quote(target)}"


def ping_rules(rtt_metric: str, loss_metric: str) -> list[ExtractionRule]:
    """Rules reading the average round trip (in seconds) and the loss percentage.

    Without a summary line both stay Unknown; loss is not assumed to be 100.
    """
    return [
        regex_rule(rtt_metric, _RTT, 2, convert=per(1000)),
        regex_rule(loss_metric, _LOSS),
    ]
