"""System rulesets — load average, CPU buckets, uptime."""

from __future__ import annotations

from airgraph.metrics.base import ExtractionRule, fields_rule, per, regex_rule

LOADAVG_COMMAND = "cat /proc/loadavg"

# Two busybox top iterations one second apart; only the second CPU line is a
# real delta, the first is the average since boot.
CPU_COMMAND = "top -b -n 2 -d 1 | grep '^CPU:' | tail -n 1"

UPTIME_COMMAND = "cat /proc/uptime"

SECONDS_PER_DAY = 86400

# 0.15 0.10 0.05 1/45 1234
_LOADAVG = r"^\s*(\d+\.\d+)\s+(\d+\.\d+)\s+(\d+\.\d+)"

LOADAVG_RULES: list[ExtractionRule] = [
    regex_rule("load1", _LOADAVG, 1),
    regex_rule("load5", _LOADAVG, 2),
    regex_rule("load15", _LOADAVG, 3),
]

# CPU:   2% usr   5% sys   0% nic  92% idle   0% io   0% irq   0% sirq
CPU_RULES: list[ExtractionRule] = [
    fields_rule(
        ("cpu_user", "cpu_system", "cpu_nice", "cpu_idle",
         "cpu_iowait", "cpu_irq", "cpu_softirq"),
        r"^\s*CPU:",
        complement="cpu_idle",
    ),
]

# 1234567.89 1100000.00
UPTIME_RULES: list[ExtractionRule] = [
    regex_rule("uptime", r"^\s*(\d+(?:\.\d+)?)", convert=per(SECONDS_PER_DAY)),
]
