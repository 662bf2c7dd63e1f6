"""Device status ruleset — the ``mca-status`` dump.

``mca-status`` prints ``key=value`` pairs, one per line except for the
first line, which packs the device identity into comma-separated pairs.
Every field here is read with an offset rule keyed on its label.
"""

from __future__ import annotations

from airgraph.metrics.base import ExtractionRule, offset_rule, per, times
from airgraph.metrics.table import MetricTable

STATUS_COMMAND = "mca-status"

# label -> (metric, conversion)
_STATUS_FIELDS = [
    ("signal=", "signal", None),
    ("rssi=", "rssi", None),
    ("noise=", "noise", None),
    ("wlanConnections=", "stations", None),
    ("wlanRxRate=", "rx_rate", times(1_000_000)),
    ("wlanTxRate=", "tx_rate", times(1_000_000)),
    ("wlanRxBytes=", "wlan_rx_bytes", None),
    ("wlanTxBytes=", "wlan_tx_bytes", None),
    ("lanRxBytes=", "lan_rx_bytes", None),
    ("lanTxBytes=", "lan_tx_bytes", None),
    ("wlanRxErrNwid=", "err_nwid", None),
    ("wlanRxErrCrypt=", "err_crypt", None),
    ("wlanRxErrFrag=", "err_frag", None),
    ("wlanRxErrRetries=", "err_rx_retries", None),
    ("wlanRxErrBmiss=", "err_bmiss", None),
    ("wlanRxErrOther=", "err_other", None),
    ("wlanTxErrRetries=", "err_tx_retries", None),
    ("memTotal=", "mem_total", times(1024)),
    ("memFree=", "mem_free", times(1024)),
    ("memBuffers=", "mem_buffers", times(1024)),
]

STATUS_RULES: list[ExtractionRule] = [
    offset_rule(metric, label, convert=convert)
    for label, metric, convert in _STATUS_FIELDS
] + [
    # Reported in tenths of a percent.  Firmware prints 0 while the link is
    # down, so zero never means "zero quality".
    offset_rule("ccq", "ccq=", convert=per(10), zero_is_unknown=True),
]


def derive_status_metrics(table: MetricTable) -> None:
    """Fill in metrics computed from the status dump."""
    table.derive(
        "mem_used", ("mem_total", "mem_free", "mem_buffers"),
        lambda total, free, buffers: total - free - buffers,
    )
