"""Static graph and field definitions — the fixed Munin schema."""

from __future__ import annotations

from dataclasses import dataclass

CATEGORY = "wireless"


@dataclass(frozen=True)
class FieldDefinition:
    name: str
    label: str
    type: str = "GAUGE"
    draw: str | None = None
    min: float | None = None
    max: float | None = None
    warning: str | None = None
    critical: str | None = None
    negative: str | None = None
    graph: bool = True
    cdef: str | None = None
    info: str | None = None


@dataclass(frozen=True)
class GraphDefinition:
    name: str
    title: str
    vlabel: str
    fields: tuple[FieldDefinition, ...]
    category: str = CATEGORY
    args: str | None = None
    info: str | None = None
    scale: bool = True


def _pair(rx: str, tx: str, *, type: str = "GAUGE", unit_label: str,
          cdef_factor: int | None = None) -> tuple[FieldDefinition, ...]:
    """An in/out pair drawn as one mirrored graph: rx below the axis, tx above."""
    rx_cdef = f"{rx},{cdef_factor},*" if cdef_factor else None
    tx_cdef = f"{tx},{cdef_factor},*" if cdef_factor else None
    return (
        FieldDefinition(rx, "received", type=type, min=0, graph=False,
                        cdef=rx_cdef),
        FieldDefinition(tx, unit_label, type=type, min=0, negative=rx,
                        cdef=tx_cdef,
                        info="Values below the axis are received, above are sent."),
    )


_CPU_FIELDS = (
    ("cpu_user", "user"),
    ("cpu_system", "system"),
    ("cpu_nice", "nice"),
    ("cpu_iowait", "iowait"),
    ("cpu_irq", "irq"),
    ("cpu_softirq", "softirq"),
    ("cpu_idle", "idle"),
)


def build_definitions(
    ping_target_name: str | None = None,
) -> tuple[GraphDefinition, ...]:
    """Build the graph table.

    The remote ping graph is only declared when a ping target is
    configured; everything else is fixed.
    """
    graphs: list[GraphDefinition] = [
        GraphDefinition(
            name="airos_load",
            title="Load average",
            vlabel="load",
            args="--base 1000 -l 0",
            scale=False,
            fields=(
                FieldDefinition("load1", "1 minute", min=0),
                FieldDefinition("load5", "5 minutes", min=0),
                FieldDefinition("load15", "15 minutes", min=0),
            ),
        ),
        GraphDefinition(
            name="airos_cpu",
            title="CPU usage",
            vlabel="%",
            args="--base 1000 -r --lower-limit 0 --upper-limit 100",
            scale=False,
            info="Time spent per CPU state over a one second sample.",
            fields=tuple(
                FieldDefinition(name, label, draw="AREA" if i == 0 else "STACK",
                                min=0, max=100)
                for i, (name, label) in enumerate(_CPU_FIELDS)
            ),
        ),
        GraphDefinition(
            name="airos_uptime",
            title="Uptime",
            vlabel="days",
            args="--base 1000 -l 0",
            scale=False,
            fields=(
                FieldDefinition("uptime", "uptime", draw="AREA", min=0),
            ),
        ),
        GraphDefinition(
            name="airos_memory",
            title="Memory usage",
            vlabel="bytes",
            args="--base 1024 -l 0",
            fields=(
                FieldDefinition("mem_used", "used", draw="AREA", min=0,
                                info="Total minus free minus buffers."),
                FieldDefinition("mem_buffers", "buffers", draw="STACK", min=0),
                FieldDefinition("mem_free", "free", draw="STACK", min=0),
                FieldDefinition("mem_total", "total", min=0, graph=False),
            ),
        ),
        GraphDefinition(
            name="airos_signal",
            title="Signal level",
            vlabel="dBm",
            args="--base 1000 --upper-limit 0",
            scale=False,
            fields=(
                FieldDefinition("signal", "signal", warning="-75:", critical="-85:"),
                FieldDefinition("rssi", "RSSI"),
                FieldDefinition("noise", "noise floor"),
            ),
        ),
        GraphDefinition(
            name="airos_ccq",
            title="Client connection quality",
            vlabel="%",
            args="--base 1000 --lower-limit 0 --upper-limit 100",
            scale=False,
            info="Transmit CCQ as reported by the radio.",
            fields=(
                FieldDefinition("ccq", "CCQ", min=0, max=100,
                                warning="70:", critical="50:"),
            ),
        ),
        GraphDefinition(
            name="airos_rate",
            title="Wireless link rate",
            vlabel="bit/s in (-) / out (+)",
            args="--base 1000",
            fields=_pair("rx_rate", "tx_rate", unit_label="rate"),
        ),
        GraphDefinition(
            name="airos_stations",
            title="Associated stations",
            vlabel="stations",
            args="--base 1000 -l 0",
            scale=False,
            fields=(
                FieldDefinition("stations", "stations", min=0),
            ),
        ),
        GraphDefinition(
            name="airos_wlan_traffic",
            title="Wireless traffic",
            vlabel="bits in (-) / out (+) per ${graph_period}",
            args="--base 1000",
            fields=_pair("wlan_rx_bytes", "wlan_tx_bytes", type="DERIVE",
                         unit_label="bps", cdef_factor=8),
        ),
        GraphDefinition(
            name="airos_lan_traffic",
            title="LAN traffic",
            vlabel="bits in (-) / out (+) per ${graph_period}",
            args="--base 1000",
            fields=_pair("lan_rx_bytes", "lan_tx_bytes", type="DERIVE",
                         unit_label="bps", cdef_factor=8),
        ),
        GraphDefinition(
            name="airos_wlan_errors",
            title="Wireless errors",
            vlabel="errors per ${graph_period}",
            args="--base 1000 -l 0",
            fields=(
                FieldDefinition("err_nwid", "wrong network id", type="DERIVE", min=0),
                FieldDefinition("err_crypt", "decryption", type="DERIVE", min=0),
                FieldDefinition("err_frag", "fragmentation", type="DERIVE", min=0),
                FieldDefinition("err_rx_retries", "rx retries", type="DERIVE", min=0),
                FieldDefinition("err_bmiss", "missed beacons", type="DERIVE", min=0),
                FieldDefinition("err_other", "other", type="DERIVE", min=0),
                FieldDefinition("err_tx_retries", "tx retries", type="DERIVE", min=0),
            ),
        ),
    ]

    if ping_target_name:
        graphs.append(GraphDefinition(
            name="airos_ping_remote",
            title=f"Ping from device to {ping_target_name}",
            vlabel="seconds",
            args="--base 1000 -l 0",
            info=f"Round trip time and packet loss from the device to {ping_target_name}.",
            fields=(
                FieldDefinition("remote_rtt", "round trip time", min=0),
                FieldDefinition("remote_loss", "packet loss (%)", min=0, max=100,
                                warning=":10", critical=":50"),
            ),
        ))

    graphs.append(GraphDefinition(
        name="airos_ping",
        title="Ping to device",
        vlabel="seconds",
        args="--base 1000 -l 0",
        info="Round trip time and packet loss from the collector to the device.",
        fields=(
            FieldDefinition("rtt", "round trip time", min=0),
            FieldDefinition("loss", "packet loss (%)", min=0, max=100,
                            warning=":10", critical=":50"),
        ),
    ))
    return tuple(graphs)


def metric_names(definitions: tuple[GraphDefinition, ...]) -> list[str]:
    """All declared metric names, in declared order."""
    return [f.name for graph in definitions for f in graph.fields]
