"""Munin multigraph protocol output."""

from __future__ import annotations

from typing import Iterable

from airgraph.metrics.base import Known, MetricValue
from airgraph.metrics.definitions import FieldDefinition, GraphDefinition
from airgraph.metrics.table import MetricTable

UNKNOWN_TOKEN = "U"


def format_value(value: MetricValue) -> str:
    if not isinstance(value, Known):
        return UNKNOWN_TOKEN
    return _format_number(value.value)


def _format_number(number: float) -> str:
    if float(number).is_integer():
        return str(int(number))
    return repr(float(number))


def _field_config(f: FieldDefinition) -> list[str]:
    lines = [f"{f.name}.label {f.label}", f"{f.name}.type {f.type}"]
    if f.draw:
        lines.append(f"{f.name}.draw {f.draw}")
    if f.min is not None:
        lines.append(f"{f.name}.min {_format_number(f.min)}")
    if f.max is not None:
        lines.append(f"{f.name}.max {_format_number(f.max)}")
    if f.warning:
        lines.append(f"{f.name}.warning {f.warning}")
    if f.critical:
        lines.append(f"{f.name}.critical {f.critical}")
    if f.negative:
        lines.append(f"{f.name}.negative {f.negative}")
    if not f.graph:
        lines.append(f"{f.name}.graph no")
    if f.cdef:
        lines.append(f"{f.name}.cdef {f.cdef}")
    if f.info:
        lines.append(f"{f.name}.info {f.info}")
    return lines


def _graph_config(graph: GraphDefinition) -> list[str]:
    lines = [
        f"multigraph {graph.name}",
        f"graph_title {graph.title}",
        f"graph_vlabel {graph.vlabel}",
        f"graph_category {graph.category}",
    ]
    if graph.args:
        lines.append(f"graph_args {graph.args}")
    if not graph.scale:
        lines.append("graph_scale no")
    if graph.info:
        lines.append(f"graph_info {graph.info}")
    lines.append("graph_order " + " ".join(f.name for f in graph.fields))
    for f in graph.fields:
        lines.extend(_field_config(f))
    lines.append("")
    return lines


def render_config(definitions: Iterable[GraphDefinition],
                  host_name: str | None = None) -> str:
    """Schema declaration for every graph; needs no device access."""
    lines: list[str] = []
    if host_name:
        lines.append(f"host_name {host_name}")
    for graph in definitions:
        lines.extend(_graph_config(graph))
    return "\n".join(lines) + "\n"


def render_values(definitions: Iterable[GraphDefinition],
                  table: MetricTable) -> str:
    """One value line per declared field, Unknown rendered as ``U``."""
    lines: list[str] = []
    for graph in definitions:
        lines.append(f"multigraph {graph.name}")
        for f in graph.fields:
            lines.append(f"{f.name}.value {format_value(table.get(f.name))}")
        lines.append("")
    return "\n".join(lines) + "\n"
