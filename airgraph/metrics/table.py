"""Per-cycle metric table — one value per declared metric."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Mapping

from airgraph.errors import UnknownMetricError
from airgraph.metrics.base import UNKNOWN, Known, MetricValue
from airgraph.metrics.definitions import GraphDefinition, metric_names

logger = logging.getLogger(__name__)


class MetricTable:
    """Holds this cycle's value for every declared metric.

    Every name starts out Unknown.  Setting a name that the definitions do
    not declare is a programming error and raises UnknownMetricError.
    """

    def __init__(self, definitions: Iterable[GraphDefinition]) -> None:
        self._names = metric_names(tuple(definitions))
        self._values: dict[str, MetricValue] = {name: UNKNOWN for name in self._names}

    def set(self, name: str, value: MetricValue) -> None:
        if name not in self._values:
            raise UnknownMetricError(name)
        self._values[name] = value

    def get(self, name: str) -> MetricValue:
        if name not in self._values:
            raise UnknownMetricError(name)
        return self._values[name]

    def update(self, values: Mapping[str, MetricValue]) -> None:
        for name, value in values.items():
            self.set(name, value)

    def names(self) -> list[str]:
        return list(self._names)

    def known(self) -> dict[str, float]:
        return {
            name: value.value for name, value in self._values.items()
            if isinstance(value, Known)
        }

    def derive(self, name: str, inputs: Iterable[str],
               func: Callable[..., float]) -> MetricValue:
        """Compute *name* from other metrics; Unknown unless every input is Known."""
        values = [self.get(i) for i in inputs]
        if all(isinstance(v, Known) for v in values):
            result: MetricValue = Known(func(*(v.value for v in values)))
        else:
            result = UNKNOWN
            logger.debug("Cannot derive %s: missing inputs", name)
        self.set(name, result)
        return result

    def __len__(self) -> int:
        return len(self._names)
