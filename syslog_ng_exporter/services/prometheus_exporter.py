"""Prometheus collector adapter for STATS collection passes."""

import logging
import threading
from collections import defaultdict
from typing import Dict, Iterator, List, Union

from prometheus_client.core import (
    CollectorRegistry,
    CounterMetricFamily,
    GaugeMetricFamily,
    InfoMetricFamily,
)

from ..collectors.stats_collector import StatsCollector
from ..parsers.stats_classifier import NAMESPACE, STAT_FAMILIES
from ..utils.metrics import MetricEmission, MetricFamily, MetricKind
from ..version import __version__

PrometheusFamily = Union[CounterMetricFamily, GaugeMetricFamily]


def _new_family(family: MetricFamily) -> PrometheusFamily:
    if family.kind is MetricKind.COUNTER:
        return CounterMetricFamily(family.name, family.documentation, labels=list(family.label_names))
    return GaugeMetricFamily(family.name, family.documentation, labels=list(family.label_names))


class SyslogNgExporter:
    """
    Custom collector called by prometheus_client on each scrape.

    One STATS pass runs per scrape. Passes are serialized by a lock held
    for the whole pass, including assembly of the metric families.
    """

    def __init__(self, collector: StatsCollector, logger: logging.Logger):
        """
        Initialize exporter.

        Args:
            collector: STATS collector to run on each scrape
            logger: Logger instance
        """
        self.collector = collector
        self.logger = logger.getChild(self.__class__.__name__)
        self.scrape_failures = 0
        self._lock = threading.Lock()

    def describe(self) -> Iterator[PrometheusFamily]:
        """Announce metric names without touching the control socket."""
        for family in STAT_FAMILIES:
            yield _new_family(family)
        yield self._up_family(0)
        yield self._failures_family()

    def collect(self) -> Iterator[PrometheusFamily]:
        """
        Run one STATS pass and yield the resulting metric families.

        Never raises: an unreachable syslog-ng is reported as up=0.
        """
        with self._lock:
            stats = self.collector.collect()
            if not stats.up:
                self.scrape_failures += 1

            families = self._build_families(stats.emissions)
            families.append(self._up_family(1 if stats.up else 0))
            families.append(self._failures_family())

        yield from families

    def _build_families(self, emissions: List[MetricEmission]) -> List[PrometheusFamily]:
        grouped: Dict[MetricFamily, List[MetricEmission]] = defaultdict(list)
        for emission in emissions:
            grouped[emission.family].append(emission)

        families = []
        for family, samples in grouped.items():
            prom_family = _new_family(family)
            for sample in samples:
                prom_family.add_metric(list(sample.labels), sample.value)
            families.append(prom_family)

        return families

    def _up_family(self, value: int) -> GaugeMetricFamily:
        return GaugeMetricFamily(
            f"{NAMESPACE}_up",
            "Reads 1 if the syslog-ng server could be reached, else 0.",
            value=value,
        )

    def _failures_family(self) -> CounterMetricFamily:
        return CounterMetricFamily(
            f"{NAMESPACE}_exporter_scrape_failures_total",
            "Number of errors while scraping syslog-ng.",
            value=self.scrape_failures,
        )


class BuildInfoCollector:
    """Static build information of the exporter."""

    def collect(self) -> Iterator[InfoMetricFamily]:
        yield InfoMetricFamily(
            f"{NAMESPACE}_exporter_build",
            "Build information of the syslog-ng exporter.",
            value={"version": __version__},
        )


def create_registry(collector: StatsCollector, logger: logging.Logger) -> CollectorRegistry:
    """
    Build a dedicated registry holding the exporter collectors.

    Args:
        collector: STATS collector backing the scrape endpoint
        logger: Logger instance

    Returns:
        CollectorRegistry: Registry to render on the metrics endpoint
    """
    registry = CollectorRegistry()
    registry.register(SyslogNgExporter(collector, logger))
    registry.register(BuildInfoCollector())
    return registry
