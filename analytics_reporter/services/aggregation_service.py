"""
analytics_reporter/services/aggregation_service.py

Totals computation for normalized report data.

Every report's ``totals`` mapping is built by running an ordered registry of
rules over the data points. A rule decides whether it applies (by the fields
present in the first point, or by the report name) and then writes its keys.

Rule order
----------
1. Field sums, keyed on the first point's fields:

       visitors   -> totals["visitors"]
       visits     -> totals["visits"]
       pageviews  -> totals["visits"]     (overwrites the visits sum)

2. Report-specific histograms and cross-tabulations, matched by exact
   report name or name prefix:

       device_model*     device_models[mobile_device]
       language*         languages[language]
       devices*          devices[device]           fixed {mobile, desktop, tablet}
       screen-size       screen_resolution[screen_resolution]
       os                os[os]
       windows           os_version[os_version]
       browsers          browser[browser]
       ie                ie_version[browser_version]
       os-browsers       by_os[os][browser] / by_browsers[browser][os]
       windows-ie        by_windows[os_version][browser_version] / by_ie[...][...]
       windows-browsers  by_windows[os_version][browser] / by_browsers[...][...]

   Histograms accumulate the integer ``visits`` of each point.

3. Date range, when the first point carries a ``date``.

New report types extend the registry through ``AggregationEngine.register``
without touching the built-in rules.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Iterable, Mapping, Sequence

from analytics_reporter.domain.types import DataPoint, Totals
from analytics_reporter.mappers.field_mapper import DATE_FIELD, OTHER_BUCKET
from analytics_reporter.validators.data_contract import DataContractViolation, parse_int

logger = logging.getLogger(__name__)

MEASURE_FIELD = "visits"
DEVICE_CATEGORIES: tuple[str, ...] = ("mobile", "desktop", "tablet")


def _category(point: DataPoint, field: str, report_name: str) -> str:
    try:
        return point[field]
    except KeyError as exc:
        raise DataContractViolation(
            f"Data point is missing categorical field '{field}'.",
            report=report_name,
            field=field,
        ) from exc


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


class TotalsRule(ABC):
    """
    One contribution to a report's totals.
    """

    @abstractmethod
    def applies(self, report_name: str, points: Sequence[DataPoint]) -> bool:
        """
        Return True when this rule should run for the report.
        """

    @abstractmethod
    def apply(self, report_name: str, points: Sequence[DataPoint], totals: Totals) -> None:
        """
        Write this rule's keys into *totals*.
        """


class FieldSumRule(TotalsRule):
    """
    Sum an integer field across all points when the first point has it.
    """

    def __init__(self, field: str, total_key: str) -> None:
        self.field = field
        self.total_key = total_key

    def applies(self, report_name: str, points: Sequence[DataPoint]) -> bool:
        return bool(points) and self.field in points[0]

    def apply(self, report_name: str, points: Sequence[DataPoint], totals: Totals) -> None:
        totals[self.total_key] = sum(
            parse_int(point.get(self.field), field=self.field, report=report_name)
            for point in points
        )


class ReportNameRule(TotalsRule):
    """
    Rule selected by exact report name or by report name prefix.
    """

    def __init__(self, *, report_name: str | None = None, prefix: str | None = None) -> None:
        if (report_name is None) == (prefix is None):
            raise ValueError("Provide exactly one of report_name or prefix.")
        self.report_name = report_name
        self.prefix = prefix

    def applies(self, report_name: str, points: Sequence[DataPoint]) -> bool:
        if self.prefix is not None:
            return report_name.startswith(self.prefix)
        return report_name == self.report_name


class HistogramRule(ReportNameRule):
    """
    One-level histogram of visits by a categorical field.

    With *categories*, the histogram is pre-seeded with those keys and any
    other category is a data contract violation.
    """

    def __init__(
        self,
        total_key: str,
        category_field: str,
        *,
        report_name: str | None = None,
        prefix: str | None = None,
        categories: Iterable[str] | None = None,
    ) -> None:
        super().__init__(report_name=report_name, prefix=prefix)
        self.total_key = total_key
        self.category_field = category_field
        self.categories = tuple(categories) if categories is not None else None

    def apply(self, report_name: str, points: Sequence[DataPoint], totals: Totals) -> None:
        histogram: dict[str, int] = dict.fromkeys(self.categories or (), 0)
        for point in points:
            category = _category(point, self.category_field, report_name)
            visits = parse_int(point.get(MEASURE_FIELD), field=MEASURE_FIELD, report=report_name)
            if self.categories is not None and category not in histogram:
                raise DataContractViolation(
                    f"Unexpected {self.category_field} '{category}'; "
                    f"allowed: {', '.join(self.categories)}.",
                    report=report_name,
                    field=self.category_field,
                    value=category,
                )
            histogram[category] = histogram.get(category, 0) + visits
        totals[self.total_key] = histogram


class CrossTabRule(ReportNameRule):
    """
    Two-level visit counts stored under both key orders.
    """

    def __init__(
        self,
        *,
        first_field: str,
        second_field: str,
        first_key: str,
        second_key: str,
        report_name: str | None = None,
        prefix: str | None = None,
    ) -> None:
        super().__init__(report_name=report_name, prefix=prefix)
        self.first_field = first_field
        self.second_field = second_field
        self.first_key = first_key
        self.second_key = second_key

    def apply(self, report_name: str, points: Sequence[DataPoint], totals: Totals) -> None:
        by_first: dict[str, dict[str, int]] = {}
        by_second: dict[str, dict[str, int]] = {}
        for point in points:
            first = _category(point, self.first_field, report_name)
            second = _category(point, self.second_field, report_name)
            visits = parse_int(point.get(MEASURE_FIELD), field=MEASURE_FIELD, report=report_name)

            inner = by_first.setdefault(first, {})
            inner[second] = inner.get(second, 0) + visits
            inner = by_second.setdefault(second, {})
            inner[first] = inner.get(first, 0) + visits

        totals[self.first_key] = by_first
        totals[self.second_key] = by_second


class DateRangeRule(TotalsRule):
    """
    Record the first and last dates of date-ordered reports.
    """

    def applies(self, report_name: str, points: Sequence[DataPoint]) -> bool:
        return bool(points) and bool(points[0].get(DATE_FIELD))

    def apply(self, report_name: str, points: Sequence[DataPoint], totals: Totals) -> None:
        start_date = points[0][DATE_FIELD]
        # screen-size leads with a bogus "(other)" aggregate row.
        if start_date == OTHER_BUCKET and len(points) > 1:
            start_date = points[1].get(DATE_FIELD)
        totals["start_date"] = start_date
        totals["end_date"] = points[-1].get(DATE_FIELD)


DEFAULT_RULES: tuple[TotalsRule, ...] = (
    FieldSumRule("visitors", "visitors"),
    FieldSumRule("visits", "visits"),
    FieldSumRule("pageviews", "visits"),
    HistogramRule("device_models", "mobile_device", prefix="device_model"),
    HistogramRule("languages", "language", prefix="language"),
    HistogramRule("devices", "device", prefix="devices", categories=DEVICE_CATEGORIES),
    HistogramRule("screen_resolution", "screen_resolution", report_name="screen-size"),
    HistogramRule("os", "os", report_name="os"),
    HistogramRule("os_version", "os_version", report_name="windows"),
    HistogramRule("browser", "browser", report_name="browsers"),
    HistogramRule("ie_version", "browser_version", report_name="ie"),
    CrossTabRule(
        first_field="os",
        second_field="browser",
        first_key="by_os",
        second_key="by_browsers",
        report_name="os-browsers",
    ),
    CrossTabRule(
        first_field="os_version",
        second_field="browser_version",
        first_key="by_windows",
        second_key="by_ie",
        report_name="windows-ie",
    ),
    CrossTabRule(
        first_field="os_version",
        second_field="browser",
        first_key="by_windows",
        second_key="by_browsers",
        report_name="windows-browsers",
    ),
    DateRangeRule(),
)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class AggregationEngine:
    """
    Runs the totals registry in order over a report's data points.

    Stateless across calls: each ``aggregate`` builds a new totals mapping.
    """

    def __init__(self, rules: Sequence[TotalsRule] | None = None) -> None:
        self._rules: list[TotalsRule] = list(DEFAULT_RULES if rules is None else rules)

    @property
    def rules(self) -> tuple[TotalsRule, ...]:
        return tuple(self._rules)

    def register(self, rule: TotalsRule) -> None:
        """
        Append a rule; it runs after every rule already registered.
        """

        self._rules.append(rule)

    def aggregate(self, report_name: str, points: Sequence[Mapping[str, str]]) -> Totals:
        totals: Totals = {}
        if not points:
            return totals

        for rule in self._rules:
            if rule.applies(report_name, points):
                rule.apply(report_name, points, totals)

        logger.debug(
            "Aggregated totals report=%s points=%d keys=%s",
            report_name,
            len(points),
            sorted(totals),
        )
        return totals
