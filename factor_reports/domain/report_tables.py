"""Derived columns and link tables for the monthly fixed-width reports."""
from __future__ import annotations

import re
from decimal import ROUND_FLOOR, Decimal, InvalidOperation
from typing import Mapping, Sequence

from .models import LinkRow, LinkTable, ReportRow

NOT_AVAILABLE = "N/A"

# Percentage-difference column -> (current column, previous column).
DIFF_SOURCES: dict[str, tuple[str, str]] = {
    "MTD % DIFF": ("CURR MO", "LY SAME MO"),
    "YTD % DIFF": ("CURR YTD", "YTD LAST YR"),
}

# Link table label -> report column it is read from.
LINK_COLUMNS: tuple[tuple[str, str], ...] = (
    ("CURR MO VOLUME", "CURR MO"),
    ("LY SAME MO VOLUME", "LY SAME MO"),
    ("MTD % DIFF", "MTD % DIFF"),
    ("CURR YTD VOLUME", "CURR YTD"),
    ("YTD LAST YR VOLUME", "YTD LAST YR"),
    ("YTD % DIFF", "YTD % DIFF"),
    ("TOTAL LAST YR VOLUME", "TOTAL LAST YR"),
)

LINK_DIFF_SOURCES: dict[str, tuple[str, str]] = {
    "MTD % DIFF": ("CURR MO VOLUME", "LY SAME MO VOLUME"),
    "YTD % DIFF": ("CURR YTD VOLUME", "YTD LAST YR VOLUME"),
}

LINK_GROUPS: tuple[tuple[str, str], ...] = (
    ("C", "Group C - CIT Table"),
    ("U", "Group U - FCB Table"),
)

UNKNOWN_COUNTRY = "Unknown Country"


def is_diff_column(label: str) -> bool:
    return "% DIFF" in label


def parse_report_number(value: object) -> Decimal | None:
    """Parse a report cell such as ``"1,250"``; ``None`` when blank or not a finite number."""
    if not isinstance(value, str):
        if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
            value = str(value)
        else:
            return None
    text = value.strip().replace(",", "")
    if not text:
        return None
    try:
        number = Decimal(text)
    except InvalidOperation:
        return None
    return number if number.is_finite() else None


def compute_percentage_diff(current: object, previous: object) -> str:
    current_number = parse_report_number(current)
    previous_number = parse_report_number(previous)
    if current_number is None or previous_number is None or current_number == 0 or previous_number == 0:
        return NOT_AVAILABLE
    percent = (current_number - previous_number) / previous_number * 100
    rounded = (percent + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR)
    return f"{int(rounded)}%"


def recompute_diffs(values: Mapping[str, str], sources: Mapping[str, tuple[str, str]] = DIFF_SOURCES) -> dict[str, str]:
    result = dict(values)
    for label, (current, previous) in sources.items():
        if label in result:
            result[label] = compute_percentage_diff(result.get(current), result.get(previous))
    return result


def is_zero_value(value: str) -> bool:
    trimmed = value.strip()
    if not trimmed:
        return True
    candidate = re.sub(r"[^0-9.\-]", "", trimmed)
    if candidate in {"", "-", "."}:
        return True
    try:
        return float(candidate) == 0
    except ValueError:
        return trimmed == "0"


def format_total(value: Decimal) -> str:
    if value == value.to_integral_value():
        return f"{int(value):,}"
    return f"{value:,.2f}"


def _totals(columns: Sequence[str], rows: Sequence[LinkRow]) -> list[str]:
    if not rows:
        return []
    totals: list[str] = []
    for index, label in enumerate(columns):
        if is_diff_column(label):
            totals.append("")
            continue
        numbers = [parse_report_number(row.values[index]) for row in rows]
        numbers = [number for number in numbers if number is not None]
        totals.append(format_total(sum(numbers, Decimal(0))) if numbers else "")
    return totals


def build_link_tables(rows: Sequence[ReportRow], client_countries: Mapping[str, str]) -> list[LinkTable]:
    """Group Volume rows into the C and U link tables."""
    columns = [label for label, _ in LINK_COLUMNS]
    grouped: dict[str, list[LinkRow]] = {group: [] for group, _ in LINK_GROUPS}

    for row in rows:
        if row.group not in grouped:
            continue
        values: dict[str, str] = {}
        for label, key in LINK_COLUMNS:
            raw = row.values.get(key, "")
            values[label] = raw if raw else "0"
        values = recompute_diffs(values, LINK_DIFF_SOURCES)
        ordered = [values[label] for label in columns]
        if all(is_zero_value(value) for value in ordered):
            continue
        country = client_countries.get(row.code.upper(), UNKNOWN_COUNTRY)
        grouped[row.group].append(LinkRow(display_name=f"{row.name}, {country}", values=tuple(ordered)))

    return [
        LinkTable(
            group=group,
            heading=heading,
            columns=tuple(columns),
            rows=tuple(grouped[group]),
            totals=tuple(_totals(columns, grouped[group])),
        )
        for group, heading in LINK_GROUPS
    ]
