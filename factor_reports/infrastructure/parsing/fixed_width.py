"""Layout inference and row extraction for the monthly fixed-width reports."""
from __future__ import annotations

import logging
import re

from factor_reports.config import SETTINGS
from factor_reports.domain.models import Bracket, ColumnMap, ReportRow, ReportType
from factor_reports.domain.report_tables import recompute_diffs

from .utils import split_lines

logger = logging.getLogger(__name__)

_VOLUME_SIGNATURE = "CLNTCURRMOLYSAMEMOCURRYTDYTDLASTYRTOTALLASTYR"

HEADER_SIGNATURES: dict[ReportType, str] = {
    ReportType.VOLUME: _VOLUME_SIGNATURE,
    ReportType.COMMISSION: _VOLUME_SIGNATURE + "AVG",
}

_VOLUME_TERMS = ("CURR MO", "LY SAME MO", "CURR YTD", "YTD LAST YR", "TOTAL LAST YR")

HEADER_TERMS: dict[ReportType, tuple[str, ...]] = {
    ReportType.VOLUME: _VOLUME_TERMS,
    ReportType.COMMISSION: _VOLUME_TERMS + ("AVG",),
}

SECONDARY_TERMS = ("MTD % DIFF", "YTD % DIFF", "YTD DIFF")

_CLIENT_CODE = re.compile(r"[A-Z0-9]{4}")
_WHITESPACE = re.compile(r"\s")
_NAME_TERMINATOR = "    "


def classify(text: str) -> ReportType:
    """Tell Volume and Commission reports apart by their third line."""
    lines = split_lines(text)
    if len(lines) < 3:
        return ReportType.UNKNOWN
    title = lines[2].upper()
    if "VOLUME" in title:
        return ReportType.VOLUME
    if "COMMISSION" in title:
        return ReportType.COMMISSION
    return ReportType.UNKNOWN


def locate_header(text: str, report_type: ReportType) -> int | None:
    """Return the 1-based row of the column header, or ``None``."""
    signature = HEADER_SIGNATURES.get(report_type)
    if signature is None:
        return None
    for index, line in enumerate(split_lines(text)):
        if _WHITESPACE.sub("", line) == signature:
            logger.debug("%s header found on row %d", report_type.value, index + 1)
            return index + 1
    return None


def locate_columns(
    text: str,
    header_row: int | None,
    report_type: ReportType,
    data_line_offset: int = SETTINGS.data_line_offset,
) -> ColumnMap | None:
    """Infer the group/code/name brackets and data column offsets.

    The brackets come from the data line ``data_line_offset`` rows below the
    header; the data column offsets from where the header terms start.
    """
    terms = HEADER_TERMS.get(report_type)
    if terms is None or header_row is None or header_row < 1:
        return None
    lines = split_lines(text)
    data_index = header_row + data_line_offset - 1
    if data_index >= len(lines):
        return None

    data_line = lines[data_index]
    match = _CLIENT_CODE.search(data_line)
    if match is None:
        logger.warning("Could not find a 4-character client code on data line %r", data_line)
        return None

    code_start = match.start()
    name_start = code_start + 4
    gap = data_line.find(_NAME_TERMINATOR, name_start)
    name_end = gap if gap != -1 else len(data_line)

    header_line = lines[header_row - 1]
    offsets: dict[str, int] = {}
    for term in terms:
        index = header_line.find(term)
        if index != -1:
            offsets[term] = index
    for row_index in (header_row - 1, header_row):
        if row_index >= len(lines) or not lines[row_index]:
            continue
        for term in SECONDARY_TERMS:
            index = lines[row_index].find(term)
            if index != -1:
                offsets[term] = index

    column_map = ColumnMap(
        group_bracket=Bracket(0, code_start),
        code_bracket=Bracket(code_start, name_start),
        name_bracket=Bracket(name_start, name_end),
        data_columns=offsets,
    )
    logger.info("%s layout: code at %d, columns %s", report_type.value, code_start, column_map.ordered_columns())
    return column_map


def parse_rows(
    text: str,
    column_map: ColumnMap,
    column_width: int = SETTINGS.data_column_width,
) -> list[ReportRow]:
    """Extract client rows; headers, footers and subtotal lines fall out of the filter."""
    rows: list[ReportRow] = []
    columns = column_map.ordered_columns()
    for line in split_lines(text):
        group = column_map.group_bracket.slice(line).strip()
        code = column_map.code_bracket.slice(line).strip()
        if len(group) != 1 or not code:
            continue
        values = {
            name: line[offset:offset + column_width].strip()
            for name, offset in ((name, column_map.data_columns[name]) for name in columns)
        }
        rows.append(
            ReportRow(
                group=group,
                code=code,
                name=column_map.name_bracket.slice(line).strip(),
                values=recompute_diffs(values),
            )
        )
    return rows
