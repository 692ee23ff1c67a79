"""Monthly report renderers: DataFrames, standalone HTML pages and the Excel workbook."""
from __future__ import annotations

import html
from io import BytesIO
from typing import Sequence

import pandas as pd

from factor_reports.application.dto import MonthlyReport
from factor_reports.domain.models import LinkTable, ReportTable
from factor_reports.domain.report_tables import is_diff_column

CLIENT_NAME = "Client name"
TOTAL = "TOTAL"

_PAGE_STYLE = """
body { font-family: Calibri, Arial, sans-serif; margin: 24px; }
table { border-collapse: collapse; margin-bottom: 32px; }
th, td { border: 1px solid #999; padding: 2px 8px; white-space: nowrap; }
th { background: #dde4ee; }
td.numeric { text-align: right; }
.diff { background: #fff6d5; }
tfoot th { background: #c9d3e3; }
.error { color: #b00020; }
"""


def report_table_to_dataframe(table: ReportTable) -> pd.DataFrame:
    columns = ["Group", "Code", "Client Name", *table.columns]
    records = [
        {"Group": row.group, "Code": row.code, "Client Name": row.name, **{c: row.values.get(c, "") for c in table.columns}}
        for row in table.rows
    ]
    return pd.DataFrame(records, columns=columns)


def link_table_to_dataframe(table: LinkTable, include_totals: bool = True) -> pd.DataFrame:
    columns = [CLIENT_NAME, *table.columns]
    records = [[row.display_name, *row.values] for row in table.rows]
    if include_totals and table.totals:
        records.append([TOTAL, *table.totals])
    return pd.DataFrame(records, columns=columns)


def _cell(value: str, label: str, tag: str = "td") -> str:
    classes = "numeric diff" if is_diff_column(label) else "numeric"
    return f"<{tag} class='{classes}'>{html.escape(value)}</{tag}>"


def _page(title: str, body: str) -> str:
    return (
        "<!DOCTYPE html>\n"
        f"<html><head><meta charset='utf-8'><title>{html.escape(title)}</title>"
        f"<style>{_PAGE_STYLE}</style></head>"
        f"<body>{body}</body></html>\n"
    )


def render_link_table_html(table: LinkTable) -> str:
    header = f"<th>{CLIENT_NAME}</th>" + "".join(f"<th>{html.escape(label)}</th>" for label in table.columns)
    if table.rows:
        body = "".join(
            f"<tr><td>{html.escape(row.display_name)}</td>"
            + "".join(_cell(value, label) for value, label in zip(row.values, table.columns))
            + "</tr>"
            for row in table.rows
        )
    else:
        body = f"<tr><td colspan='{len(table.columns) + 1}'>No data available</td></tr>"
    footer = ""
    if table.totals:
        footer = (
            f"<tfoot><tr><th>{TOTAL}</th>"
            + "".join(_cell(value, label, "th") for value, label in zip(table.totals, table.columns))
            + "</tr></tfoot>"
        )
    return (
        f"<h2>{html.escape(table.heading)}</h2>"
        f"<table><thead><tr>{header}</tr></thead><tbody>{body}</tbody>{footer}</table>"
    )


def render_report_table_html(table: ReportTable) -> str:
    if table.error:
        return f"<h2>{html.escape(table.title)}</h2><p class='error'>{html.escape(table.error)}</p>"
    columns = table.columns
    header = "<th>Group</th><th>Code</th><th>Client Name</th>" + "".join(
        f"<th>{html.escape(label)}</th>" for label in columns
    )
    body = "".join(
        f"<tr><td>{html.escape(row.group)}</td><td>{html.escape(row.code)}</td><td>{html.escape(row.name)}</td>"
        + "".join(_cell(row.values.get(label, ""), label) for label in columns)
        + "</tr>"
        for row in table.rows
    )
    return (
        f"<h2>{html.escape(table.title)}</h2>"
        f"<table><thead><tr>{header}</tr></thead><tbody>{body}</tbody></table>"
    )


def render_volume_page(report: MonthlyReport) -> str:
    """Standalone page with the C and U link tables."""
    if report.volume.error:
        body = f"<p class='error'>Could not generate Volume table: {html.escape(report.volume.error)}</p>"
    else:
        body = "".join(render_link_table_html(table) for table in report.link_tables)
    return _page("Volume Tables", body)


def render_commission_page(report: MonthlyReport) -> str:
    return _page("Commission Report", render_report_table_html(report.commission))


def _sheet_name(title: str, used: set[str]) -> str:
    base = "".join(ch for ch in title if ch not in "[]:*?/\\")[:31] or "Sheet"
    name = base
    counter = 2
    while name in used:
        suffix = f" ({counter})"
        name = base[: 31 - len(suffix)] + suffix
        counter += 1
    used.add(name)
    return name


def build_workbook(report: MonthlyReport) -> bytes:
    """One sheet per table; link table totals are written in bold."""
    sheets: Sequence[tuple[str, pd.DataFrame, bool]] = [
        (report.volume.title, report_table_to_dataframe(report.volume), False),
        (report.commission.title, report_table_to_dataframe(report.commission), False),
        *((table.heading, link_table_to_dataframe(table), bool(table.totals)) for table in report.link_tables),
    ]
    used: set[str] = set()
    buf = BytesIO()
    with pd.ExcelWriter(buf, engine="xlsxwriter") as writer:
        bold = writer.book.add_format({"bold": True})
        for title, frame, has_totals in sheets:
            sheet = _sheet_name(title, used)
            frame.to_excel(writer, sheet_name=sheet, index=False)
            worksheet = writer.sheets[sheet]
            worksheet.set_column(0, max(len(frame.columns) - 1, 0), 18)
            if has_totals:
                worksheet.set_row(len(frame), None, bold)
    buf.seek(0)
    return buf.getvalue()
