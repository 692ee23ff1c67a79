"""Credit-log renderers: records, DataFrame, TSV, CSV and HTML."""
from __future__ import annotations

import csv
import html
import io
from decimal import Decimal
from typing import Sequence

import pandas as pd

from factor_reports.domain.models import DisplayRow

CREDIT_LOG_COLUMNS = (
    "Sequence Number",
    "Request Date",
    "Date Received",
    "Reminder (Yes/No)",
    "New Acct / Name Address Change (Yes/No)",
    "Cancellation (Yes/No)",
    "Buyer",
    "Buyer Country",
    "Seller",
    "Seller Country",
    "Partner",
    "Partner Country",
    "2,5,7",
    "Amount Req",
    "Currency",
    "Term",
    "Contact Allowed (Yes/No)",
    "3, 6, 8",
    "Amt Appr",
    "Msg 3 Expiration Date",
    "Insurance (Yes/No)",
    "Response Date",
    "OFAC Date",
    "Rate",
    "Incoming Comments",
    "Credit Comments",
    "AE Comments",
    "# Days to Respond",
    "Credit Manager",
    "AE/CSO",
    "Industry / Product",
    "Client Code",
    "Amount Req (USD)",
)


def format_cell(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, Decimal):
        if value.is_nan():
            return "NaN"
        return format(value, "f")
    return str(value)


def format_usd(value: object) -> str:
    if isinstance(value, Decimal) and value.is_finite():
        return f"{value:.2f}"
    return format_cell(value)


def row_to_record(row: DisplayRow) -> dict[str, str]:
    record = {column: "" for column in CREDIT_LOG_COLUMNS}
    record.update(
        {
            "Sequence Number": format_cell(row.sequence_nr),
            "Request Date": row.request_date,
            "Date Received": row.date_received,
            "Reminder (Yes/No)": "No",
            "New Acct / Name Address Change (Yes/No)": "No",
            "Cancellation (Yes/No)": "No",
            "Buyer": row.buyer_name,
            "Buyer Country": row.buyer_country,
            "Seller": row.seller_name,
            "Seller Country": row.seller_country,
            "Partner": row.partner_name,
            "Partner Country": row.partner_country,
            "2,5,7": row.message_type,
            "Amount Req": format_cell(row.amount_requested),
            "Currency": row.currency,
            "Term": format_cell(row.term),
            "Contact Allowed (Yes/No)": row.contact_allowed,
            "Incoming Comments": row.incoming_comments,
            "Credit Manager": row.credit_manager,
            "AE/CSO": row.account_executive,
            "Industry / Product": row.industry_product,
            "Client Code": row.client_code,
            "Amount Req (USD)": format_usd(row.amount_requested_usd),
        }
    )
    return record


def rows_to_records(rows: Sequence[DisplayRow]) -> list[dict[str, str]]:
    return [row_to_record(row) for row in rows]


def to_dataframe(rows: Sequence[DisplayRow]) -> pd.DataFrame:
    return pd.DataFrame(rows_to_records(rows), columns=list(CREDIT_LOG_COLUMNS))


def _tsv_cell(value: str) -> str:
    return value.replace("\t", " ").replace("\r\n", " ").replace("\n", " ").replace("\r", " ")


def render_tsv(rows: Sequence[DisplayRow], include_header: bool = True) -> str:
    """Tab-separated table ready to paste into a spreadsheet."""
    lines: list[str] = []
    if include_header:
        lines.append("\t".join(CREDIT_LOG_COLUMNS))
    for record in rows_to_records(rows):
        lines.append("\t".join(_tsv_cell(record[column]) for column in CREDIT_LOG_COLUMNS))
    return "".join(line + "\n" for line in lines)


def render_csv(rows: Sequence[DisplayRow]) -> bytes:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(CREDIT_LOG_COLUMNS))
    writer.writeheader()
    writer.writerows(rows_to_records(rows))
    return buffer.getvalue().encode("utf-8")


def render_html(rows: Sequence[DisplayRow]) -> str:
    if not rows:
        return "<p>No credit requests found.</p>"
    header = "".join(f"<th>{html.escape(column)}</th>" for column in CREDIT_LOG_COLUMNS)
    body_parts = []
    for record in rows_to_records(rows):
        cells = "".join(f"<td>{html.escape(record[column])}</td>" for column in CREDIT_LOG_COLUMNS)
        body_parts.append(f"<tr>{cells}</tr>")
    body_html = "".join(body_parts)
    return f"<table><thead><tr>{header}</tr></thead><tbody>{body_html}</tbody></table>"
