from decimal import Decimal

from factor_reports.domain.models import DisplayRow
from factor_reports.presentation.credit_log import (
    CREDIT_LOG_COLUMNS,
    render_csv,
    render_html,
    render_tsv,
    row_to_record,
    to_dataframe,
)


def make_row(**overrides) -> DisplayRow:
    values = dict(
        sequence_nr=Decimal("105"),
        request_date="2024-03-05",
        date_received="2024-03-06",
        buyer_name="Buyer Inc",
        buyer_country="DE",
        seller_name="Seller Mills",
        seller_country="Türkiye",
        partner_name="Anatolia Factoring",
        partner_country="Türkiye",
        message_type="5",
        amount_requested=Decimal("800000"),
        currency="EUR",
        term=Decimal("60"),
        contact_allowed="No",
        incoming_comments="",
        credit_manager="trey",
        account_executive="Tammie Cosey",
        industry_product="Denim fabric",
        client_code="TR001",
        amount_requested_usd=Decimal("1600000") / Decimal("3"),
    )
    values.update(overrides)
    return DisplayRow(**values)


def test_record_layout_and_defaults():
    record = row_to_record(make_row())

    assert list(record) == list(CREDIT_LOG_COLUMNS)
    assert record["Sequence Number"] == "105"
    assert record["Reminder (Yes/No)"] == "No"
    assert record["New Acct / Name Address Change (Yes/No)"] == "No"
    assert record["Cancellation (Yes/No)"] == "No"
    assert record["2,5,7"] == "5"
    assert record["Amt Appr"] == ""
    assert record["OFAC Date"] == ""
    assert record["Amount Req (USD)"] == "533333.33"
    assert record["AE/CSO"] == "Tammie Cosey"


def test_unconverted_amount_is_rendered_verbatim():
    record = row_to_record(make_row(amount_requested_usd="800000.00 EUR (Rate needed)", term=None))

    assert record["Amount Req (USD)"] == "800000.00 EUR (Rate needed)"
    assert record["Term"] == ""


def test_tsv_with_and_without_header():
    rows = [make_row(incoming_comments="line one\nline\ttwo")]

    with_header = render_tsv(rows).splitlines()
    without_header = render_tsv(rows, include_header=False).splitlines()

    assert with_header[0].split("\t") == list(CREDIT_LOG_COLUMNS)
    assert without_header == with_header[1:]
    cells = without_header[0].split("\t")
    assert len(cells) == len(CREDIT_LOG_COLUMNS)
    assert cells[CREDIT_LOG_COLUMNS.index("Incoming Comments")] == "line one line two"


def test_csv_and_html():
    rows = [make_row(buyer_name="Smith & Sons <Ltd>")]

    csv_text = render_csv(rows).decode("utf-8")
    html_text = render_html(rows)

    assert csv_text.splitlines()[0].startswith("Sequence Number,Request Date,Date Received")
    assert "Smith & Sons <Ltd>" in csv_text
    assert "Smith &amp; Sons &lt;Ltd&gt;" in html_text
    assert render_html([]) == "<p>No credit requests found.</p>"


def test_dataframe_columns():
    frame = to_dataframe([make_row(), make_row(sequence_nr=None)])

    assert list(frame.columns) == list(CREDIT_LOG_COLUMNS)
    assert frame["Sequence Number"].tolist() == ["105", ""]
