import pytest

from factor_reports.application.dto import SourceDocument
from factor_reports.application.use_cases import BuildMonthlyReportUseCase
from factor_reports.domain.errors import UnrecognizedReportType
from factor_reports.domain.models import ReportRow
from factor_reports.domain.report_tables import (
    build_link_tables,
    compute_percentage_diff,
    format_total,
    is_zero_value,
    parse_report_number,
)
from factor_reports.presentation import monthly_report

COUNTRIES = {"01A2": "Morocco", "0146": "Chile", "01H2": "Argentina"}


def make_document(name: str, text: str) -> SourceDocument:
    return SourceDocument(name=name, content=text.encode("utf-8"))


@pytest.fixture
def report(volume_report_text, commission_report_text):
    use_case = BuildMonthlyReportUseCase(client_countries=COUNTRIES)
    return use_case.execute(
        make_document("volume.txt", volume_report_text),
        make_document("commission.txt", commission_report_text),
    )


def test_percentage_diff_rounds_half_up():
    assert compute_percentage_diff("1,005", "1,000") == "1%"
    assert compute_percentage_diff("995", "1000") == "0%"
    assert compute_percentage_diff("985", "1000") == "-1%"
    assert compute_percentage_diff("110", "100") == "10%"
    assert compute_percentage_diff("150", "100") == "50%"
    assert compute_percentage_diff("", "100") == "N/A"
    assert compute_percentage_diff("100", "0") == "N/A"
    assert compute_percentage_diff("0", "100") == "N/A"
    assert compute_percentage_diff("abc", "100") == "N/A"
    assert compute_percentage_diff("Infinity", "100") == "N/A"


def test_number_helpers():
    assert parse_report_number(" 1,234.50 ") == parse_report_number("1234.5")
    assert parse_report_number("") is None
    assert is_zero_value("0") and is_zero_value("N/A") and is_zero_value("  ") and is_zero_value("0.00")
    assert not is_zero_value("12")
    assert format_total(parse_report_number("1234")) == "1,234"
    assert format_total(parse_report_number("1234.5")) == "1,234.50"


def test_tables_and_link_tables(report):
    assert report.volume.error is None
    assert len(report.volume.rows) == 5
    assert len(report.commission.rows) == 2
    assert "AVG" in report.commission.columns

    group_c, group_u = report.link_tables
    assert group_c.heading == "Group C - CIT Table"
    assert group_u.heading == "Group U - FCB Table"
    assert [row.display_name for row in group_c.rows] == ["ACME TEXTILES, Morocco", "ANDES TRADING, Chile"]
    assert [row.display_name for row in group_u.rows] == ["PAMPAS CO, Argentina"]
    assert list(group_c.columns) == [
        "CURR MO VOLUME",
        "LY SAME MO VOLUME",
        "MTD % DIFF",
        "CURR YTD VOLUME",
        "YTD LAST YR VOLUME",
        "YTD % DIFF",
        "TOTAL LAST YR VOLUME",
    ]
    assert list(group_c.rows[0].values) == ["1,200", "1,000", "20%", "3,000", "2,000", "50%", "10,000"]
    assert list(group_c.rows[1].values) == ["500.50", "0", "N/A", "500.50", "0", "N/A", "0"]
    assert list(group_c.totals) == ["1,700.50", "1,000", "", "3,500.50", "2,000", "", "10,000"]
    assert list(group_u.totals) == ["300", "600", "", "900", "900", "", "1,000"]


def test_unknown_client_code_and_empty_group():
    rows = [ReportRow(group="C", code="zz99", name="NEW CLIENT", values={"CURR MO": "5", "LY SAME MO": "4"})]

    group_c, group_u = build_link_tables(rows, COUNTRIES)

    assert group_c.rows[0].display_name == "NEW CLIENT, Unknown Country"
    assert group_c.rows[0].values[2] == "25%"
    assert group_u.rows == ()
    assert group_u.totals == ()


def test_mismatched_upload_is_rejected(volume_report_text, commission_report_text):
    use_case = BuildMonthlyReportUseCase(client_countries=COUNTRIES)

    with pytest.raises(UnrecognizedReportType) as excinfo:
        use_case.execute(
            make_document("commission.txt", commission_report_text),
            make_document("volume.txt", volume_report_text),
        )

    assert str(excinfo.value) == "The file 'commission.txt' is not a valid Volume report (detected: Commission)"


def test_missing_header_surfaces_as_table_error(volume_report_text, commission_report_text):
    broken = volume_report_text.replace("TOTAL LAST YR", "GRAND TOTAL")
    use_case = BuildMonthlyReportUseCase(client_countries=COUNTRIES)

    report = use_case.execute(make_document("volume.txt", broken), make_document("commission.txt", commission_report_text))

    assert report.volume.error is not None
    assert report.volume.rows == ()
    assert report.link_tables == ()
    assert report.commission.error is None


def test_missing_anchor_surfaces_as_table_error(volume_report_text, commission_report_text):
    lines = commission_report_text.split("\r\n")
    lines[8] = "   no client code on this line"
    use_case = BuildMonthlyReportUseCase(client_countries=COUNTRIES)

    report = use_case.execute(
        make_document("volume.txt", volume_report_text),
        make_document("commission.txt", "\r\n".join(lines)),
    )

    assert "header row 5" in report.commission.error
    assert report.commission.rows == ()
    assert len(report.link_tables) == 2


def test_renderers(report):
    volume_page = monthly_report.render_volume_page(report)
    commission_page = monthly_report.render_commission_page(report)
    frame = monthly_report.link_table_to_dataframe(report.link_tables[0])

    assert volume_page.startswith("<!DOCTYPE html>")
    assert "Group C - CIT Table" in volume_page and "ACME TEXTILES, Morocco" in volume_page
    assert "<th>TOTAL</th>" in volume_page
    assert "Commission Report" in commission_page and "2.50" in commission_page
    assert list(frame.iloc[-1]) == ["TOTAL", "1,700.50", "1,000", "", "3,500.50", "2,000", "", "10,000"]
    assert list(monthly_report.report_table_to_dataframe(report.volume).columns[:3]) == ["Group", "Code", "Client Name"]


def test_workbook_is_xlsx(report):
    data = monthly_report.build_workbook(report)

    assert data[:2] == b"PK"
