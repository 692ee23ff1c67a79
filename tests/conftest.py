"""
Pytest fixtures: builders for factoring XML messages and fixed-width reports.
"""
from __future__ import annotations

import pytest


class XmlBuilder:
    """Builds message elements and whole documents as XML text."""

    def msg_info(self, sender: str = "F1", sequence_nr: str = "101", date_time: str = "2024-03-05T09:15:00") -> str:
        return (
            "<MsgInfo>"
            f"<SenderCode>{sender}</SenderCode><ReceiverCode>R1</ReceiverCode>"
            "<CreatedBy>ops</CreatedBy>"
            f"<SequenceNr>{sequence_nr}</SequenceNr><DateTime>{date_time}</DateTime>"
            "<Status>1</Status>"
            "</MsgInfo>"
        )

    def factors(self, ef_code: str = "TR001", ef_name: str = "Anatolia Factoring") -> str:
        return (
            f"<EF><FactorCode>{ef_code}</FactorCode><FactorName>{ef_name}</FactorName></EF>"
            "<IF><FactorCode>US100</FactorCode><FactorName>Home Factor</FactorName></IF>"
        )

    def seller(self, seller_nr: str = "S9", name: str = "Seller Mills") -> str:
        return (
            "<Seller>"
            f"<SellerNr>{seller_nr}</SellerNr><SellerName>{name}</SellerName>"
            "<Street>1 Loom St</Street><City>Izmir</City><Postcode>35000</Postcode><Country>TR</Country>"
            "</Seller>"
        )

    def buyer(self, name: str = "Buyer Inc", country: str = "DE", direct_contact: str = "1") -> str:
        return (
            "<Buyer>"
            f"<BuyerNr>B1</BuyerNr><BuyerName>{name}</BuyerName>"
            "<Street>2 Market Rd</Street><City>Hamburg</City><Postcode>20095</Postcode>"
            f"<Country>{country}</Country><DirectContact>{direct_contact}</DirectContact>"
            "<Telephone>+49 40 1234</Telephone>"
            "</Buyer>"
        )

    def header(self, sender: str, seller_nr: str, ef_code: str, ef_name: str, sequence_nr: str, date_time: str) -> str:
        return (
            self.msg_info(sender=sender, sequence_nr=sequence_nr, date_time=date_time)
            + self.factors(ef_code=ef_code, ef_name=ef_name)
            + self.seller(seller_nr=seller_nr)
        )

    def msg01(
        self,
        sender: str = "F1",
        seller_nr: str = "S9",
        business_product: str = "Denim fabric",
        bank_details: bool = False,
    ) -> str:
        bank = "<BankDetailsSeller><BankName>Ziraat</BankName><Iban>TR00 0001</Iban></BankDetailsSeller>" if bank_details else ""
        return (
            "<MSG01>"
            + self.header(sender, seller_nr, "TR001", "Anatolia Factoring", "1", "2024-01-02T08:00:00")
            + "<MsgDate>2024-01-02</MsgDate><MsgFunction>1</MsgFunction><FactAgreemSigned>2023-12-20</FactAgreemSigned>"
            + "<SellerDetails>"
            + f"<BusinessProduct>{business_product}</BusinessProduct><NetPmtTerms>60</NetPmtTerms>"
            + "<InvCurrency1>EUR</InvCurrency1><ExpTurnover>1500000</ExpTurnover>"
            + "</SellerDetails>"
            + bank
            + "</MSG01>"
        )

    def msg02(
        self,
        amount: str = "250000",
        currency: str = "USD",
        sender: str = "F1",
        seller_nr: str = "S9",
        ef_code: str = "TR001",
        ef_name: str = "Anatolia Factoring",
        sequence_nr: str = "102",
        date_time: str = "2024-03-05T09:15:00",
        direct_contact: str = "1",
        bank_details: str | None = None,
    ) -> str:
        bank = "" if bank_details is None else f"<BankDetailsBuyer>{bank_details}</BankDetailsBuyer>"
        return (
            "<MSG02>"
            + self.header(sender, seller_nr, ef_code, ef_name, sequence_nr, date_time)
            + "<RequestDate>2024-03-04</RequestDate><RequestNr>RQ-2</RequestNr><MsgFunction>1</MsgFunction>"
            + self.buyer(direct_contact=direct_contact)
            + "<PrelCreditAssessDetails>"
            + f"<AmtCreditAssessReq>{amount}</AmtCreditAssessReq><Currency>{currency}</Currency>"
            + "<NetPmtTerms>90</NetPmtTerms>"
            + "</PrelCreditAssessDetails>"
            + bank
            + "</MSG02>"
        )

    def msg05(
        self,
        amount: str = "800000",
        currency: str = "USD",
        sender: str = "F1",
        seller_nr: str = "S9",
        ef_code: str = "TR001",
        ef_name: str = "Anatolia Factoring",
        sequence_nr: str = "105",
        date_time: str = "2024-03-06T11:00:00",
        msg_text: str = "",
    ) -> str:
        text = f"<MsgText>{msg_text}</MsgText>" if msg_text else ""
        return (
            "<MSG05>"
            + self.header(sender, seller_nr, ef_code, ef_name, sequence_nr, date_time)
            + "<RequestDate>2024-03-05</RequestDate><RequestNr>RQ-5</RequestNr><MsgFunction>1</MsgFunction>"
            + self.buyer(direct_contact="0")
            + "<CreditCoverDetails>"
            + f"<Request>1</Request><NewCreditCoverAmt>{amount}</NewCreditCoverAmt><Currency>{currency}</Currency>"
            + "<NetPmtTerms>60</NetPmtTerms><Discount1Days>10</Discount1Days><Discount1Perc>2</Discount1Perc>"
            + "</CreditCoverDetails>"
            + text
            + "</MSG05>"
        )

    def msg07(
        self,
        amount: str = "600000",
        currency: str = "EUR",
        sender: str = "F1",
        seller_nr: str = "S9",
        ef_code: str = "TR001",
        ef_name: str = "Anatolia Factoring",
        sequence_nr: str = "107",
        date_time: str = "2024-03-01T16:30:00",
        own_risk: bool = False,
    ) -> str:
        risk = "<OwnRiskNewCreditCover><OwnRiskAmt>5000</OwnRiskAmt></OwnRiskNewCreditCover>" if own_risk else ""
        return (
            "<MSG07>"
            + self.header(sender, seller_nr, ef_code, ef_name, sequence_nr, date_time)
            + "<RequestDate>2024-02-29</RequestDate><RequestNr>RQ-7</RequestNr><MsgFunction>2</MsgFunction>"
            + self.buyer()
            + "<CurrentCreditCoverDetails>"
            + f"<CurrentCreditCoverAmt>400000</CurrentCreditCoverAmt><Currency>{currency}</Currency>"
            + "</CurrentCreditCoverDetails>"
            + "<NewCreditCoverDetails>"
            + f"<Request>1</Request><NewCreditCoverAmt>{amount}</NewCreditCoverAmt>"
            + "<ValidFrom>2024-03-01</ValidFrom><LongCreditPeriodDays>120</LongCreditPeriodDays>"
            + "</NewCreditCoverDetails>"
            + risk
            + "</MSG07>"
        )

    def document(self, *messages: str, namespace: str | None = None, encoding: str | None = "UTF-8") -> bytes:
        declaration = f'<?xml version="1.0" encoding="{encoding}"?>' if encoding else ""
        xmlns = f' xmlns="{namespace}"' if namespace else ""
        text = f"{declaration}<Messages{xmlns}>{''.join(messages)}</Messages>"
        return text.encode(encoding or "utf-8")


@pytest.fixture
def xml_builder() -> XmlBuilder:
    return XmlBuilder()


def place(*cells: tuple[int, str]) -> str:
    """Lay out ``(offset, text)`` cells on one fixed-width line."""
    line = ""
    for offset, text in cells:
        line = line.ljust(offset) + text
    return line


CURR_MO, LY_SAME_MO, CURR_YTD, YTD_LAST_YR, TOTAL_LAST_YR, SLOT_6, SLOT_7, SLOT_8 = 30, 45, 60, 75, 90, 105, 120, 135


def _header_lines(title: str, with_avg: bool) -> list[str]:
    header = place(
        (2, "CLNT"),
        (CURR_MO, "CURR MO"),
        (LY_SAME_MO, "LY SAME MO"),
        (CURR_YTD, "CURR YTD"),
        (YTD_LAST_YR, "YTD LAST YR"),
        (TOTAL_LAST_YR, "TOTAL LAST YR"),
        *(((SLOT_6, "AVG"),) if with_avg else ()),
    )
    diffs = ((SLOT_7, "MTD % DIFF"), (SLOT_8, "YTD % DIFF")) if with_avg else ((SLOT_6, "MTD % DIFF"), (SLOT_7, "YTD % DIFF"))
    return [
        "RUN DATE 04/01/24                 FACTORING SERVICES",
        "PAGE    1\f",
        f"          {title}",
        "",
        header,
        place(*diffs),
        "-" * 150,
        "",
    ]


def _row(group: str, code: str, name: str, values: tuple[str, ...]) -> str:
    offsets = (CURR_MO, LY_SAME_MO, CURR_YTD, YTD_LAST_YR, TOTAL_LAST_YR, SLOT_6, SLOT_7, SLOT_8)
    return place((0, group), (2, code), (7, name), *zip(offsets, values))


VOLUME_ROWS = (
    ("C", "01A2", "ACME TEXTILES", ("1,200", "1,000", "3,000", "2,000", "10,000", "99%", "1%")),
    ("C", "0146", "ANDES TRADING", ("500.50", "0", "500.50", "", "0")),
    ("U", "01H2", "PAMPAS CO", ("300", "600", "900", "900", "1,000")),
    ("C", "9ZZZ", "DORMANT LTD", ("0", "", "0", "0", "")),
    ("X", "1234", "OTHER GROUP", ("10", "20", "30", "40", "50")),
)

COMMISSION_ROWS = (
    ("C", "01A2", "ACME TEXTILES", ("12.00", "10.00", "30.00", "20.00", "100.00", "2.50")),
    ("U", "01H2", "PAMPAS CO", ("3.00", "6.00", "9.00", "9.00", "10.00", "0.75")),
)


def build_report(title: str, rows, with_avg: bool, subtotal: str = "CC") -> str:
    lines = _header_lines(title, with_avg)
    lines.extend(_row(*row) for row in rows)
    lines.append(place((0, subtotal), (7, "GROUP TOTAL"), (CURR_MO, "2,000.50")))
    lines.append("")
    return "\r\n".join(lines)


@pytest.fixture
def volume_report_text() -> str:
    return build_report("MONTHLY CLIENT VOLUME REPORT", VOLUME_ROWS, with_avg=False)


@pytest.fixture
def commission_report_text() -> str:
    return build_report("MONTHLY CLIENT COMMISSION REPORT", COMMISSION_ROWS, with_avg=True)
