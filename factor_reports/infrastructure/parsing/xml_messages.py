"""lxml decoder turning factoring network XML into ``Message`` records.

Sections and fields are looked up as the first descendant element with the
given local name, so documents with or without a default namespace decode the
same way. Every message kind requires ``MsgInfo``, ``EF``, ``IF`` and
``Seller`` plus its own detail sections; optional sections never decode to
``None``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable, Sequence

from lxml import etree

from factor_reports.domain.errors import MalformedDocument, MalformedMessage
from factor_reports.domain.messages import (
    ABSENT,
    Buyer,
    CreditAssessmentRequest,
    CreditCoverDetails,
    CreditCoverRequest,
    CreditCoverUpdate,
    CurrentCreditCoverDetails,
    Factor,
    Message,
    MessageKind,
    MsgInfo,
    NewCreditCoverDetails,
    OptionalSection,
    Payload,
    PrelCreditAssessDetails,
    Seller,
    SellerAgreement,
    SellerDetails,
)
from factor_reports.infrastructure.parsing.utils import parse_number

logger = logging.getLogger(__name__)

COMMON_SECTIONS = ("MsgInfo", "EF", "IF", "Seller")

REQUIRED_SECTIONS: dict[MessageKind, tuple[str, ...]] = {
    MessageKind.SELLER_AGREEMENT: COMMON_SECTIONS + ("SellerDetails",),
    MessageKind.CREDIT_ASSESSMENT_REQUEST: COMMON_SECTIONS + ("Buyer", "PrelCreditAssessDetails"),
    MessageKind.CREDIT_COVER_REQUEST: COMMON_SECTIONS + ("Buyer", "CreditCoverDetails"),
    MessageKind.CREDIT_COVER_UPDATE: COMMON_SECTIONS
    + ("Buyer", "CurrentCreditCoverDetails", "NewCreditCoverDetails"),
}

_MESSAGE_XPATH = "descendant-or-self::*[{}]".format(
    " or ".join(f"local-name()='{kind.value}'" for kind in MessageKind)
)


def find_element(element: etree._Element, tag: str) -> etree._Element | None:
    matches = element.xpath(".//*[local-name()=$tag]", tag=tag)
    return matches[0] if matches else None


def element_text(element: etree._Element, tag: str) -> str | None:
    node = find_element(element, tag)
    if node is None:
        return None
    return "".join(node.itertext()).strip()


def element_number(element: etree._Element, tag: str) -> Decimal | None:
    return parse_number(element_text(element, tag))


def optional_section(element: etree._Element, tag: str) -> OptionalSection:
    node = find_element(element, tag)
    if node is None:
        return ABSENT
    fields = {
        etree.QName(child).localname: "".join(child.itertext()).strip()
        for child in node
        if isinstance(child.tag, str)
    }
    return OptionalSection(present=True, fields=fields)


def _decode_seller_agreement(root: etree._Element, sections: dict[str, etree._Element]) -> Payload:
    details = sections["SellerDetails"]
    return SellerAgreement(
        msg_date=element_text(root, "MsgDate"),
        msg_function=element_number(root, "MsgFunction"),
        fact_agreem_signed=element_text(root, "FactAgreemSigned"),
        seller_details=SellerDetails(
            business_product=element_text(details, "BusinessProduct"),
            net_pmt_terms=element_number(details, "NetPmtTerms"),
            discount1_days=element_number(details, "Discount1Days"),
            discount2_days=element_number(details, "Discount2Days"),
            grace_period=element_number(details, "GracePeriod"),
            inv_currency1=element_text(details, "InvCurrency1"),
            charge_back_perc=element_number(details, "ChargeBackPerc"),
            charge_back_amt=element_number(details, "ChargeBackAmt"),
            charge_back_currency=element_text(details, "ChargeBackCurrency"),
            exp_tot_seller_turnover=element_number(details, "ExpTotSellerTurnover"),
            exp_nr_buyers=element_number(details, "ExpNrBuyers"),
            exp_nr_invoices=element_number(details, "ExpNrInvoices"),
            exp_nr_credit_notes=element_number(details, "ExpNrCreditNotes"),
            exp_turnover=element_number(details, "ExpTurnover"),
            exp_other_turnover=element_number(details, "ExpOtherTurnover"),
            other_factors=element_number(details, "OtherFactors"),
            service_required=element_number(details, "ServiceRequired"),
        ),
        bank_details_seller=optional_section(root, "BankDetailsSeller"),
    )


def _decode_buyer(buyer: etree._Element) -> Buyer:
    return Buyer(
        buyer_nr=element_text(buyer, "BuyerNr"),
        buyer_name=element_text(buyer, "BuyerName"),
        buyer_company_reg_nr=element_number(buyer, "BuyerCompanyRegNr"),
        street=element_text(buyer, "Street"),
        city=element_text(buyer, "City"),
        state=element_text(buyer, "State"),
        postcode=element_text(buyer, "Postcode"),
        country=element_text(buyer, "Country"),
        direct_contact=element_number(buyer, "DirectContact"),
        telephone=element_text(buyer, "Telephone"),
    )


def _decode_assessment_request(root: etree._Element, sections: dict[str, etree._Element]) -> Payload:
    details = sections["PrelCreditAssessDetails"]
    return CreditAssessmentRequest(
        request_date=element_text(root, "RequestDate"),
        request_nr=element_text(root, "RequestNr"),
        msg_function=element_number(root, "MsgFunction"),
        buyer=_decode_buyer(sections["Buyer"]),
        details=PrelCreditAssessDetails(
            amt_credit_assess_req=element_number(details, "AmtCreditAssessReq"),
            currency=element_text(details, "Currency"),
            net_pmt_terms=element_number(details, "NetPmtTerms"),
            discount1_days=element_number(details, "Discount1Days"),
            discount2_days=element_number(details, "Discount2Days"),
        ),
        bank_details_buyer=optional_section(root, "BankDetailsBuyer"),
    )


def _decode_cover_request(root: etree._Element, sections: dict[str, etree._Element]) -> Payload:
    details = sections["CreditCoverDetails"]
    return CreditCoverRequest(
        request_date=element_text(root, "RequestDate"),
        request_nr=element_text(root, "RequestNr"),
        msg_function=element_number(root, "MsgFunction"),
        buyer=_decode_buyer(sections["Buyer"]),
        details=CreditCoverDetails(
            request=element_number(details, "Request"),
            new_credit_cover_amt=element_number(details, "NewCreditCoverAmt"),
            currency=element_text(details, "Currency"),
            own_risk_amt=element_number(details, "OwnRiskAmt"),
            own_risk_perc=element_number(details, "OwnRiskPerc"),
            net_pmt_terms=element_number(details, "NetPmtTerms"),
            discount1_days=element_number(details, "Discount1Days"),
            discount1_perc=element_number(details, "Discount1Perc"),
            discount2_days=element_number(details, "Discount2Days"),
            discount2_perc=element_number(details, "Discount2Perc"),
            order_nr=element_number(details, "OrderNr"),
        ),
        bank_details_buyer=optional_section(root, "BankDetailsBuyer"),
    )


def _decode_cover_update(root: etree._Element, sections: dict[str, etree._Element]) -> Payload:
    current = sections["CurrentCreditCoverDetails"]
    new = sections["NewCreditCoverDetails"]
    return CreditCoverUpdate(
        request_date=element_text(root, "RequestDate"),
        request_nr=element_text(root, "RequestNr"),
        msg_function=element_number(root, "MsgFunction"),
        buyer=_decode_buyer(sections["Buyer"]),
        current_details=CurrentCreditCoverDetails(
            current_credit_cover_amt=element_number(current, "CurrentCreditCoverAmt"),
            currency=element_text(current, "Currency"),
        ),
        new_details=NewCreditCoverDetails(
            request=element_number(new, "Request"),
            new_credit_cover_amt=element_number(new, "NewCreditCoverAmt"),
            valid_from=element_text(new, "ValidFrom"),
            long_credit_period_days=element_number(new, "LongCreditPeriodDays"),
        ),
        own_risk_new_credit_cover=optional_section(root, "OwnRiskNewCreditCover"),
    )


PAYLOAD_DECODERS: dict[MessageKind, Callable[[etree._Element, dict[str, etree._Element]], Payload]] = {
    MessageKind.SELLER_AGREEMENT: _decode_seller_agreement,
    MessageKind.CREDIT_ASSESSMENT_REQUEST: _decode_assessment_request,
    MessageKind.CREDIT_COVER_REQUEST: _decode_cover_request,
    MessageKind.CREDIT_COVER_UPDATE: _decode_cover_update,
}


def decode_message(root: etree._Element, kind: MessageKind, source: str | None = None) -> Message:
    """Decode one message element; raises ``MalformedMessage`` on a missing section."""
    sections: dict[str, etree._Element] = {}
    for tag in REQUIRED_SECTIONS[kind]:
        node = find_element(root, tag)
        if node is None:
            raise MalformedMessage(kind.value, tag)
        sections[tag] = node

    msg_info = sections["MsgInfo"]
    seller = sections["Seller"]
    return Message(
        kind=kind,
        msg_info=MsgInfo(
            sender_code=element_text(msg_info, "SenderCode"),
            receiver_code=element_text(msg_info, "ReceiverCode"),
            created_by=element_text(msg_info, "CreatedBy"),
            sequence_nr=element_number(msg_info, "SequenceNr"),
            date_time=element_text(msg_info, "DateTime"),
            status=element_number(msg_info, "Status"),
        ),
        export_factor=_decode_factor(sections["EF"]),
        import_factor=_decode_factor(sections["IF"]),
        seller=Seller(
            seller_nr=element_text(seller, "SellerNr"),
            seller_name=element_text(seller, "SellerName"),
            name_cont=element_text(seller, "NameCont"),
            street=element_text(seller, "Street"),
            city=element_text(seller, "City"),
            state=element_text(seller, "State"),
            postcode=element_text(seller, "Postcode"),
            country=element_text(seller, "Country"),
        ),
        payload=PAYLOAD_DECODERS[kind](root, sections),
        msg_text=element_text(root, "MsgText") or "",
        source=source,
    )


def _decode_factor(element: etree._Element) -> Factor:
    return Factor(
        factor_code=element_text(element, "FactorCode"),
        factor_name=element_text(element, "FactorName"),
    )


@dataclass(frozen=True)
class SkippedItem:
    source: str
    kind: str | None
    reason: str


@dataclass(frozen=True)
class DocumentDecodeResult:
    name: str
    messages: Sequence[Message] = field(default_factory=tuple)
    skipped: Sequence[SkippedItem] = field(default_factory=tuple)


def parse_xml(text: str, name: str) -> etree._Element:
    parser = etree.XMLParser(recover=True, huge_tree=True, encoding="utf-8")
    try:
        root = etree.fromstring(text.encode("utf-8"), parser)
    except etree.XMLSyntaxError as exc:
        raise MalformedDocument(name, str(exc)) from exc
    if root is None:
        raise MalformedDocument(name, "no XML content")
    return root


def decode_document(text: str, name: str) -> DocumentDecodeResult:
    """Decode every MSG01/MSG02/MSG05/MSG07 element of one XML document."""
    root = parse_xml(text, name)
    messages: list[Message] = []
    skipped: list[SkippedItem] = []
    for node in root.xpath(_MESSAGE_XPATH):
        kind = MessageKind(etree.QName(node).localname)
        try:
            messages.append(decode_message(node, kind, source=name))
        except MalformedMessage as exc:
            logger.error("Error parsing %s from file %s: %s", kind.value, name, exc)
            skipped.append(SkippedItem(source=name, kind=kind.value, reason=str(exc)))
    logger.debug("Decoded %d message(s) from %s", len(messages), name)
    return DocumentDecodeResult(name=name, messages=tuple(messages), skipped=tuple(skipped))
