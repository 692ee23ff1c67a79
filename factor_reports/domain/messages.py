"""Factoring network messages.

A message is one frozen ``Message`` carrying a ``MessageKind`` tag and a
kind-specific payload. Every kind shares the ``MsgInfo`` header and the
export/import factor pair.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Mapping, Union


class MessageKind(str, Enum):
    SELLER_AGREEMENT = "MSG01"
    CREDIT_ASSESSMENT_REQUEST = "MSG02"
    CREDIT_COVER_REQUEST = "MSG05"
    CREDIT_COVER_UPDATE = "MSG07"

    @property
    def type_digit(self) -> str:
        return self.value[-1]


TRANSACTIONAL_KINDS = (
    MessageKind.CREDIT_ASSESSMENT_REQUEST,
    MessageKind.CREDIT_COVER_REQUEST,
    MessageKind.CREDIT_COVER_UPDATE,
)


@dataclass(frozen=True)
class MsgInfo:
    sender_code: str | None
    receiver_code: str | None
    created_by: str | None
    sequence_nr: Decimal | None
    date_time: str | None
    status: Decimal | None


@dataclass(frozen=True)
class Factor:
    factor_code: str | None
    factor_name: str | None


@dataclass(frozen=True)
class OptionalSection:
    """Optional XML section: empty when present but unpopulated, ``ABSENT`` when missing."""

    present: bool
    fields: Mapping[str, str] = field(default_factory=dict)


ABSENT = OptionalSection(present=False)


@dataclass(frozen=True)
class Seller:
    seller_nr: str | None
    seller_name: str | None
    name_cont: str | None = None
    street: str | None = None
    city: str | None = None
    state: str | None = None
    postcode: str | None = None
    country: str | None = None


@dataclass(frozen=True)
class SellerDetails:
    business_product: str | None
    net_pmt_terms: Decimal | None
    discount1_days: Decimal | None
    discount2_days: Decimal | None
    grace_period: Decimal | None
    inv_currency1: str | None
    charge_back_perc: Decimal | None
    charge_back_amt: Decimal | None
    charge_back_currency: str | None
    exp_tot_seller_turnover: Decimal | None
    exp_nr_buyers: Decimal | None
    exp_nr_invoices: Decimal | None
    exp_nr_credit_notes: Decimal | None
    exp_turnover: Decimal | None
    exp_other_turnover: Decimal | None
    other_factors: Decimal | None
    service_required: Decimal | None


@dataclass(frozen=True)
class Buyer:
    buyer_nr: str | None
    buyer_name: str | None
    buyer_company_reg_nr: Decimal | None = None
    street: str | None = None
    city: str | None = None
    state: str | None = None
    postcode: str | None = None
    country: str | None = None
    direct_contact: Decimal | None = None
    telephone: str | None = None


@dataclass(frozen=True)
class PrelCreditAssessDetails:
    amt_credit_assess_req: Decimal | None
    currency: str | None
    net_pmt_terms: Decimal | None
    discount1_days: Decimal | None
    discount2_days: Decimal | None


@dataclass(frozen=True)
class CreditCoverDetails:
    request: Decimal | None
    new_credit_cover_amt: Decimal | None
    currency: str | None
    own_risk_amt: Decimal | None
    own_risk_perc: Decimal | None
    net_pmt_terms: Decimal | None
    discount1_days: Decimal | None
    discount1_perc: Decimal | None
    discount2_days: Decimal | None
    discount2_perc: Decimal | None
    order_nr: Decimal | None


@dataclass(frozen=True)
class CurrentCreditCoverDetails:
    current_credit_cover_amt: Decimal | None
    currency: str | None


@dataclass(frozen=True)
class NewCreditCoverDetails:
    request: Decimal | None
    new_credit_cover_amt: Decimal | None
    valid_from: str | None
    long_credit_period_days: Decimal | None


@dataclass(frozen=True)
class SellerAgreement:
    msg_date: str | None
    msg_function: Decimal | None
    fact_agreem_signed: str | None
    seller_details: SellerDetails
    bank_details_seller: OptionalSection = ABSENT


@dataclass(frozen=True)
class CreditAssessmentRequest:
    request_date: str | None
    request_nr: str | None
    msg_function: Decimal | None
    buyer: Buyer
    details: PrelCreditAssessDetails
    bank_details_buyer: OptionalSection = ABSENT


@dataclass(frozen=True)
class CreditCoverRequest:
    request_date: str | None
    request_nr: str | None
    msg_function: Decimal | None
    buyer: Buyer
    details: CreditCoverDetails
    bank_details_buyer: OptionalSection = ABSENT


@dataclass(frozen=True)
class CreditCoverUpdate:
    request_date: str | None
    request_nr: str | None
    msg_function: Decimal | None
    buyer: Buyer
    current_details: CurrentCreditCoverDetails
    new_details: NewCreditCoverDetails
    own_risk_new_credit_cover: OptionalSection = ABSENT


Payload = Union[SellerAgreement, CreditAssessmentRequest, CreditCoverRequest, CreditCoverUpdate]

JoinKey = tuple[str, str]


@dataclass(frozen=True)
class Message:
    kind: MessageKind
    msg_info: MsgInfo
    export_factor: Factor
    import_factor: Factor
    seller: Seller
    payload: Payload
    msg_text: str = ""
    source: str | None = None

    @property
    def timestamp(self) -> str | None:
        return self.msg_info.date_time

    @property
    def sender_id(self) -> str | None:
        return self.msg_info.sender_code

    def join_key(self) -> JoinKey:
        return (self.msg_info.sender_code or "", self.seller.seller_nr or "")
