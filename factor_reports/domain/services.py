"""Domain services combining factoring messages into credit-log rows."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Callable, Generator, Optional, TypeVar

from factor_reports.config import SETTINGS

from .lookups import BusinessLookups
from .messages import Message, MessageKind, Payload
from .models import ConvertedAmount, DisplayRow
from .repositories import MessageRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")

RateResolver = Callable[[str], Optional[object]]


@dataclass(frozen=True)
class RateRequest:
    """Asks the caller for units of ``currency`` per one reference-currency unit."""

    currency: str


class ExchangeRateCache:
    """Exchange rates obtained during one processing run."""

    def __init__(self) -> None:
        self._rates: dict[str, Decimal] = {}

    def get(self, currency: str) -> Decimal | None:
        return self._rates.get(currency.upper())

    def put(self, currency: str, rate: Decimal) -> None:
        self._rates[currency.upper()] = rate

    def clear(self) -> None:
        self._rates.clear()

    def __contains__(self, currency: object) -> bool:
        return isinstance(currency, str) and currency.upper() in self._rates

    def __len__(self) -> int:
        return len(self._rates)


def coerce_rate(value: object) -> Decimal | None:
    if value is None:
        return None
    try:
        rate = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation:
        return None
    if not rate.is_finite() or rate <= 0:
        return None
    return rate


def _as_decimal(amount: object) -> Decimal:
    if isinstance(amount, Decimal):
        return amount
    try:
        return Decimal(str(amount).strip())
    except InvalidOperation:
        return Decimal("NaN")


def convert_steps(
    amount: object,
    currency: str | None,
    cache: ExchangeRateCache,
    reference_currency: str = SETTINGS.reference_currency,
) -> Generator[RateRequest, object, ConvertedAmount]:
    """Convert ``amount`` to the reference currency, yielding when a rate is missing."""
    if amount is None or amount == "":
        return ""
    if not currency:
        return "N/A"
    value = _as_decimal(amount)
    if value.is_nan():
        return "Invalid Amount"
    code = currency.strip().upper()
    if code == reference_currency.upper():
        return value if isinstance(amount, str) else amount

    rate = cache.get(code)
    if rate is None:
        rate = coerce_rate((yield RateRequest(code)))
        if rate is None:
            logger.warning("Exchange rate for %s not provided; amount left unconverted", code)
            return f"{value:.2f} {code} (Rate needed)"
        cache.put(code, rate)
    return value / rate


def resolve_with(steps: Generator[RateRequest, object, T], resolve_rate: RateResolver | None) -> T:
    """Run a rate-requesting generator to completion against ``resolve_rate``."""
    try:
        request = next(steps)
        while True:
            rate = resolve_rate(request.currency) if resolve_rate is not None else None
            request = steps.send(rate)
    except StopIteration as stop:
        return stop.value


def convert_amount(
    amount: object,
    currency: str | None,
    cache: ExchangeRateCache,
    resolve_rate: RateResolver | None = None,
    reference_currency: str = SETTINGS.reference_currency,
) -> ConvertedAmount:
    return resolve_with(convert_steps(amount, currency, cache, reference_currency), resolve_rate)


@dataclass(frozen=True)
class FieldSelection:
    amount: Callable[[Payload], Decimal | None]
    currency: Callable[[Payload], str | None]
    term: Callable[[Payload], Decimal | None]
    direct_contact: Callable[[Payload], Decimal | None]


FIELD_SELECTION: dict[MessageKind, FieldSelection] = {
    MessageKind.CREDIT_ASSESSMENT_REQUEST: FieldSelection(
        amount=lambda p: p.details.amt_credit_assess_req,
        currency=lambda p: p.details.currency,
        term=lambda p: p.details.net_pmt_terms,
        direct_contact=lambda p: p.buyer.direct_contact,
    ),
    MessageKind.CREDIT_COVER_REQUEST: FieldSelection(
        amount=lambda p: p.details.new_credit_cover_amt,
        currency=lambda p: p.details.currency,
        term=lambda p: p.details.net_pmt_terms,
        direct_contact=lambda p: p.buyer.direct_contact,
    ),
    MessageKind.CREDIT_COVER_UPDATE: FieldSelection(
        amount=lambda p: p.new_details.new_credit_cover_amt,
        currency=lambda p: p.current_details.currency,
        term=lambda p: p.new_details.long_credit_period_days,
        direct_contact=lambda p: None,
    ),
}


class CreditLogCombiner:
    """Joins transactional messages with their seller agreement into display rows."""

    def __init__(
        self,
        lookups: BusinessLookups,
        rates: ExchangeRateCache,
        reference_currency: str = SETTINGS.reference_currency,
        unparsable_date: date = SETTINGS.unparsable_date,
    ) -> None:
        self._lookups = lookups
        self._rates = rates
        self._reference_currency = reference_currency
        self._unparsable_date = unparsable_date

    def combine(self, repository: MessageRepository, resolve_rate: RateResolver | None = None) -> list[DisplayRow]:
        return resolve_with(self.combine_steps(repository), resolve_rate)

    def combine_steps(self, repository: MessageRepository) -> Generator[RateRequest, object, list[DisplayRow]]:
        rows: list[DisplayRow] = []
        for message in repository.transactional():
            row = yield from self._build_row(message, repository)
            rows.append(row)
        return sorted(rows, key=self._received_on)

    def required_currencies(self, repository: MessageRepository) -> list[str]:
        """Currencies a run would ask a rate for, in the order they are met."""
        reference = self._reference_currency.upper()
        pending: list[str] = []
        for message in repository.transactional():
            selection = FIELD_SELECTION[message.kind]
            amount = selection.amount(message.payload)
            currency = selection.currency(message.payload)
            if amount is None or not currency or _as_decimal(amount).is_nan():
                continue
            code = currency.strip().upper()
            if code != reference and code not in self._rates and code not in pending:
                pending.append(code)
        return pending

    def _build_row(
        self, message: Message, repository: MessageRepository
    ) -> Generator[RateRequest, object, DisplayRow]:
        payload = message.payload
        selection = FIELD_SELECTION[message.kind]
        seller_agreement = repository.lookup_seller(*message.join_key())
        industry_product = ""
        if seller_agreement is not None:
            industry_product = seller_agreement.payload.seller_details.business_product or ""

        factor_code = message.export_factor.factor_code or ""
        partner_name = message.export_factor.factor_name or ""
        country_code = factor_code[:2]
        partner_country = self._lookups.resolve_country(country_code) if country_code else ""

        amount = selection.amount(payload)
        currency = selection.currency(payload) or ""
        converted = yield from convert_steps(amount, currency, self._rates, self._reference_currency)

        return DisplayRow(
            sequence_nr=message.msg_info.sequence_nr,
            request_date=payload.request_date or "",
            date_received=(message.msg_info.date_time or "")[:10],
            buyer_name=payload.buyer.buyer_name or "",
            buyer_country=payload.buyer.country or "",
            seller_name=message.seller.seller_name or "",
            seller_country=partner_country,
            partner_name=partner_name,
            partner_country=partner_country,
            message_type=message.kind.type_digit,
            amount_requested=amount,
            currency=currency,
            term=selection.term(payload),
            contact_allowed="Yes" if selection.direct_contact(payload) == 1 else "No",
            incoming_comments=message.msg_text,
            credit_manager=self._lookups.resolve_routing_manager(country_code, converted, partner_name),
            account_executive=self._lookups.resolve_account_executive(country_code, partner_name),
            industry_product=industry_product,
            client_code=factor_code,
            amount_requested_usd=converted,
        )

    def _received_on(self, row: DisplayRow) -> date:
        try:
            return date.fromisoformat(row.date_received)
        except ValueError:
            return self._unparsable_date
