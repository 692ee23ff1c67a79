"""Static business lookups: country names and desk routing rules."""
from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Mapping, Sequence

from factor_reports.config import SETTINGS
from factor_reports.domain.models import ConvertedAmount

from .countries import country_name

NOT_AVAILABLE = "N/A"

_LEADING_NUMBER = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

MARY = "Mary Farley"
TAMMIE = "Tammie Cosey"
JAMES = "James Vuu"
TYLER = "Tyler Sigler"


@dataclass(frozen=True)
class RoutingRule:
    """Assigns ``result`` when the country and any of the partner keywords match.

    ``countries`` of ``None`` matches every country; empty ``keywords`` match
    every partner.
    """

    result: str
    countries: frozenset[str] | None = None
    keywords: tuple[str, ...] = ()

    def matches(self, country_code: str, partner_name: str) -> bool:
        if self.countries is not None and country_code not in self.countries:
            return False
        return not self.keywords or any(keyword in partner_name for keyword in self.keywords)


def _codes(*codes: str) -> frozenset[str]:
    return frozenset(codes)


# Large requests from these countries always go to trey.
TREY_COUNTRIES = _codes("AM", "EG", "GR", "IN", "MT", "RO", "TW", "TR", "VN")

# Partner names are matched case-sensitively here.
TREY_PARTNER_RULES: Sequence[RoutingRule] = (
    RoutingRule("trey", _codes("SG"), ("Mogli",)),
    RoutingRule("trey", _codes("JP"), ("Mitsubishi", "Sumitomo Mitsui")),
    RoutingRule("trey", _codes("US"), ("Standard Chartered Bank New York",)),
)

# First match wins; country and partner are compared upper-cased.
ACCOUNT_EXECUTIVE_RULES: Sequence[RoutingRule] = (
    RoutingRule(MARY, _codes("MX"), ("BANCOMEX",)),
    RoutingRule(TYLER, _codes("MX"), ("BANCO MONEX",)),
    RoutingRule(TAMMIE, _codes("IN"), ("INDIA FACTORING", "SBI GLOBAL")),
    RoutingRule(JAMES, _codes("IN"), ("ICICI BANK", "INDIA EXIM")),
    RoutingRule(TYLER, _codes("IN"), ("ECGC", "YES BANK")),
    RoutingRule(MARY, _codes("US"), ("STANDARD CHARTERED BANK NEW YORK",)),
    RoutingRule(TAMMIE, _codes("SG"), ("MOGLI LABS",)),
    RoutingRule(JAMES, _codes("SG")),
    RoutingRule(MARY, None, ("SKYTEX", "GLOBAL DENIM")),
    RoutingRule(
        MARY,
        _codes("AR", "BD", "CA", "CL", "CN", "DO", "SV", "GT", "HN", "HK", "HU", "IT", "MU", "PK", "PT", "UY"),
    ),
    RoutingRule(
        TAMMIE,
        _codes("AM", "BG", "HR", "CY", "CZ", "EG", "GR", "MT", "MA", "RS", "SK", "SI", "TN", "TR"),
    ),
    RoutingRule(JAMES, _codes("ID", "JP", "KP", "KR", "MY", "PL", "ES", "LK", "TH", "AE", "VN")),
    RoutingRule(TYLER, _codes("BR", "CO", "CR", "FR", "DE", "MD", "PE", "RO", "TW")),
)


def leading_number(value: object) -> Decimal | None:
    """Numeric prefix of an amount such as ``"1000.00 EUR (Rate needed)"``."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        return None if value.is_nan() else value
    match = _LEADING_NUMBER.match(str(value))
    if match is None:
        return None
    try:
        return Decimal(match.group(1))
    except InvalidOperation:
        return None


def first_match(rules: Sequence[RoutingRule], country_code: str, partner_name: str) -> str | None:
    for rule in rules:
        if rule.matches(country_code, partner_name):
            return rule.result
    return None


class StaticBusinessLookups:
    """``BusinessLookups`` backed by bundled tables."""

    def __init__(
        self,
        country_names: Mapping[str, str] | None = None,
        amount_threshold: Decimal = SETTINGS.routing_amount_threshold,
        trey_countries: frozenset[str] = TREY_COUNTRIES,
        trey_partner_rules: Sequence[RoutingRule] = TREY_PARTNER_RULES,
        account_executive_rules: Sequence[RoutingRule] = ACCOUNT_EXECUTIVE_RULES,
        default_credit_manager: str = SETTINGS.default_credit_manager,
        default_account_executive: str = SETTINGS.default_account_executive,
    ) -> None:
        self._country_names = country_names
        self._amount_threshold = amount_threshold
        self._trey_countries = trey_countries
        self._trey_partner_rules = trey_partner_rules
        self._account_executive_rules = account_executive_rules
        self._default_credit_manager = default_credit_manager
        self._default_account_executive = default_account_executive

    def resolve_country(self, code: str) -> str:
        if self._country_names is None:
            return country_name(code)
        return self._country_names.get(code.strip().upper(), code)

    def resolve_routing_manager(self, country_code: str, amount: ConvertedAmount, partner_name: str) -> str:
        value = leading_number(amount)
        if value is None:
            return NOT_AVAILABLE
        if value <= self._amount_threshold:
            return "lux"
        if country_code in self._trey_countries:
            return "trey"
        matched = first_match(self._trey_partner_rules, country_code, partner_name or "")
        return matched or self._default_credit_manager

    def resolve_account_executive(self, country_code: str, partner_name: str) -> str:
        matched = first_match(
            self._account_executive_rules,
            (country_code or "").upper(),
            (partner_name or "").upper(),
        )
        return matched if matched is not None else self._default_account_executive
