"""Business lookup collaborators consumed by the credit-log combiner."""
from __future__ import annotations

from typing import Protocol

from .models import ConvertedAmount


class BusinessLookups(Protocol):
    def resolve_country(self, code: str) -> str:
        ...

    def resolve_routing_manager(self, country_code: str, amount: ConvertedAmount, partner_name: str) -> str:
        ...

    def resolve_account_executive(self, country_code: str, partner_name: str) -> str:
        ...
