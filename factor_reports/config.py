"""Central configuration for the factor reports package."""
from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from pathlib import Path

REFERENCE_CURRENCY = "USD"

# Requests at or below this converted amount always route to the default desk.
ROUTING_AMOUNT_THRESHOLD = Decimal("500000")

# Fixed-width report layout.
DATA_COLUMN_WIDTH = 15
DATA_LINE_OFFSET = 4

BASE_DIR = Path(__file__).resolve().parent.parent
CLIENT_COUNTRY_OVERRIDE_PATH = BASE_DIR / "client_country_override.json"


@dataclass(slots=True, frozen=True)
class Settings:
    reference_currency: str
    routing_amount_threshold: Decimal
    data_column_width: int
    data_line_offset: int
    unparsable_date: date
    default_credit_manager: str
    default_account_executive: str
    log_level: str
    client_country_override_path: Path


SETTINGS = Settings(
    reference_currency=REFERENCE_CURRENCY,
    routing_amount_threshold=ROUTING_AMOUNT_THRESHOLD,
    data_column_width=DATA_COLUMN_WIDTH,
    data_line_offset=DATA_LINE_OFFSET,
    unparsable_date=date(1970, 1, 1),
    default_credit_manager="bost",
    # Single space so pasted rows line up with the legacy audit sheet.
    default_account_executive=" ",
    log_level=os.getenv("FACTOR_REPORTS_LOG_LEVEL", "WARNING").upper(),
    client_country_override_path=CLIENT_COUNTRY_OVERRIDE_PATH,
)
