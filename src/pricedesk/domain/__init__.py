"""Domain layer for pricedesk application."""

from pricedesk.domain.installments import compute_breakdown, ensure_schedule
from pricedesk.domain.numerals import to_number, to_words
from pricedesk.domain.quote import build_quote
from pricedesk.domain.schedule import seed_schedule
from pricedesk.domain.session import PricingSession

__all__ = [
    "compute_breakdown",
    "ensure_schedule",
    "to_number",
    "to_words",
    "build_quote",
    "seed_schedule",
    "PricingSession",
]
