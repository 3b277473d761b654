"""Domain model entities for pricedesk.

These are pure data classes describing a unit's pricing: the inputs an
operator edits, the breakdown derived from them and the values handed on to
document generation. Nothing here computes a breakdown; see
``pricedesk.domain.installments`` for that.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, ROUND_CEILING, ROUND_HALF_UP
from enum import Enum
from typing import Mapping, Optional

CENT = Decimal("0.01")


def quantize_money(value: Decimal) -> Decimal:
    """Round a money value to two decimal places."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


class Track(Enum):
    """Payment cadence contributing installments to the final price."""

    ANNUAL = "ANNUAL"
    QUARTERLY = "QUARTERLY"
    MONTHLY = "MONTHLY"

    @property
    def period_months(self) -> int:
        return _PERIOD_MONTHS[self]

    @property
    def label(self) -> str:
        """Arabic label used on printed schedules."""
        return _LABELS[self]

    @classmethod
    def parse(cls, value: str) -> "Track":
        """Resolve a track from its name, case-insensitively."""
        try:
            return cls[value.strip().upper()]
        except KeyError:
            choices = ", ".join(t.name.lower() for t in cls)
            raise ValueError(
                f"Unknown track '{value}'. Expected one of: {choices}"
            ) from None


_PERIOD_MONTHS = {Track.ANNUAL: 12, Track.QUARTERLY: 3, Track.MONTHLY: 1}
_LABELS = {Track.ANNUAL: "سنوي", Track.QUARTERLY: "ربع سنوي", Track.MONTHLY: "شهري"}

# Display and computation order. MONTHLY is last because it is the residual.
TRACK_ORDER = (Track.ANNUAL, Track.QUARTERLY, Track.MONTHLY)
FIXED_TRACKS = (Track.ANNUAL, Track.QUARTERLY)


class ExpenseKind(Enum):
    """How an additional expense value is interpreted."""

    PERCENTAGE = "PERCENTAGE"
    FIXED_VALUE = "FIXED_VALUE"


@dataclass(frozen=True)
class TrackBreakdown:
    """Installment count and per-installment amount for one track."""

    track: Track
    count: int
    amount: Decimal

    @property
    def total(self) -> Decimal:
        return self.amount * self.count


@dataclass(frozen=True)
class PricingInputs:
    """Immutable snapshot of everything a breakdown is computed from."""

    unit_price: Decimal
    deposit_amount: Decimal
    horizon_months: int
    cash_factor: Decimal = Decimal("1")
    reduction_factor: Decimal = Decimal("0.01")
    active_tracks: frozenset = frozenset()
    overrides: Mapping[Track, Decimal] = field(default_factory=dict)
    track_percentages: Mapping[Track, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class PricingBreakdown:
    """Derived payment breakdown for one set of pricing inputs.

    ``final_price`` is always ``deposit`` plus the sum of ``count * amount``
    over ``tracks``. ``total_repayment`` is the amortized total before it is
    split across tracks; ``divergence`` shows how far overrides moved the
    final price away from it.
    """

    deposit: Decimal
    tracks: tuple[TrackBreakdown, ...]
    final_price: Decimal
    deposit_percentage: Decimal = Decimal("0")
    cash_price: Decimal = Decimal("0")
    financed_amount: Decimal = Decimal("0")
    basic_installment: Decimal = Decimal("0")
    total_repayment: Decimal = Decimal("0")
    overridden: bool = False
    issues: tuple[str, ...] = ()

    def track(self, track: Track) -> TrackBreakdown:
        for item in self.tracks:
            if item.track is track:
                return item
        return TrackBreakdown(track=track, count=0, amount=Decimal("0"))

    @property
    def installments_total(self) -> Decimal:
        return sum((item.total for item in self.tracks), Decimal("0"))

    @property
    def amortized_price(self) -> Decimal:
        return quantize_money(self.deposit + self.total_repayment)

    @property
    def divergence(self) -> Decimal:
        return self.final_price - self.amortized_price

    @property
    def degenerate(self) -> bool:
        return bool(self.issues)


@dataclass(frozen=True)
class AdditionalExpense:
    """Project expense charged on top of the final price."""

    name: str
    kind: ExpenseKind
    value: Decimal
    is_active: bool = True

    def amount_for(self, unit_price: Decimal) -> Decimal:
        if self.kind is ExpenseKind.PERCENTAGE:
            return quantize_money(unit_price * self.value / 100)
        return quantize_money(self.value)


@dataclass(frozen=True)
class ProjectTerms:
    """Project-level pricing constants shared by every unit in a project."""

    cash_factor: Decimal = Decimal("1")
    reduction_factor: Decimal = Decimal("0.01")
    deposit_percentage: Decimal = Decimal("10")
    track_percentages: Mapping[Track, Decimal] = field(default_factory=dict)
    installment_options: frozenset = frozenset(TRACK_ORDER)
    additional_expenses: tuple[AdditionalExpense, ...] = ()

    def default_deposit(self, unit_price: Decimal) -> Decimal:
        """Suggested deposit, rounded up to a whole currency unit."""
        return (unit_price * self.deposit_percentage / 100).quantize(
            Decimal("1"), rounding=ROUND_CEILING
        )

    def offers(self, track: Track) -> bool:
        return track is Track.MONTHLY or track in self.installment_options


@dataclass(frozen=True)
class ScheduledInstallment:
    """Single dated row of a seeded payment schedule."""

    due_date: date
    track: Track
    amount: Decimal
    cheque_number: Optional[str]


@dataclass(frozen=True)
class AmountLine:
    """Money value paired with its legal words rendering."""

    label: str
    amount: Decimal
    words: str


@dataclass(frozen=True)
class PriceQuote:
    """Breakdown plus expenses, ready for document generation."""

    breakdown: PricingBreakdown
    expenses: tuple[AmountLine, ...]
    expenses_total: Decimal
    grand_total: Decimal
    lines: tuple[AmountLine, ...]
