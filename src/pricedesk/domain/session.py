"""Live pricing session.

A session holds the current pricing inputs and the breakdown derived from
them. Every edit builds a new input snapshot and recomputes the whole
breakdown; the derived values are never patched in place.
"""

import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from pricedesk.domain.entities import (
    PriceQuote,
    PricingBreakdown,
    PricingInputs,
    ProjectTerms,
    ScheduledInstallment,
    Track,
)
from pricedesk.domain.errors import (
    DegenerateScheduleError,
    DomainError,
    InvalidInputError,
    monthly_not_overridable,
    track_not_offered,
)
from pricedesk.domain.installments import compute_breakdown, zero_breakdown
from pricedesk.domain.quote import build_quote
from pricedesk.domain.schedule import seed_schedule

logger = logging.getLogger(__name__)


class PricingSession:
    """Pricing state for one unit being quoted."""

    def __init__(
        self,
        terms: ProjectTerms,
        unit_price: Decimal,
        deposit_amount: Optional[Decimal] = None,
        horizon_months: int = 0,
        active_tracks: Iterable[Track] = (),
    ):
        """Initialize a pricing session.

        Args:
            terms: Project terms supplying factors, percentages and options
            unit_price: Cash price of the unit
            deposit_amount: Deposit; None uses the project's default deposit
            horizon_months: Repayment horizon in months
            active_tracks: Annual/quarterly tracks enabled from the start
        """
        self.terms = terms
        self.error: Optional[DomainError] = None
        self._inputs: Optional[PricingInputs] = None
        self._breakdown: Optional[PricingBreakdown] = None

        if deposit_amount is None:
            deposit_amount = self._default_deposit(unit_price)

        tracks = frozenset(t for t in active_tracks if t is not Track.MONTHLY)
        for track in tracks:
            if not terms.offers(track):
                self._reject(InvalidInputError(track_not_offered(track.name.lower())))
                tracks = tracks - {track}

        self._apply(
            PricingInputs(
                unit_price=unit_price,
                deposit_amount=deposit_amount,
                horizon_months=horizon_months,
                cash_factor=terms.cash_factor,
                reduction_factor=terms.reduction_factor,
                active_tracks=tracks,
                overrides={},
                track_percentages=dict(terms.track_percentages),
            ),
            keep_error=self.error is not None,
        )

    @property
    def inputs(self) -> PricingInputs:
        return self._inputs

    @property
    def breakdown(self) -> PricingBreakdown:
        return self._breakdown

    def set_deposit(self, amount: Optional[Decimal]) -> PricingBreakdown:
        """Change the deposit, keeping tracks and overrides.

        None restores the project's default deposit for the unit price.
        """
        if amount is None:
            amount = self._default_deposit(self._inputs.unit_price)
        return self._apply(replace(self._inputs, deposit_amount=amount))

    def set_horizon(self, months: int) -> PricingBreakdown:
        """Change the horizon; track counts follow it."""
        return self._apply(replace(self._inputs, horizon_months=months))

    def enable_track(self, track: Track) -> PricingBreakdown:
        """Activate a fixed track, seeded with its default amount."""
        if track is Track.MONTHLY or track in self._inputs.active_tracks:
            return self._breakdown
        if not self.terms.offers(track):
            return self._reject(InvalidInputError(track_not_offered(track.name.lower())))
        return self._apply(
            replace(self._inputs, active_tracks=self._inputs.active_tracks | {track})
        )

    def disable_track(self, track: Track) -> PricingBreakdown:
        """Deactivate a fixed track and drop its override."""
        if track is Track.MONTHLY:
            return self._reject(InvalidInputError("The monthly track is always active"))
        if track not in self._inputs.active_tracks:
            return self._breakdown
        overrides = {t: a for t, a in self._inputs.overrides.items() if t is not track}
        return self._apply(
            replace(
                self._inputs,
                active_tracks=self._inputs.active_tracks - {track},
                overrides=overrides,
            )
        )

    def toggle_track(self, track: Track) -> PricingBreakdown:
        if track in self._inputs.active_tracks:
            return self.disable_track(track)
        return self.enable_track(track)

    def override_amount(self, track: Track, amount: Decimal) -> PricingBreakdown:
        """Replace the per-installment amount of an active annual or quarterly track."""
        if track is Track.MONTHLY:
            return self._reject(InvalidInputError(monthly_not_overridable()))
        if track not in self._inputs.active_tracks:
            return self._reject(
                InvalidInputError(f"Track '{track.name.lower()}' is not active")
            )
        overrides = dict(self._inputs.overrides)
        overrides[track] = amount
        return self._apply(replace(self._inputs, overrides=overrides))

    def clear_override(self, track: Track) -> PricingBreakdown:
        """Return a track to its computed default amount."""
        if track not in self._inputs.overrides:
            return self._breakdown
        overrides = {t: a for t, a in self._inputs.overrides.items() if t is not track}
        return self._apply(replace(self._inputs, overrides=overrides))

    def quote(self) -> PriceQuote:
        return build_quote(
            self._breakdown, self._inputs.unit_price, self.terms.additional_expenses
        )

    def schedule(self, start_date: date, first_cheque_number: int = 1000) -> list[ScheduledInstallment]:
        return seed_schedule(self._breakdown, start_date, first_cheque_number)

    def _default_deposit(self, unit_price: Decimal) -> Decimal:
        # Non-finite prices are left for validation to reject.
        if not Decimal(unit_price).is_finite():
            return Decimal("0")
        return self.terms.default_deposit(unit_price)

    def _reject(self, error: DomainError) -> Optional[PricingBreakdown]:
        logger.info("Rejected pricing edit", extra={"error": str(error)})
        self.error = error
        return self._breakdown

    def _apply(self, inputs: PricingInputs, keep_error: bool = False) -> PricingBreakdown:
        try:
            breakdown = compute_breakdown(inputs)
        except InvalidInputError as e:
            if self._breakdown is None:
                # Nothing valid to fall back to yet.
                self._inputs = inputs
                self._breakdown = zero_breakdown()
            return self._reject(e)

        self._inputs = inputs
        self._breakdown = breakdown
        if breakdown.degenerate:
            self.error = DegenerateScheduleError(" ".join(breakdown.issues))
            logger.info("Degenerate schedule", extra={"issues": list(breakdown.issues)})
        elif not keep_error:
            self.error = None
        logger.debug(
            "Recomputed pricing session",
            extra={"final_price": str(breakdown.final_price), "overridden": breakdown.overridden},
        )
        return breakdown
