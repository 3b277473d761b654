"""Installment pricing engine.

Derives a complete payment breakdown from a snapshot of pricing inputs.
The computation is closed form: validate, size the annual and quarterly
tracks, amortize the financed amount over the horizon, then let the monthly
track absorb whatever the fixed tracks do not cover.
"""

import logging
from decimal import Context, Decimal, ROUND_HALF_EVEN, localcontext

from pricedesk.domain.entities import (
    FIXED_TRACKS,
    TRACK_ORDER,
    PricingBreakdown,
    PricingInputs,
    Track,
    TrackBreakdown,
    quantize_money,
)
from pricedesk.domain.errors import (
    DegenerateScheduleError,
    InvalidInputError,
    deposit_not_below_price,
    monthly_not_overridable,
    negative_value,
    not_finite,
    nothing_to_finance,
    overrides_exceed_total,
    tracks_exceed_horizon,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

# Every computation runs in this context so results do not depend on the
# caller's global decimal settings.
ENGINE_CONTEXT = Context(prec=28, rounding=ROUND_HALF_EVEN)


def track_count(track: Track, horizon_months: int) -> int:
    """Number of installments a fixed track gets over the horizon.

    One period is withheld: the obligation of the last period is carried by
    the monthly track.
    """
    periods = horizon_months // track.period_months
    return max(periods - 1, 0)


def default_track_amount(unit_price: Decimal, percentage: Decimal) -> Decimal:
    """Default per-installment amount for a fixed track."""
    return quantize_money(unit_price * percentage)


def annuity_installment(financed_amount: Decimal, rate: Decimal, periods: int) -> Decimal:
    """Fixed per-period installment that amortizes ``financed_amount``.

    Returns zero when there is nothing to amortize. A zero rate falls back to
    an even split, the limit of the annuity formula as the rate tends to zero.
    """
    if periods <= 0 or financed_amount <= 0:
        return ZERO
    if rate == 0:
        return financed_amount / periods
    growth = (1 + rate) ** periods
    return financed_amount * rate * growth / (growth - 1)


def validate_inputs(inputs: PricingInputs) -> None:
    """Reject inputs that cannot produce a meaningful breakdown.

    Raises:
        InvalidInputError: If any input is out of range
    """
    for field, value in (
        ("Unit price", inputs.unit_price),
        ("Deposit", inputs.deposit_amount),
        ("Cash factor", inputs.cash_factor),
        ("Reduction factor", inputs.reduction_factor),
        *((f"{track.name.title()} amount", amount) for track, amount in inputs.overrides.items()),
    ):
        if not Decimal(value).is_finite():
            raise InvalidInputError(not_finite(field, value))

    if inputs.unit_price < 0:
        raise InvalidInputError(negative_value("Unit price", inputs.unit_price))
    if inputs.deposit_amount < 0:
        raise InvalidInputError(negative_value("Deposit", inputs.deposit_amount))
    if inputs.horizon_months < 0:
        raise InvalidInputError(negative_value("Horizon", inputs.horizon_months))
    if inputs.cash_factor <= 0:
        raise InvalidInputError(f"Cash factor must be positive (got {inputs.cash_factor})")
    if not ZERO <= inputs.reduction_factor < 1:
        raise InvalidInputError(
            f"Reduction factor must be in [0, 1) (got {inputs.reduction_factor})"
        )
    if inputs.deposit_amount >= inputs.unit_price and inputs.unit_price > 0:
        raise InvalidInputError(
            deposit_not_below_price(inputs.deposit_amount, inputs.unit_price)
        )
    if inputs.unit_price == 0 and inputs.deposit_amount > 0:
        raise InvalidInputError(
            deposit_not_below_price(inputs.deposit_amount, inputs.unit_price)
        )

    for track, amount in inputs.overrides.items():
        if track is Track.MONTHLY:
            raise InvalidInputError(monthly_not_overridable())
        if amount < 0:
            raise InvalidInputError(negative_value(f"{track.name.title()} amount", amount))


def zero_breakdown(deposit: Decimal = ZERO) -> PricingBreakdown:
    """Breakdown with every track empty."""
    return PricingBreakdown(
        deposit=deposit,
        tracks=tuple(TrackBreakdown(track=t, count=0, amount=ZERO) for t in TRACK_ORDER),
        final_price=deposit,
    )


def compute_breakdown(inputs: PricingInputs) -> PricingBreakdown:
    """Compute the full payment breakdown for a set of pricing inputs.

    Args:
        inputs: Snapshot of unit price, deposit, horizon, project factors,
            active tracks and per-track overrides

    Returns:
        PricingBreakdown whose final price equals the deposit plus every
        track's ``count * amount``

    Raises:
        InvalidInputError: If the inputs are out of range
    """
    validate_inputs(inputs)

    if inputs.unit_price == 0:
        return zero_breakdown()

    with localcontext(ENGINE_CONTEXT):
        return _compute(inputs)


def _compute(inputs: PricingInputs) -> PricingBreakdown:
    price = inputs.unit_price
    deposit = inputs.deposit_amount
    horizon = inputs.horizon_months
    issues: list[str] = []

    deposit_percentage = deposit / price * 100

    fixed: dict[Track, TrackBreakdown] = {}
    overridden = False
    for track in FIXED_TRACKS:
        count = track_count(track, horizon)
        if track not in inputs.active_tracks or count == 0:
            fixed[track] = TrackBreakdown(track=track, count=0, amount=ZERO)
            continue
        if track in inputs.overrides:
            amount = inputs.overrides[track]
            overridden = True
        else:
            percentage = inputs.track_percentages.get(track, ZERO)
            amount = default_track_amount(price, percentage)
        fixed[track] = TrackBreakdown(track=track, count=count, amount=amount)

    # Deposit is a share of the list price while financing starts from the
    # cash-equivalent price.
    cash_price = price * inputs.cash_factor
    financed_amount = cash_price - (deposit_percentage / 100 * price)

    basic_installment = annuity_installment(
        financed_amount, inputs.reduction_factor, horizon
    )
    total_repayment = basic_installment * horizon

    fixed_count = sum(item.count for item in fixed.values())
    fixed_total = sum((item.total for item in fixed.values()), ZERO)

    if basic_installment == 0:
        monthly_count = 0
    else:
        monthly_count = horizon - fixed_count
        if monthly_count < 0:
            issues.append(tracks_exceed_horizon(horizon, fixed_count))
            monthly_count = 0

    residual = total_repayment - fixed_total
    if residual < 0:
        if financed_amount <= 0:
            issues.append(nothing_to_finance(fixed_total, financed_amount))
        else:
            issues.append(overrides_exceed_total(fixed_total, total_repayment))
        monthly_count = 0
        monthly_amount = ZERO
    elif monthly_count == 0:
        monthly_amount = ZERO
    else:
        monthly_amount = quantize_money(residual / monthly_count)

    tracks = (
        fixed[Track.ANNUAL],
        fixed[Track.QUARTERLY],
        TrackBreakdown(track=Track.MONTHLY, count=monthly_count, amount=monthly_amount),
    )
    final_price = deposit + sum((item.total for item in tracks), ZERO)

    breakdown = PricingBreakdown(
        deposit=deposit,
        tracks=tracks,
        final_price=final_price,
        deposit_percentage=deposit_percentage,
        cash_price=cash_price,
        financed_amount=financed_amount,
        basic_installment=basic_installment,
        total_repayment=total_repayment,
        overridden=overridden,
        issues=tuple(issues),
    )
    logger.debug(
        "Computed breakdown",
        extra={
            "unit_price": str(price),
            "deposit": str(deposit),
            "horizon_months": horizon,
            "final_price": str(final_price),
            "monthly_count": monthly_count,
            "monthly_amount": str(monthly_amount),
            "degenerate": breakdown.degenerate,
        },
    )
    return breakdown


def ensure_schedule(breakdown: PricingBreakdown) -> PricingBreakdown:
    """Return the breakdown unchanged, or raise if it had to be clamped.

    Raises:
        DegenerateScheduleError: If the engine reported any schedule issue
    """
    if breakdown.degenerate:
        raise DegenerateScheduleError(" ".join(breakdown.issues))
    return breakdown
