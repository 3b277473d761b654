"""Tests for the installment pricing engine."""

from dataclasses import replace
from decimal import Decimal, localcontext

import pytest

from pricedesk.domain.entities import Track, quantize_money
from pricedesk.domain.errors import DegenerateScheduleError, InvalidInputError
from pricedesk.domain.installments import (
    ENGINE_CONTEXT,
    annuity_installment,
    compute_breakdown,
    ensure_schedule,
    track_count,
)


def reference_installment(financed, rate, periods):
    """Annuity formula evaluated independently of the engine."""
    with localcontext(ENGINE_CONTEXT):
        growth = (Decimal(1) + rate) ** periods
        return financed * rate * growth / (growth - 1)


def assert_reconciles(breakdown):
    total = sum(item.count * item.amount for item in breakdown.tracks)
    assert breakdown.final_price == breakdown.deposit + total


class TestTrackCount:
    """Tests for fixed track sizing."""

    @pytest.mark.parametrize(
        "track,horizon,expected",
        [
            (Track.ANNUAL, 0, 0),
            (Track.ANNUAL, 11, 0),
            (Track.ANNUAL, 12, 0),
            (Track.ANNUAL, 24, 1),
            (Track.ANNUAL, 35, 1),
            (Track.ANNUAL, 36, 2),
            (Track.QUARTERLY, 3, 0),
            (Track.QUARTERLY, 24, 7),
            (Track.QUARTERLY, 26, 7),
        ],
    )
    def test_one_period_is_withheld(self, track, horizon, expected):
        assert track_count(track, horizon) == expected


class TestAnnuity:
    """Tests for the amortized installment."""

    def test_zero_periods(self):
        assert annuity_installment(Decimal("900000"), Decimal("0.01"), 0) == 0

    def test_nothing_financed(self):
        assert annuity_installment(Decimal("0"), Decimal("0.01"), 24) == 0
        assert annuity_installment(Decimal("-5"), Decimal("0.01"), 24) == 0

    def test_zero_rate_splits_evenly(self):
        assert annuity_installment(Decimal("1200"), Decimal("0"), 12) == Decimal("100")


class TestScenarios:
    """Reference pricing scenarios."""

    def test_monthly_only(self, base_inputs):
        """1,000,000 price, 10% deposit, 24 months, monthly track only."""
        breakdown = compute_breakdown(base_inputs)

        expected = reference_installment(Decimal("900000"), Decimal("0.01"), 24)
        monthly = breakdown.track(Track.MONTHLY)

        assert monthly.count == 24
        assert monthly.amount == quantize_money(expected)
        assert abs(breakdown.final_price - (Decimal("100000") + monthly.amount * 24)) <= Decimal("0.01")
        assert breakdown.track(Track.ANNUAL).count == 0
        assert breakdown.track(Track.QUARTERLY).count == 0
        assert breakdown.deposit_percentage == Decimal("10")
        assert breakdown.financed_amount == Decimal("900000")

    def test_annual_track(self, base_inputs):
        """Same unit with a 5% annual track over 24 months."""
        baseline = compute_breakdown(base_inputs)
        breakdown = compute_breakdown(replace(base_inputs, active_tracks=frozenset({Track.ANNUAL})))

        annual = breakdown.track(Track.ANNUAL)
        monthly = breakdown.track(Track.MONTHLY)

        assert annual.count == 1
        assert annual.amount == Decimal("50000.00")
        assert monthly.count == 23
        expected = quantize_money((breakdown.total_repayment - Decimal("50000")) / 23)
        assert monthly.amount == expected
        assert monthly.amount < baseline.track(Track.MONTHLY).amount
        assert_reconciles(breakdown)

    def test_quarterly_track(self, base_inputs):
        breakdown = compute_breakdown(
            replace(base_inputs, active_tracks=frozenset({Track.QUARTERLY}))
        )

        quarterly = breakdown.track(Track.QUARTERLY)
        assert quarterly.count == 7
        assert quarterly.amount == Decimal("20000.00")
        assert breakdown.track(Track.MONTHLY).count == 17
        assert_reconciles(breakdown)

    def test_both_tracks(self, base_inputs):
        inputs = replace(
            base_inputs,
            horizon_months=60,
            active_tracks=frozenset({Track.ANNUAL, Track.QUARTERLY}),
        )
        breakdown = compute_breakdown(inputs)

        assert breakdown.track(Track.ANNUAL).count == 4
        assert breakdown.track(Track.QUARTERLY).count == 19
        assert breakdown.track(Track.MONTHLY).count == 60 - 4 - 19
        assert_reconciles(breakdown)
        assert not breakdown.degenerate

    def test_tracks_are_reported_in_fixed_order(self, base_inputs):
        breakdown = compute_breakdown(base_inputs)
        assert [item.track for item in breakdown.tracks] == [
            Track.ANNUAL,
            Track.QUARTERLY,
            Track.MONTHLY,
        ]


class TestInvariants:
    """Reconciliation and determinism."""

    @pytest.mark.parametrize("horizon", [1, 6, 12, 13, 24, 37, 60, 120])
    @pytest.mark.parametrize(
        "tracks",
        [frozenset(), frozenset({Track.ANNUAL}), frozenset({Track.QUARTERLY}), frozenset(Track)],
    )
    def test_final_price_reconciles(self, base_inputs, horizon, tracks):
        breakdown = compute_breakdown(
            replace(base_inputs, horizon_months=horizon, active_tracks=tracks)
        )
        assert_reconciles(breakdown)

    @pytest.mark.parametrize("horizon", [12, 24, 60, 120])
    def test_resplit_preserves_amortized_total(self, base_inputs, horizon):
        """Without overrides only rounding separates final and amortized price.

        The final price is summed from the displayed monthly amount, so each
        monthly installment may carry up to half a cent of rounding.
        """
        breakdown = compute_breakdown(
            replace(
                base_inputs,
                horizon_months=horizon,
                active_tracks=frozenset({Track.ANNUAL, Track.QUARTERLY}),
            )
        )
        monthly_count = breakdown.track(Track.MONTHLY).count
        tolerance = Decimal("0.005") * monthly_count + Decimal("0.01")

        assert not breakdown.overridden
        assert abs(breakdown.final_price - (breakdown.deposit + breakdown.total_repayment)) <= tolerance

    def test_idempotent(self, base_inputs):
        inputs = replace(base_inputs, active_tracks=frozenset({Track.ANNUAL}))
        first = compute_breakdown(inputs)
        second = compute_breakdown(inputs)

        assert first == second
        assert repr(first) == repr(second)

    def test_independent_of_global_decimal_context(self, base_inputs):
        expected = compute_breakdown(base_inputs)
        with localcontext() as ctx:
            ctx.prec = 6
            assert repr(compute_breakdown(base_inputs)) == repr(expected)


class TestOverrides:
    """Overriding annual and quarterly amounts."""

    def test_override_rebalances_monthly(self, base_inputs):
        inputs = replace(base_inputs, active_tracks=frozenset({Track.ANNUAL}))
        baseline = compute_breakdown(inputs)
        overridden = compute_breakdown(replace(inputs, overrides={Track.ANNUAL: Decimal("80000")}))

        assert overridden.overridden
        assert overridden.track(Track.ANNUAL).amount == Decimal("80000")
        assert overridden.track(Track.ANNUAL).count == baseline.track(Track.ANNUAL).count
        assert overridden.track(Track.MONTHLY).amount < baseline.track(Track.MONTHLY).amount
        assert_reconciles(overridden)

    def test_override_used_verbatim(self, base_inputs):
        inputs = replace(
            base_inputs,
            active_tracks=frozenset({Track.QUARTERLY}),
            overrides={Track.QUARTERLY: Decimal("12345.678")},
        )
        breakdown = compute_breakdown(inputs)

        assert breakdown.track(Track.QUARTERLY).amount == Decimal("12345.678")
        assert_reconciles(breakdown)

    def test_override_of_inactive_track_ignored(self, base_inputs):
        inputs = replace(base_inputs, overrides={Track.ANNUAL: Decimal("80000")})
        breakdown = compute_breakdown(inputs)

        assert breakdown.track(Track.ANNUAL).count == 0
        assert breakdown.track(Track.ANNUAL).amount == 0
        assert not breakdown.overridden
        assert breakdown == compute_breakdown(base_inputs)

    def test_override_beyond_total_is_clamped_and_reported(self, base_inputs):
        inputs = replace(
            base_inputs,
            active_tracks=frozenset({Track.ANNUAL}),
            overrides={Track.ANNUAL: Decimal("2000000")},
        )
        breakdown = compute_breakdown(inputs)

        assert breakdown.degenerate
        assert breakdown.track(Track.MONTHLY).amount == 0
        assert breakdown.final_price == Decimal("2100000")
        assert breakdown.divergence > 0
        assert_reconciles(breakdown)

        with pytest.raises(DegenerateScheduleError):
            ensure_schedule(breakdown)

    def test_ensure_schedule_passes_clean_breakdown(self, base_inputs):
        breakdown = compute_breakdown(base_inputs)
        assert ensure_schedule(breakdown) is breakdown


class TestBoundaries:
    """Edge inputs the engine must survive."""

    def test_zero_horizon(self, base_inputs):
        inputs = replace(
            base_inputs,
            horizon_months=0,
            active_tracks=frozenset({Track.ANNUAL, Track.QUARTERLY}),
        )
        breakdown = compute_breakdown(inputs)

        assert all(item.count == 0 and item.amount == 0 for item in breakdown.tracks)
        assert breakdown.final_price == Decimal("100000")

    def test_zero_price_returns_zeroed_breakdown(self, base_inputs):
        breakdown = compute_breakdown(
            replace(base_inputs, unit_price=Decimal("0"), deposit_amount=Decimal("0"))
        )

        assert breakdown.final_price == 0
        assert all(item.count == 0 for item in breakdown.tracks)

    def test_cash_factor_applies_to_financing_base_only(self, base_inputs):
        breakdown = compute_breakdown(replace(base_inputs, cash_factor=Decimal("1.2")))

        assert breakdown.cash_price == Decimal("1200000")
        # Deposit is taken against the list price, not the cash price.
        assert breakdown.financed_amount == Decimal("1100000")

    def test_zero_deposit(self, base_inputs):
        breakdown = compute_breakdown(replace(base_inputs, deposit_amount=Decimal("0")))

        assert breakdown.deposit_percentage == 0
        assert breakdown.financed_amount == Decimal("1000000")
        assert_reconciles(breakdown)

    def test_nothing_financed(self, base_inputs):
        """A tiny cash factor leaves nothing to amortize."""
        breakdown = compute_breakdown(replace(base_inputs, cash_factor=Decimal("0.05")))

        assert breakdown.basic_installment == 0
        assert breakdown.track(Track.MONTHLY).count == 0
        assert breakdown.final_price == Decimal("100000")

    def test_nothing_financed_with_fixed_tracks(self, base_inputs):
        breakdown = compute_breakdown(
            replace(
                base_inputs,
                cash_factor=Decimal("0.05"),
                active_tracks=frozenset({Track.ANNUAL}),
            )
        )

        assert breakdown.degenerate
        assert not breakdown.overridden
        assert "Nothing is left to finance" in breakdown.issues[0]
        assert "amortized repayment" not in breakdown.issues[0]
        assert breakdown.track(Track.MONTHLY).amount == 0


class TestValidation:
    """Invalid inputs are rejected before computation."""

    @pytest.mark.parametrize(
        "changes,match",
        [
            ({"unit_price": Decimal("-1")}, "Unit price"),
            ({"deposit_amount": Decimal("-1")}, "Deposit"),
            ({"deposit_amount": Decimal("1000000")}, "less than the unit price"),
            ({"deposit_amount": Decimal("1500000")}, "less than the unit price"),
            ({"horizon_months": -1}, "Horizon"),
            ({"cash_factor": Decimal("0")}, "Cash factor"),
            ({"reduction_factor": Decimal("1")}, "Reduction factor"),
            ({"reduction_factor": Decimal("-0.01")}, "Reduction factor"),
            ({"overrides": {Track.MONTHLY: Decimal("100")}}, "monthly track"),
            ({"overrides": {Track.ANNUAL: Decimal("-100")}}, "Annual amount"),
            ({"unit_price": Decimal("NaN")}, "Unit price must be a finite number"),
            ({"unit_price": Decimal("Infinity")}, "Unit price must be a finite number"),
            ({"deposit_amount": Decimal("NaN")}, "Deposit must be a finite number"),
            ({"deposit_amount": Decimal("-Infinity")}, "Deposit must be a finite number"),
            ({"cash_factor": Decimal("Infinity")}, "Cash factor must be a finite number"),
            ({"reduction_factor": Decimal("NaN")}, "Reduction factor must be a finite number"),
            ({"overrides": {Track.ANNUAL: Decimal("NaN")}}, "Annual amount must be a finite number"),
            (
                {"unit_price": Decimal("0"), "deposit_amount": Decimal("10")},
                "less than the unit price",
            ),
        ],
    )
    def test_rejected(self, base_inputs, changes, match):
        with pytest.raises(InvalidInputError, match=match):
            compute_breakdown(replace(base_inputs, **changes))

    def test_invalid_input_is_value_error(self, base_inputs):
        with pytest.raises(ValueError):
            compute_breakdown(replace(base_inputs, horizon_months=-3))
