"""Price quotes for document generation."""

from decimal import Decimal
from typing import Iterable

from pricedesk.domain.entities import (
    AdditionalExpense,
    AmountLine,
    PriceQuote,
    PricingBreakdown,
    quantize_money,
)
from pricedesk.domain.numerals import Currency, EGP, to_words

TRACK_LINE_LABELS = {
    "ANNUAL": "القسط السنوي",
    "QUARTERLY": "القسط الربع سنوي",
    "MONTHLY": "القسط الشهري",
}


def _line(label: str, amount: Decimal, currency: Currency) -> AmountLine:
    return AmountLine(label=label, amount=amount, words=to_words(amount, currency, suffix=True))


def build_quote(
    breakdown: PricingBreakdown,
    unit_price: Decimal,
    expenses: Iterable[AdditionalExpense] = (),
    currency: Currency = EGP,
) -> PriceQuote:
    """Assemble a quote with every monetary value rendered in words.

    Args:
        breakdown: Current pricing breakdown
        unit_price: List price the percentage expenses are charged on
        expenses: Project expenses; inactive ones are skipped
        currency: Currency used for the words rendering

    Returns:
        PriceQuote whose grand total is the final price plus active expenses
    """
    expense_lines = tuple(
        _line(expense.name, expense.amount_for(unit_price), currency)
        for expense in expenses
        if expense.is_active
    )
    expenses_total = sum((line.amount for line in expense_lines), Decimal("0"))
    grand_total = quantize_money(breakdown.final_price + expenses_total)

    lines = [
        _line("السعر النهائي", breakdown.final_price, currency),
        _line("الدفعة المقدمة", breakdown.deposit, currency),
    ]
    for item in breakdown.tracks:
        if item.count:
            lines.append(_line(TRACK_LINE_LABELS[item.track.name], item.amount, currency))
    if expense_lines:
        lines.append(_line("الإجمالي شامل المصروفات", grand_total, currency))

    return PriceQuote(
        breakdown=breakdown,
        expenses=expense_lines,
        expenses_total=expenses_total,
        grand_total=grand_total,
        lines=tuple(lines),
    )
