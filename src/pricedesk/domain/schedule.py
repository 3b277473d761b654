"""Seeding dated payment schedules from a pricing breakdown."""

import csv
from datetime import date
from typing import Iterable, TextIO

from dateutil.relativedelta import relativedelta

from pricedesk.domain.entities import (
    TRACK_ORDER,
    PricingBreakdown,
    ScheduledInstallment,
    Track,
)
from pricedesk.domain.numerals import to_words

CSV_HEADER = ["تاريخ الدفعة", "نوع الدفعة", "رقم الشيك", "المبلغ بالأرقام", "المبلغ بالحروف"]


def due_offset(track: Track, index: int) -> int:
    """Months after the start date at which the index-th installment falls.

    Monthly installments start on the start date itself; a quarterly or
    annual installment falls together with the last monthly payment of its
    period.
    """
    if track is Track.MONTHLY:
        return index - 1
    return index * track.period_months - 1


def seed_schedule(
    breakdown: PricingBreakdown,
    start_date: date,
    first_cheque_number: int = 1000,
) -> list[ScheduledInstallment]:
    """Expand a breakdown into dated schedule rows.

    Args:
        breakdown: Breakdown to expand
        start_date: Due date of the first monthly installment
        first_cheque_number: Number used for the first cheque

    Returns:
        Rows sorted by due date, then by track; cheque numbers are assigned
        sequentially in that order
    """
    undated = []
    for item in breakdown.tracks:
        for index in range(1, item.count + 1):
            due_date = start_date + relativedelta(months=due_offset(item.track, index))
            undated.append((due_date, TRACK_ORDER.index(item.track), item))

    undated.sort(key=lambda row: (row[0], row[1]))

    return [
        ScheduledInstallment(
            due_date=due_date,
            track=item.track,
            amount=item.amount,
            cheque_number=f"CHK{first_cheque_number + position}",
        )
        for position, (due_date, _, item) in enumerate(undated)
    ]


def write_schedule_csv(rows: Iterable[ScheduledInstallment], stream: TextIO) -> int:
    """Write schedule rows, including the amount in words, as CSV.

    Returns:
        Number of rows written (excluding the header)
    """
    writer = csv.writer(stream)
    writer.writerow(CSV_HEADER)
    written = 0
    for row in rows:
        writer.writerow(
            [
                row.due_date.isoformat(),
                row.track.label,
                row.cheque_number or "",
                f"{row.amount:.2f}",
                to_words(row.amount),
            ]
        )
        written += 1
    return written
