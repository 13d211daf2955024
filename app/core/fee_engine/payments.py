"""Payment allocation: spread the student's total paid over the ledger, oldest month first."""

from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import List, Tuple

from .ledger import LedgerEntry
from .money import ZERO


def allocate_payments(
    ledger: List[LedgerEntry],
    total_paid: Decimal,
    now: datetime,
) -> Tuple[List[LedgerEntry], Decimal]:
    """Return the ledger with ``paid_amount`` filled in and the unapplied remainder.

    Only months that have started by ``now`` receive money. Whatever is left
    once those are covered stays unapplied; it still lowers the outstanding
    balance because aggregation subtracts the total paid directly.
    """
    pool = total_paid
    allocated = []
    for entry in ledger:
        if pool > ZERO and entry.month.has_started(now):
            needed = entry.outstanding
            if needed > ZERO:
                applied = min(pool, needed)
                entry = replace(entry, paid_amount=entry.paid_amount + applied)
                pool -= applied
        allocated.append(entry)
    return allocated, max(pool, ZERO)
