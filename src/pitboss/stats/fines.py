"""Fine totals per dealer."""

import logging
from decimal import Decimal
from typing import Callable, Iterable

from pitboss.domain.models import CENTS, FineLedger, FineRecord, FineStats

logger = logging.getLogger(__name__)


class SchemaUnavailableError(Exception):
    """The data store has no fine columns (fine tracking not enabled)."""


class FineLedgerAggregator:
    """Totals a dealer's fines by applied and pending status.

    Example:
        >>> ledger = FineLedgerAggregator().aggregate("d1", records)
        >>> ledger.stats.pending_fines
        2
    """

    def aggregate(self, dealer_id: str, records: Iterable[FineRecord]) -> FineLedger:
        """Aggregate fine records for a dealer.

        Records without an owning dealer, belonging to another dealer, or
        without a positive amount are ignored.

        Args:
            dealer_id: Dealer whose fines are totalled.
            records: Fine records from the store.

        Returns:
            FineLedger with fines enabled.
        """
        fines = [
            r for r in records
            if r.fine_amount is not None and r.fine_amount > 0
            and r.dealer_id == dealer_id
        ]
        applied = [r for r in fines if r.fine_applied]

        total_amount = _sum_amounts(fines)
        applied_amount = _sum_amounts(applied)

        stats = FineStats(
            total_fines=len(fines),
            total_fine_amount=total_amount,
            applied_fines=len(applied),
            applied_fine_amount=applied_amount,
            pending_fines=len(fines) - len(applied),
            pending_fine_amount=total_amount - applied_amount,
        )
        return FineLedger(stats=stats, fines_enabled=True)

    def aggregate_from(
        self,
        dealer_id: str,
        fetch: Callable[[str], Iterable[FineRecord]],
    ) -> FineLedger:
        """Fetch a dealer's fine records and aggregate them.

        A ``SchemaUnavailableError`` from ``fetch`` degrades to an all-zero
        ledger with ``fines_enabled`` off; it is never raised to the caller.
        """
        try:
            records = list(fetch(dealer_id))
        except SchemaUnavailableError as e:
            logger.info("Fine tracking unavailable for dealer %s: %s", dealer_id, e)
            return FineLedger.unavailable()
        return self.aggregate(dealer_id, records)


def _sum_amounts(records: list[FineRecord]) -> Decimal:
    return sum((r.fine_amount for r in records), Decimal("0")).quantize(CENTS)
