"""
Transaction validator service.

Responsibility: apply the business rules to an enriched transaction list
and partition it into *valid* / *invalid* buckets.

Rules (applied in order, first failing rule wins):
1. ``amount`` > 0.
2. ``amount`` <= ``wage``.
3. No duplicate ``(date, amount)`` among the transactions already
   accepted in this pass.

Two entry-points share the rules: :func:`validate_parsed` for parser
output and :func:`validate_filtered` for filter output, whose valid
records keep their ``inKPeriod`` flag.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Sequence, Set, Tuple

from selfinvest.models.schemas import (
    FilteredTransaction,
    InvalidTransaction,
    ParsedTransaction,
    V,
    ValidationRequest,
    ValidationResult,
)
from selfinvest.utils.financial import ZERO

logger = logging.getLogger(__name__)

MSG_NON_POSITIVE = "Negative or zero amount is not allowed"
MSG_EXCEEDS_WAGE = "Amount exceeds wage"
MSG_DUPLICATE = "Duplicate transaction"


def _rejection_reason(
    txn: V,
    wage: Decimal,
    accepted: Set[Tuple[datetime, Decimal]],
) -> Optional[str]:
    if txn.amount <= ZERO:
        return MSG_NON_POSITIVE
    if txn.amount > wage:
        return MSG_EXCEEDS_WAGE
    if (txn.date, txn.amount) in accepted:
        return MSG_DUPLICATE
    return None


def _apply_rules(wage: Decimal, transactions: Sequence[V]) -> ValidationResult[V]:
    """
    Partition *transactions* in input order.

    Any record exposing ``date``, ``amount``, ``ceiling`` and ``remanent``
    is accepted; valid records are passed through unchanged.
    """
    valid: List[V] = []
    invalid: List[InvalidTransaction] = []
    accepted: Set[Tuple[datetime, Decimal]] = set()

    for txn in transactions:
        reason = _rejection_reason(txn, wage, accepted)
        if reason is not None:
            invalid.append(
                InvalidTransaction(
                    date=txn.date,
                    amount=txn.amount,
                    ceiling=txn.ceiling,
                    remanent=txn.remanent,
                    message=reason,
                )
            )
            continue

        accepted.add((txn.date, txn.amount))
        valid.append(txn)

    logger.debug("Validated %d transactions: %d valid, %d invalid",
                 len(transactions), len(valid), len(invalid))
    return ValidationResult(valid=valid, invalid=invalid)


def validate_parsed(
    request: ValidationRequest[ParsedTransaction],
) -> ValidationResult[ParsedTransaction]:
    """
    Validate parser output against the wage ceiling.

    Parameters
    ----------
    request:
        Wage plus :class:`~selfinvest.models.schemas.ParsedTransaction` records.

    Returns
    -------
    ValidationResult
        Partitioned *valid* and *invalid* lists, each in input order.
    """
    return _apply_rules(request.wage, request.transactions)


def validate_filtered(
    request: ValidationRequest[FilteredTransaction],
) -> ValidationResult[FilteredTransaction]:
    """Validate window-filter output; valid records keep ``inKPeriod``."""
    return _apply_rules(request.wage, request.transactions)
