"""
Temporal constraints filter service.

filter_transactions(request)
    Computes ceiling/remanent for raw ``{date, amount}`` transactions and
    applies the Q, P and K windows.

filter_and_validate(request)
    :func:`filter_transactions` followed by the validator.

Processing order per transaction
--------------------------------
1. Non-positive amount: emit with ceiling = remanent = 0 and
   ``inKPeriod = False``; no window rule applies (the validator rejects it).
2. Compute ceiling and remanent from amount.
3. Q rule: the matching Q window with the **latest start** wins.  A
   ``fixed`` of 0 drops the transaction; otherwise ``remanent = fixed``
   and ``ceiling = amount + fixed``.
4. P rule: add every matching ``extra`` to remanent.
5. K rule: ``inKPeriod = True`` when the date is in any K window.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from selfinvest.models.schemas import (
    FilteredTransaction,
    FilterRequest,
    KMoment,
    PMoment,
    QMoment,
    Transaction,
    ValidationRequest,
    ValidationResult,
)
from selfinvest.services.transaction_service import parse_transaction
from selfinvest.services.validation_service import validate_filtered
from selfinvest.utils.financial import ZERO
from selfinvest.utils.time_utils import is_within_range

logger = logging.getLogger(__name__)


# ── Shared internal helpers ──────────────────────────────────────────────────

def _best_q_moment(dt: datetime, q_moments: List[QMoment]) -> Optional[QMoment]:
    """
    Return the Q window with the latest *start* that contains *dt*.

    If several share the latest start, the first one in the list wins.
    """
    selected: Optional[QMoment] = None
    for q in q_moments:
        if not is_within_range(dt, q.start, q.end):
            continue
        if selected is None or q.start > selected.start:
            selected = q
    return selected


def _apply_p_moments(remanent: Decimal, dt: datetime, p_moments: List[PMoment]) -> Decimal:
    """Add *extra* from every P window whose range contains *dt*."""
    for p in p_moments:
        if is_within_range(dt, p.start, p.end):
            remanent += p.extra
    return remanent


def _in_any_k(dt: datetime, k_moments: List[KMoment]) -> bool:
    """Return ``True`` when *dt* falls inside at least one K window."""
    return any(is_within_range(dt, k.start, k.end) for k in k_moments)


def _filter_one(txn: Transaction, request: FilterRequest) -> Optional[FilteredTransaction]:
    """Apply the window rules to one transaction; ``None`` means dropped."""
    if txn.amount <= ZERO:
        return FilteredTransaction(
            date=txn.date,
            amount=txn.amount,
            ceiling=ZERO,
            remanent=ZERO,
            in_k_period=False,
        )

    parsed = parse_transaction(txn)
    ceiling, remanent = parsed.ceiling, parsed.remanent

    best_q = _best_q_moment(txn.date, request.q)
    if best_q is not None:
        if best_q.fixed == ZERO:
            return None
        remanent = best_q.fixed
        ceiling = txn.amount + best_q.fixed

    remanent = _apply_p_moments(remanent, txn.date, request.p)

    return FilteredTransaction(
        date=txn.date,
        amount=txn.amount,
        ceiling=ceiling,
        remanent=remanent,
        in_k_period=_in_any_k(txn.date, request.k),
    )


# ── Public API ───────────────────────────────────────────────────────────────

def filter_transactions(request: FilterRequest) -> List[FilteredTransaction]:
    """
    Apply Q → P → K windows to the raw transactions of *request*.

    Returns
    -------
    list of FilteredTransaction
        In input order, without the transactions dropped by a
        ``fixed = 0`` Q window.
    """
    filtered: List[FilteredTransaction] = []
    for txn in request.transactions:
        result = _filter_one(txn, request)
        if result is not None:
            filtered.append(result)

    dropped = len(request.transactions) - len(filtered)
    if dropped:
        logger.debug("Dropped %d transactions in zero-fixed Q windows", dropped)
    return filtered


def filter_and_validate(request: FilterRequest) -> ValidationResult[FilteredTransaction]:
    """
    Full filter pipeline: window rules, then validation with the same wage.

    Parameters
    ----------
    request:
        Wage, Q/P/K windows and raw transactions.

    Returns
    -------
    ValidationResult
        ``valid`` – :class:`~selfinvest.models.schemas.FilteredTransaction`
                    records carrying ``inKPeriod``.
        ``invalid`` – rejected records with their reason.
    """
    filtered = filter_transactions(request)
    return validate_filtered(ValidationRequest(wage=request.wage, transactions=filtered))
