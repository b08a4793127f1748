"""
Transaction parser service.

Responsibility: enrich raw transactions with *ceiling* and *remanent*.
Pure business logic – no I/O.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from selfinvest.models.schemas import ParsedTransaction, Transaction
from selfinvest.utils.financial import compute_ceiling, compute_remanent

logger = logging.getLogger(__name__)


def parse_transaction(txn: Transaction) -> ParsedTransaction:
    ceiling = compute_ceiling(txn.amount)
    return ParsedTransaction(
        date=txn.date,
        amount=txn.amount,
        ceiling=ceiling,
        remanent=compute_remanent(ceiling, txn.amount),
    )


def parse_transactions(transactions: Sequence[Transaction]) -> List[ParsedTransaction]:
    """
    Compute the round-up of every transaction.

    For each transaction:
    * ``ceiling``  = smallest multiple of 100 >= amount
    * ``remanent`` = ceiling - amount

    The output has the same order and length as the input.  Non-positive
    amounts are computed as well; the validator rejects them later.

    Parameters
    ----------
    transactions:
        Raw transaction records (date + amount).

    Returns
    -------
    list of ParsedTransaction
    """
    parsed = [parse_transaction(t) for t in transactions]
    logger.debug("Parsed %d transactions", len(parsed))
    return parsed
