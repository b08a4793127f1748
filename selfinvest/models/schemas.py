"""
Immutable data models / schemas for the self-investment API.

These dataclasses serve as typed containers that travel between
the route → service → model layers.  No business logic lives here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Generic, List, TypeVar

from selfinvest.utils.financial import decimal_to_float, is_empty_number
from selfinvest.utils.time_utils import format_timestamp


#Raw input atoms
@dataclass(frozen=True)
class Transaction:
    """Single raw transaction as received from the client."""
    date: datetime
    amount: Decimal


#Enriched transactions
@dataclass(frozen=True)
class ParsedTransaction:
    """Transaction with its round-up ``ceiling`` and ``remanent``."""
    date: datetime
    amount: Decimal
    ceiling: Decimal
    remanent: Decimal

    def to_dict(self) -> dict:
        return {
            "date": format_timestamp(self.date),
            "amount": decimal_to_float(self.amount),
            "ceiling": decimal_to_float(self.ceiling),
            "remanent": decimal_to_float(self.remanent),
        }


@dataclass(frozen=True)
class FilteredTransaction:
    """
    Transaction produced by the Q/P/K window filter.
    Same fields as :class:`ParsedTransaction` plus the ``inKPeriod`` flag.
    """
    date: datetime
    amount: Decimal
    ceiling: Decimal
    remanent: Decimal
    in_k_period: bool = False

    def to_dict(self) -> dict:
        return {
            "date": format_timestamp(self.date),
            "amount": decimal_to_float(self.amount),
            "ceiling": decimal_to_float(self.ceiling),
            "remanent": decimal_to_float(self.remanent),
            "inKPeriod": self.in_k_period,
        }


#Validation output
@dataclass(frozen=True)
class InvalidTransaction:
    """
    A transaction rejected by validation.

    Serialised with a NON_EMPTY policy: zero-valued numeric fields are
    left out of :meth:`to_dict`.
    """
    date: datetime
    amount: Decimal
    ceiling: Decimal
    remanent: Decimal
    message: str

    def to_dict(self) -> dict:
        d = {"date": format_timestamp(self.date)}
        for key, value in (
            ("amount", self.amount),
            ("ceiling", self.ceiling),
            ("remanent", self.remanent),
        ):
            if not is_empty_number(value):
                d[key] = decimal_to_float(value)
        if self.message:
            d["message"] = self.message
        return d


V = TypeVar("V", ParsedTransaction, FilteredTransaction)


@dataclass(frozen=True)
class ValidationRequest(Generic[V]):
    """Wage ceiling plus the records to validate."""
    wage: Decimal
    transactions: List[V] = field(default_factory=list)


@dataclass(frozen=True)
class ValidationResult(Generic[V]):
    """Output of the validator: accepted records and rejected ones, in input order."""
    valid: List[V]
    invalid: List[InvalidTransaction]

    def to_dict(self) -> dict:
        return {
            "valid": [t.to_dict() for t in self.valid],
            "invalid": [t.to_dict() for t in self.invalid],
        }


#Time window definitions
@dataclass(frozen=True)
class QMoment:
    """Replace *remanent* with *fixed* in [start, end]; ``fixed == 0`` drops the transaction."""
    fixed: Decimal
    start: datetime
    end: datetime


@dataclass(frozen=True)
class PMoment:
    """Add *extra* to *remanent* for transactions in [start, end]."""
    extra: Decimal
    start: datetime
    end: datetime


@dataclass(frozen=True)
class KMoment:
    """Special period; transactions in [start, end] are flagged ``inKPeriod``."""
    start: datetime
    end: datetime


@dataclass(frozen=True)
class FilterRequest:
    """Input of the filter-and-validate pipeline."""
    wage: Decimal
    q: List[QMoment] = field(default_factory=list)
    p: List[PMoment] = field(default_factory=list)
    k: List[KMoment] = field(default_factory=list)
    transactions: List[Transaction] = field(default_factory=list)


#Diagnostics output
@dataclass(frozen=True)
class PerformanceReport:
    time: str
    memory: str
    threads: int

    def to_dict(self) -> dict:
        return {
            "time": self.time,
            "memory": self.memory,
            "threads": self.threads,
        }
