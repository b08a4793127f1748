from __future__ import annotations

from typing import Any, Dict, List

from flask import Blueprint, Response, jsonify, request

from selfinvest.models.schemas import (
    FilterRequest,
    KMoment,
    ParsedTransaction,
    PMoment,
    QMoment,
    Transaction,
    ValidationRequest,
)
from selfinvest.services.temporal_service import filter_and_validate
from selfinvest.services.transaction_service import parse_transactions
from selfinvest.services.validation_service import validate_parsed
from selfinvest.utils.financial import to_decimal
from selfinvest.utils.time_utils import parse_timestamp_lenient

transactions_bp = Blueprint("transactions", __name__)

BASE = "/blackrock/challenge/v1"


#Shared parsing helpers
def _parse_transaction(raw: Dict[str, Any]) -> Transaction:
    return Transaction(
        date=parse_timestamp_lenient(_require_field(raw, "date")),
        amount=to_decimal(_require_field(raw, "amount")),
    )


def _parse_parsed_transaction(raw: Dict[str, Any]) -> ParsedTransaction:
    required = ("date", "amount", "ceiling", "remanent")
    for key in required:
        if key not in raw:
            raise ValueError(f"Missing required field: {key!r}")
    return ParsedTransaction(
        date=parse_timestamp_lenient(raw["date"]),
        amount=to_decimal(raw["amount"]),
        ceiling=to_decimal(raw["ceiling"]),
        remanent=to_decimal(raw["remanent"]),
    )


def _parse_q_moment(raw: Dict[str, Any]) -> QMoment:
    for key in ("fixed", "start", "end"):
        if key not in raw:
            raise ValueError(f"Q moment missing field: {key!r}")
    return QMoment(
        fixed=to_decimal(raw["fixed"]),
        start=parse_timestamp_lenient(raw["start"]),
        end=parse_timestamp_lenient(raw["end"]),
    )


def _parse_p_moment(raw: Dict[str, Any]) -> PMoment:
    for key in ("extra", "start", "end"):
        if key not in raw:
            raise ValueError(f"P moment missing field: {key!r}")
    return PMoment(
        extra=to_decimal(raw["extra"]),
        start=parse_timestamp_lenient(raw["start"]),
        end=parse_timestamp_lenient(raw["end"]),
    )


def _parse_k_moment(raw: Dict[str, Any]) -> KMoment:
    for key in ("start", "end"):
        if key not in raw:
            raise ValueError(f"K moment missing field: {key!r}")
    return KMoment(
        start=parse_timestamp_lenient(raw["start"]),
        end=parse_timestamp_lenient(raw["end"]),
    )


def _parse_list(body: Dict[str, Any], key: str, parser) -> List[Any]:
    """Parse ``body[key]`` item by item; a missing or null list is empty."""
    items = body.get(key)
    if items is None:
        return []
    if not isinstance(items, list):
        raise ValueError(f"{key!r} must be a list.")
    parsed = []
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise ValueError(f"{key}[{i}] must be an object.")
        parsed.append(parser(item))
    return parsed


#Endpoint: parse
@transactions_bp.route(f"{BASE}/transactions:parse", methods=["POST"])
def parse_transactions_route() -> tuple[Response, int]:

    transactions_raw = request.get_json(silent=True)
    if transactions_raw is None:
        return jsonify({"error": "Invalid or missing JSON body."}), 400
    if not isinstance(transactions_raw, list):
        return jsonify({"error": "Request body must be a list of transactions."}), 422

    try:
        transactions = _parse_list({"transactions": transactions_raw}, "transactions", _parse_transaction)
    except (ValueError, TypeError, KeyError) as exc:
        return jsonify({"error": str(exc)}), 422

    result = parse_transactions(transactions)
    return jsonify([t.to_dict() for t in result]), 200


#Endpoint: validator
@transactions_bp.route(f"{BASE}/transactions:validator", methods=["POST"])
def validator_transactions() -> tuple[Response, int]:

    body: Dict[str, Any] | None = request.get_json(silent=True)
    if body is None:
        return jsonify({"error": "Invalid or missing JSON body."}), 400
    if not isinstance(body, dict):
        return jsonify({"error": "Request body must be an object."}), 422

    try:
        wage = to_decimal(_require_field(body, "wage"))
        if not isinstance(body.get("transactions"), list):
            raise ValueError("'transactions' must be a list.")
        transactions = _parse_list(body, "transactions", _parse_parsed_transaction)
    except (ValueError, TypeError, KeyError) as exc:
        return jsonify({"error": str(exc)}), 422

    result = validate_parsed(ValidationRequest(wage=wage, transactions=transactions))
    return jsonify(result.to_dict()), 200


#Endpoint: filter (temporal constraints)
@transactions_bp.route(f"{BASE}/transactions:filter", methods=["POST"])
def filter_transactions_route() -> tuple[Response, int]:
    body: Dict[str, Any] | None = request.get_json(silent=True)
    if body is None:
        return jsonify({"error": "Invalid or missing JSON body."}), 400
    if not isinstance(body, dict):
        return jsonify({"error": "Request body must be an object."}), 422

    try:
        wage = to_decimal(_require_field(body, "wage"))
        if not isinstance(body.get("transactions"), list):
            raise ValueError("'transactions' must be a list.")
        filter_request = FilterRequest(
            wage=wage,
            q=_parse_list(body, "q", _parse_q_moment),
            p=_parse_list(body, "p", _parse_p_moment),
            k=_parse_list(body, "k", _parse_k_moment),
            transactions=_parse_list(body, "transactions", _parse_transaction),
        )
    except (ValueError, TypeError, KeyError) as exc:
        return jsonify({"error": str(exc)}), 422

    result = filter_and_validate(filter_request)
    return jsonify(result.to_dict()), 200


#Internal field-access helpers
def _require_field(obj: Dict[str, Any], key: str) -> Any:
    if key not in obj:
        raise KeyError(f"Missing required field: {key!r}")
    return obj[key]
