"""
Performance metrics route.

Endpoint
--------
GET /blackrock/challenge/v1/performance

Returns the time elapsed since the current request started, process RSS
memory usage, and active thread count.
"""

from __future__ import annotations

from flask import Blueprint, Response, g, jsonify

from selfinvest.utils.performance import generate_report

performance_bp = Blueprint("performance", __name__)

BASE = "/blackrock/challenge/v1"


@performance_bp.route(f"{BASE}/performance", methods=["GET"])
def get_performance() -> tuple[Response, int]:
    """
    Return a live performance snapshot.

    Response body::

        {
            "time":    "HH:mm:ss.SSS",
            "memory":  "XXX.XX MB",
            "threads": integer
        }

    * **time** – elapsed time since this request started.
    * **memory** – current process RSS (from :mod:`psutil`).
    * **threads** – active Python thread count (``threading.active_count()``).
    """
    report = generate_report(g.start_time)
    return jsonify(report.to_dict()), 200
