"""Currency conversion route."""

from __future__ import annotations

import math

from flask import jsonify, request

from ...errors import ValidationError
from ...extensions import get_context
from . import bp


@bp.get("/")
def convert():
    from_currency = (request.args.get("from") or "USD").upper()
    to_currency = (request.args.get("to") or "BRL").upper()
    try:
        amount = float(request.args.get("amount") or "1")
    except ValueError as exc:
        raise ValidationError({"amount": ["Invalid amount."]}) from exc
    if not math.isfinite(amount):
        raise ValidationError({"amount": ["Invalid amount."]})

    conversion = get_context().exchange_rates.convert(amount, from_currency, to_currency)
    return jsonify(conversion.to_dict())
