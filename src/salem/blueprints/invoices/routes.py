"""Invoice routes."""

from __future__ import annotations

from flask import jsonify, request

from ...errors import ValidationError
from ...extensions import get_context
from ...serializers import serialize_invoice, serialize_transaction
from ...services.allocator import (
    delete_invoice,
    mark_invoice_paid,
    reopen_invoice,
    update_invoice,
)
from ...web import current_user_id, json_body, login_required, parse_id_list
from . import bp
from .forms import InvoiceUpdateForm, parse_action


@bp.get("/")
@login_required
def list_invoices():
    """All invoices, or only the open ones with ``?status=open``."""

    repo = get_context().invoice_repo
    if request.args.get("status") == "open":
        invoices = repo.list_open(user_id=current_user_id())
    else:
        invoices = repo.list_all(user_id=current_user_id())
    return jsonify([serialize_invoice(invoice) for invoice in invoices])


@bp.get("/all")
@login_required
def list_period_transactions():
    """Transactions on every card's invoice for one ``year``/``month``."""

    errors: dict[str, list[str]] = {}
    for key in ("year", "month"):
        raw = request.args.get(key, "").strip()
        if not raw.isdigit():
            errors[key] = [f"{key.capitalize()} is required."]
    if errors:
        raise ValidationError(errors)
    year = int(request.args["year"])
    month = int(request.args["month"])

    context = get_context()
    invoices = context.invoice_repo.list_for_period(
        year,
        month,
        user_id=current_user_id(),
        card_ids=parse_id_list(request.args.get("cardIds")),
    )
    rows = context.transaction_repo.filter_by_invoices(
        [invoice.id for invoice in invoices], user_id=current_user_id()
    )
    return jsonify([serialize_transaction(row) for row in rows])


@bp.patch("/<int:invoice_id>")
@login_required
def apply_invoice_action(invoice_id: int):
    action = parse_action(json_body())
    handler = mark_invoice_paid if action == "mark_paid" else reopen_invoice
    invoice = handler(invoice_id, user_id=current_user_id(), session_factory=get_context().session_factory)
    return jsonify(serialize_invoice(invoice))


@bp.put("/<int:invoice_id>")
@login_required
def edit_invoice(invoice_id: int):
    command = InvoiceUpdateForm.from_mapping(json_body()).to_command()
    invoice = update_invoice(
        invoice_id, command, user_id=current_user_id(), session_factory=get_context().session_factory
    )
    return jsonify(serialize_invoice(invoice))


@bp.delete("/<int:invoice_id>")
@login_required
def remove_invoice(invoice_id: int):
    delete_invoice(invoice_id, user_id=current_user_id(), session_factory=get_context().session_factory)
    return "", 204
