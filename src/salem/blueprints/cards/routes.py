"""Card routes."""

from __future__ import annotations

from flask import jsonify, request

from ...errors import RecordNotFoundError
from ...extensions import get_context
from ...models.card import Card
from ...serializers import serialize_card, serialize_invoice, serialize_transaction
from ...services.card_billing import bill_card_purchase
from ...web import current_user_id, json_body, login_required, parse_id_list
from . import bp
from .forms import CardForm, CardTransactionForm


@bp.get("/")
@login_required
def list_cards():
    cards = get_context().card_repo.list_all(user_id=current_user_id())
    return jsonify([serialize_card(card) for card in cards])


@bp.post("/")
@login_required
def create_card():
    changes = CardForm.from_mapping(json_body()).changes()
    user_id = current_user_id()
    card = get_context().card_repo.create(Card(user_id=user_id, **changes), user_id=user_id)
    return jsonify(serialize_card(card)), 201


@bp.put("/<int:card_id>")
@login_required
def update_card(card_id: int):
    changes = CardForm.from_mapping(json_body(), partial=True).changes()
    card = get_context().card_repo.update(card_id, changes, user_id=current_user_id())
    if card is None:
        raise RecordNotFoundError("Card", card_id)
    return jsonify(serialize_card(card))


@bp.delete("/<int:card_id>")
@login_required
def delete_card(card_id: int):
    """Delete a card together with its invoices."""

    if not get_context().card_repo.delete(card_id, user_id=current_user_id()):
        raise RecordNotFoundError("Card", card_id)
    return "", 204


@bp.get("/<int:card_id>/invoices")
@login_required
def list_card_invoices(card_id: int):
    """Every invoice of one card, newest period first."""

    context = get_context()
    if context.card_repo.get_by_id(card_id, user_id=current_user_id()) is None:
        raise RecordNotFoundError("Card", card_id)
    invoices = context.invoice_repo.list_by_card(card_id, user_id=current_user_id())
    return jsonify([serialize_invoice(invoice) for invoice in invoices])


@bp.get("/<int:card_id>/transactions")
@login_required
def list_card_transactions(card_id: int):
    context = get_context()
    if context.card_repo.get_by_id(card_id, user_id=current_user_id()) is None:
        raise RecordNotFoundError("Card", card_id)
    rows = context.transaction_repo.filter_by_card(card_id, user_id=current_user_id())
    return jsonify([serialize_transaction(row) for row in rows])


@bp.post("/<int:card_id>/transactions")
@login_required
def create_card_transaction(card_id: int):
    """Bill a purchase into the invoice(s) of its billing cycle."""

    command = CardTransactionForm.from_mapping(json_body()).to_command(card_id)
    created = bill_card_purchase(
        command, user_id=current_user_id(), session_factory=get_context().session_factory
    )
    return jsonify([serialize_transaction(row) for row in created]), 201


@bp.get("/all/transactions")
@login_required
def list_all_card_transactions():
    card_ids = parse_id_list(request.args.get("cardIds"))
    rows = get_context().transaction_repo.filter_by_cards(
        card_ids,
        user_id=current_user_id(),
        finance_type=request.args.get("financeType") or None,
    )
    return jsonify([serialize_transaction(row) for row in rows])
