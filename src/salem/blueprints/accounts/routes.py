"""Account routes."""

from __future__ import annotations

from flask import jsonify

from ...errors import RecordNotFoundError
from ...extensions import get_context
from ...models.account import Account
from ...serializers import serialize_account, serialize_transaction
from ...services.allocator import record_account_transaction
from ...web import current_user_id, json_body, login_required
from . import bp
from .forms import AccountForm, AccountTransactionForm


def _require_account(account_id: int) -> Account:
    account = get_context().account_repo.get_by_id(account_id, user_id=current_user_id())
    if account is None:
        raise RecordNotFoundError("Account", account_id)
    return account


@bp.get("/")
@login_required
def list_accounts():
    accounts = get_context().account_repo.list_all(user_id=current_user_id())
    return jsonify([serialize_account(account) for account in accounts])


@bp.post("/")
@login_required
def create_account():
    changes = AccountForm.from_mapping(json_body()).changes()
    user_id = current_user_id()
    account = get_context().account_repo.create(Account(user_id=user_id, **changes), user_id=user_id)
    return jsonify(serialize_account(account)), 201


@bp.put("/<int:account_id>")
@login_required
def update_account(account_id: int):
    changes = AccountForm.from_mapping(json_body(), partial=True).changes()
    account = get_context().account_repo.update(account_id, changes, user_id=current_user_id())
    if account is None:
        raise RecordNotFoundError("Account", account_id)
    return jsonify(serialize_account(account))


@bp.delete("/<int:account_id>")
@login_required
def delete_account(account_id: int):
    if not get_context().account_repo.delete(account_id, user_id=current_user_id()):
        raise RecordNotFoundError("Account", account_id)
    return "", 204


@bp.get("/<int:account_id>/transactions")
@login_required
def list_account_transactions(account_id: int):
    _require_account(account_id)
    rows = get_context().transaction_repo.filter_by_account(account_id, user_id=current_user_id())
    return jsonify([serialize_transaction(row) for row in rows])


@bp.post("/<int:account_id>/transactions")
@login_required
def create_account_transaction(account_id: int):
    """Record a deposit or withdrawal and move the account balance."""

    command = AccountTransactionForm.from_mapping(json_body()).to_command(account_id)
    context = get_context()
    transaction = record_account_transaction(
        command, user_id=current_user_id(), session_factory=context.session_factory
    )
    account = _require_account(account_id)
    return (
        jsonify({"transaction": serialize_transaction(transaction), "account": serialize_account(account)}),
        201,
    )
