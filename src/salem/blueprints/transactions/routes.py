"""Transaction routes."""

from __future__ import annotations

from flask import jsonify

from ...extensions import get_context
from ...services.allocator import delete_transaction
from ...web import current_user_id, login_required
from . import bp


@bp.delete("/<int:transaction_id>")
@login_required
def remove_transaction(transaction_id: int):
    """Delete a transaction; installment purchases lose every part."""

    removed = delete_transaction(
        transaction_id, user_id=current_user_id(), session_factory=get_context().session_factory
    )
    return jsonify({"deleted": removed})
