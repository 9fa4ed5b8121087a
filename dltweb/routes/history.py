from __future__ import annotations

import asyncio

from flask import Blueprint, current_app, jsonify, request

from dltsync.errors import SyncExhaustedError

from ..schemas import DrawRecordSchema, SyncResponse
from ..state import get_context

bp = Blueprint("history", __name__)


@bp.get("")
def list_history():
    history = get_context().reconciler.history
    limit = request.args.get("limit", type=int)
    if limit is not None and limit >= 0:
        history = history[:limit]
    return jsonify([DrawRecordSchema(**record.to_dict()).model_dump() for record in history])


@bp.post("/sync")
def sync_history():
    synchronizer = get_context().synchronizer
    if synchronizer.is_syncing:
        return jsonify(SyncResponse(status="busy").model_dump()), 409

    try:
        result = asyncio.run(synchronizer.sync_once())
    except SyncExhaustedError as exc:
        current_app.logger.warning(
            "Live sync failed after %s attempts: %s", len(exc.attempts), exc
        )
        return jsonify(SyncResponse(status="failed", error=str(exc)).model_dump()), 502

    if result is None:
        return jsonify(SyncResponse(status="busy").model_dump()), 409
    payload = SyncResponse(
        status="ok", fetched=result.fetched, added=result.added, total=result.total
    )
    return jsonify(payload.model_dump())
