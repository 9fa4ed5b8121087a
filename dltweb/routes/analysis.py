from __future__ import annotations

import asyncio

from flask import Blueprint, jsonify, request
from pydantic import ValidationError

from dltsync.analysis import recommend
from dltsync.prizes import backtest, prize_table
from dltsync.trend import predict_sum, sum_window

from ..schemas import (
    BacktestRequest,
    BacktestResponse,
    PrizeTierSchema,
    RecommendationResponse,
    TrendResponse,
)
from ..state import get_context

bp = Blueprint("analysis", __name__)


@bp.post("/backtest")
def run_backtest():
    payload = request.get_json(force=True, silent=True) or {}
    try:
        data = BacktestRequest(**payload)
    except ValidationError as exc:
        return jsonify({"error": exc.errors(include_url=False, include_context=False)}), 400

    history = get_context().reconciler.history
    results = backtest(data.front, data.back, history)
    if data.all_tiers:
        results = prize_table(results)
    response = BacktestResponse(
        front=sorted(data.front),
        back=sorted(data.back),
        draws_checked=len(history),
        results=[PrizeTierSchema(tier=r.tier, name=r.name, count=r.count) for r in results],
    )
    return jsonify(response.model_dump())


@bp.get("/trend")
def get_trend():
    context = get_context()
    trend = context.settings.trend
    predicted = predict_sum(context.reconciler.history, window=trend.window, default=trend.default_sum)
    low, high = sum_window(predicted, trend.spread)
    return jsonify(TrendResponse(predicted_sum=predicted, low=low, high=high, window=trend.window).model_dump())


@bp.get("/recommendation")
def get_recommendation():
    context = get_context()
    trend = context.settings.trend
    result = asyncio.run(
        recommend(
            context.reconciler.history,
            context.analysis_client,
            window=trend.window,
            default_sum=trend.default_sum,
            spread=trend.spread,
        )
    )
    low, high = result.sum_range
    response = RecommendationResponse(
        front=result.summary.front,
        back=result.summary.back,
        explanation=result.summary.explanation,
        predicted_sum=result.predicted_sum,
        low=low,
        high=high,
        fallback=result.fallback,
        results=[PrizeTierSchema(tier=r.tier, name=r.name, count=r.count) for r in result.backtest],
    )
    return jsonify(response.model_dump())
