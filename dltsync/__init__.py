from .codec import decode, encode
from .prizes import backtest
from .reconciler import Reconciler, merge_history
from .trend import predict_sum
from .types import DrawRecord, PrizeTierResult

__all__ = [
    "DrawRecord",
    "PrizeTierResult",
    "Reconciler",
    "backtest",
    "decode",
    "encode",
    "merge_history",
    "predict_sum",
]
