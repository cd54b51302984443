"""Application services built on the collectors, analysis and storage layers."""

from reellens.services.reconciler import ReelReconciler, build_record
from reellens.services.reports import compare_reels, get_user_analytics

__all__ = [
    "ReelReconciler",
    "build_record",
    "compare_reels",
    "get_user_analytics",
]
