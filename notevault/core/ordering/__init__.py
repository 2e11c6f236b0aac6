"""Ordering engine and dense-position rules."""

from notevault.core.ordering.engine import OrderingEngine
from notevault.core.ordering.positions import (
    MovePlan,
    clamp,
    in_scope,
    next_position,
    plan_move,
    presentation_order,
    renumber,
)

__all__ = [
    "OrderingEngine",
    "MovePlan",
    "clamp",
    "in_scope",
    "next_position",
    "plan_move",
    "presentation_order",
    "renumber",
]
