"""Small helpers shared across fleet-grid."""

from .awaitables import maybe_await
from .coercion import coerce_bool, coerce_int, coerce_positive_int

__all__ = [
    "maybe_await",
    "coerce_bool",
    "coerce_int",
    "coerce_positive_int",
]
