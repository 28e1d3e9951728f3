"""CertPath utilities."""

from .rounding import round_half_up, percent

__all__ = [
    "round_half_up",
    "percent",
]
