"""
Rate limiting package for the commissioning client.

Holds the admission gate that keeps registry submissions inside the
configured requests-per-time-unit quota.
"""

from .permit_gate import RateGate

__all__ = ["RateGate"]
