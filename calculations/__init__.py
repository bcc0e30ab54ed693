"""
Calculation utilities for the HamClock data service.

This module contains calculation utilities for:
- Great circle distance and day/night tests
- MUF / LUF estimates
- Per-band, per-hour propagation reliability
"""

from .propagation_calculator import PropagationCalculator, calculate_band_reliability

__all__ = [
    'PropagationCalculator',
    'calculate_band_reliability'
]
