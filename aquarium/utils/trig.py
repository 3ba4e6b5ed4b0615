"""
Integer trigonometry for cosmetic waveforms.

Angles follow the watch convention: one full turn is TRIG_MAX_ANGLE and the
lookups return integers scaled by TRIG_MAX_RATIO. A single numpy table is
computed at import time; lookups are plain indexing.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

TRIG_MAX_ANGLE = 0x10000
TRIG_MAX_RATIO = 0xFFFF

# Table resolution: 1024 samples per turn, indexed by angle >> 6.
_TABLE_BITS = 10
_TABLE_SIZE = 1 << _TABLE_BITS
_ANGLE_SHIFT = 16 - _TABLE_BITS

_SIN_TABLE: NDArray[np.int32] = np.round(
    np.sin(np.arange(_TABLE_SIZE) * (2.0 * np.pi / _TABLE_SIZE)) * TRIG_MAX_RATIO
).astype(np.int32)


def normalize_angle(angle: int) -> int:
    """Wrap any integer angle into [0, TRIG_MAX_ANGLE)."""
    return angle % TRIG_MAX_ANGLE


def sin_lookup(angle: int) -> int:
    """
    Integer sine.

    Args:
        angle: Angle in TRIG_MAX_ANGLE units (any integer, wrapped).

    Returns:
        sin(angle) * TRIG_MAX_RATIO as an int.
    """
    return int(_SIN_TABLE[normalize_angle(angle) >> _ANGLE_SHIFT])


def cos_lookup(angle: int) -> int:
    """Integer cosine (sine shifted by a quarter turn)."""
    return sin_lookup(angle + TRIG_MAX_ANGLE // 4)


def wave_offset(phase: int, amplitude: int) -> int:
    """
    Bounded waveform offset for a phase.

    Truncates toward zero, so the result always lies in
    [-|amplitude|, |amplitude|].

    Examples:
        >>> wave_offset(TRIG_MAX_ANGLE // 4, 5)
        5
        >>> wave_offset(0, 5)
        0
    """
    return int(sin_lookup(phase) * amplitude / TRIG_MAX_RATIO)


def advance_phase(phase: int, step: int) -> int:
    """Advance a phase accumulator by step and wrap it to one turn."""
    return normalize_angle(phase + step)
