#!/usr/bin/env python3
"""
Input query contract for player-control scripts.

Key codes follow the GLFW numbering used by the host window layer. Only the
keys the scripts poll are listed.
"""

from __future__ import annotations
from enum import IntEnum
from typing import Protocol


class KeyCode(IntEnum):
    """Keyboard key codes (GLFW values)."""
    SPACE = 32
    A = 65
    D = 68
    E = 69
    Q = 81
    S = 83
    W = 87
    ESCAPE = 256
    LEFT_SHIFT = 340
    LEFT_CONTROL = 341


class InputSource(Protocol):
    """Polled keyboard state provided by the host."""

    def is_key_pressed(self, code: KeyCode) -> bool:
        ...
