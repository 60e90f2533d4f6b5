"""
extractor/proximity.py — greedy nearest-within-tolerance search.

Shared by the instrument matcher and the off-page-connector linker. For one
anchor token, nearest_partner() scans the candidates in order and keeps the
one with the smallest squared center-to-center distance among those within
the horizontal / vertical tolerance. Ties keep the first candidate found.

This is greedy: each anchor takes its best free partner in turn, which is
not a globally optimal assignment. Drawings label instruments and
connectors unambiguously enough for that to hold in practice.
"""

from __future__ import annotations

import math
from typing import Callable, Iterable

from data_model import Tolerance, squared_distance

from .types import Token


def within_tolerance(anchor: Token, other: Token, tolerance: Tolerance) -> bool:
    ax, ay = anchor.bbox.center
    ox, oy = other.bbox.center
    return abs(ax - ox) <= tolerance.horizontal and abs(ay - oy) <= tolerance.vertical


def nearest_partner(
    anchor: Token,
    candidates: Iterable[Token],
    tolerance: Tolerance,
    taken: Callable[[Token], bool],
    accept: Callable[[Token, Token], bool] | None = None,
) -> Token | None:
    """
    Best free candidate for anchor, or None.

    taken(candidate)          — True when the candidate is already used
    accept(anchor, candidate) — optional hard filter applied before distance
    """
    best: Token | None = None
    best_distance = math.inf
    for candidate in candidates:
        if taken(candidate):
            continue
        if accept is not None and not accept(anchor, candidate):
            continue
        if not within_tolerance(anchor, candidate, tolerance):
            continue
        distance = squared_distance(anchor.bbox.center, candidate.bbox.center)
        if distance < best_distance:
            best_distance = distance
            best = candidate
    return best
