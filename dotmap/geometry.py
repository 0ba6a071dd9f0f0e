"""Geometry and hit-testing helpers for the DotMap canvas.

Everything here is pure: no state, no snapshots. Positions are ``(x, y)``
tuples in canvas space with y pointing down, so an angle of 90 degrees points
towards the bottom of the canvas.
"""
from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence, Tuple, TypeVar

Point = Tuple[float, float]

T = TypeVar("T")


def distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Return the Euclidean distance between two points."""
    return math.hypot(float(a[0]) - float(b[0]), float(a[1]) - float(b[1]))


def within_radius(point: Sequence[float], center: Sequence[float], radius: float) -> bool:
    """True when ``point`` lies inside or on the circle around ``center``."""
    return distance(point, center) <= radius


def normalize_angle(angle: float) -> float:
    """Fold any angle in degrees into ``[0, 360)``."""
    return ((angle % 360.0) + 360.0) % 360.0


def normalize_direction(angle: float) -> int:
    """Round an angle to whole degrees in ``[0, 359]``.

    Halves round up and rounding happens after normalization, so 359.6
    becomes 0 rather than 360.
    """
    return int(math.floor(normalize_angle(float(angle)) + 0.5)) % 360


def angle_between(origin: Sequence[float], target: Sequence[float]) -> float:
    """Raw angle in degrees of the ray ``origin -> target``, in ``(-180, 180]``."""
    dy = float(target[1]) - float(origin[1])
    dx = float(target[0]) - float(origin[0])
    return math.degrees(math.atan2(dy, dx))


def direction_from_points(origin: Sequence[float], target: Sequence[float]) -> int:
    """Whole-degree direction in ``[0, 359]`` pointing from ``origin`` at ``target``."""
    return normalize_direction(angle_between(origin, target))


def direction_endpoint(origin: Sequence[float], direction: float, length: float) -> Point:
    """End of a ray of ``length`` leaving ``origin`` at ``direction`` degrees."""
    rad = math.radians(direction)
    return (float(origin[0]) + math.cos(rad) * length, float(origin[1]) + math.sin(rad) * length)


def arrowhead_points(tail: Sequence[float], tip: Sequence[float], head_length: float) -> Tuple[Point, Point, Point]:
    """Triangle for an arrowhead at ``tip``, wings at +/-30 degrees from the shaft."""
    angle = math.atan2(float(tip[1]) - float(tail[1]), float(tip[0]) - float(tail[0]))
    tx, ty = float(tip[0]), float(tip[1])
    left = (tx - head_length * math.cos(angle - math.pi / 6), ty - head_length * math.sin(angle - math.pi / 6))
    right = (tx - head_length * math.cos(angle + math.pi / 6), ty - head_length * math.sin(angle + math.pi / 6))
    return (tx, ty), left, right


def pick_first(point: Sequence[float], candidates: Iterable[Tuple[T, Sequence[float]]], radius: float) -> Optional[T]:
    """Return the first candidate whose center is within ``radius`` of ``point``.

    ``candidates`` yields ``(item, center)`` pairs; list order decides ties.
    """
    for item, center in candidates:
        if within_radius(point, center, radius):
            return item
    return None


def pick_nearest(point: Sequence[float], candidates: Iterable[Tuple[T, Sequence[float]]], radius: float) -> Optional[T]:
    """Return the candidate closest to ``point`` within ``radius``.

    Equal distances keep the earlier candidate.
    """
    best: Optional[T] = None
    best_dist = float(radius)
    found = False
    for item, center in candidates:
        dist = distance(point, center)
        if dist <= radius and (not found or dist < best_dist):
            best = item
            best_dist = dist
            found = True
    return best
