"""
Structured record adapter for :class:`~drift.vector.Vec3`.

Exposes a vector as a record with fields ``x``, ``y`` and ``z`` for
configuration files and debugging output. Records go through text
formatting of floats, so they must never be used for determinism hashing;
use :meth:`Vec3.to_bytes` for that.

Requires the ``serialization`` extra (pydantic).
"""

from typing import Mapping, Union

from pydantic import BaseModel

from .vector import Vec3


class Vec3Record(BaseModel):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


def to_record(vector: Vec3) -> Vec3Record:
    return Vec3Record(x=vector.x, y=vector.y, z=vector.z)


def from_record(record: Union[Vec3Record, Mapping[str, float]]) -> Vec3:
    """Build a vector from a record or a plain ``{"x": .., "y": .., "z": ..}`` mapping."""
    if not isinstance(record, Vec3Record):
        record = Vec3Record(**record)
    return Vec3(record.x, record.y, record.z)
