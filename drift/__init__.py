"""
Drift: drift-free 3D accumulators

Compensated (Neumaier) summation for long-running physics simulations, where
naive floating-point accumulation of millions of small updates drifts.

This library provides:
- A scalar Neumaier accumulator and its single-step form
- A plain 3D vector type with a bit-exact 24-byte encoding
- A per-axis compensated vector accumulator
- Tensor-backed accumulators for many bodies at once
"""

import logging

from .core import NeumaierAccumulator, TensorNeumaierAccumulator, neumaier_add
from .vector import Vec3, Vec3Accumulator, BatchVec3Accumulator
from .algorithms import (
    neumaier_sum,
    vec3_sum,
    encode_vectors,
    decode_vectors
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"
__author__ = "Drift Contributors"

__all__ = [
    "NeumaierAccumulator",
    "TensorNeumaierAccumulator",
    "neumaier_add",
    "Vec3",
    "Vec3Accumulator",
    "BatchVec3Accumulator",
    "neumaier_sum",
    "vec3_sum",
    "encode_vectors",
    "decode_vectors"
]
