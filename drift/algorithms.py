"""
High-level algorithms built on Neumaier summation.

Whole-sequence reductions for scalars and vectors, plus the batch form of the
24-byte vector encoding used by checkpoint files that hold many vectors.
"""

import logging
from typing import Iterable, List, Union

import numpy as np
import torch

from .config import VEC3_COMPONENTS, VEC3_DTYPE, VEC3_NBYTES
from .core import neumaier_add
from .vector import Vec3, Vec3Accumulator

logger = logging.getLogger(__name__)


def neumaier_sum(values: Union[Iterable[float], torch.Tensor, np.ndarray]) -> float:
    """
    Compute sum using Neumaier compensated summation.

    Args:
        values: Iterable, array or tensor of values to sum

    Returns:
        Compensated sum as a python float
    """
    if isinstance(values, torch.Tensor):
        values = values.detach().cpu().numpy()
    elif not isinstance(values, np.ndarray):
        values = np.asarray(list(values), dtype=np.float64)

    values = values.ravel()
    if len(values) == 0:
        return 0.0

    sum_val = 0.0
    c = 0.0
    for value in values.tolist():
        sum_val, c = neumaier_add(sum_val, value, c)

    return sum_val + c


def vec3_sum(vectors: Iterable[Vec3]) -> Vec3:
    """
    Compensated sum of a sequence of vectors.

    Args:
        vectors: Vectors to sum

    Returns:
        The per-axis compensated total
    """
    acc = Vec3Accumulator()
    for vec in vectors:
        acc.add(vec)
    return acc.resolve()


def encode_vectors(array: Union[np.ndarray, torch.Tensor, List[Vec3]]) -> bytes:
    """
    Encode an ``(n, 3)`` batch of vectors.

    Row ``i`` of the output occupies bytes ``[24 * i, 24 * (i + 1))`` and is
    identical to ``Vec3(*array[i]).to_bytes()``.
    """
    if isinstance(array, torch.Tensor):
        array = array.detach().cpu().numpy()
    elif isinstance(array, (list, tuple)):
        array = np.array([tuple(v) for v in array], dtype=np.float64).reshape(-1, VEC3_COMPONENTS)

    array = np.asarray(array)
    if array.ndim != 2 or array.shape[1] != VEC3_COMPONENTS:
        raise ValueError(f"Expected array of shape (n, 3), got {array.shape}")

    return np.ascontiguousarray(array, dtype=VEC3_DTYPE).tobytes()


def decode_vectors(buffer: Union[bytes, bytearray, memoryview]) -> np.ndarray:
    """
    Decode the output of :func:`encode_vectors`.

    Returns:
        ``(n, 3)`` float64 array in native byte order

    Raises:
        ValueError: If the buffer length is not a multiple of 24 bytes
    """
    view = memoryview(buffer)
    if view.nbytes % VEC3_NBYTES != 0:
        logger.debug("Rejected vector batch buffer of %d bytes", view.nbytes)
        raise ValueError(
            f"Vector batch buffer length must be a multiple of {VEC3_NBYTES} bytes, got {view.nbytes}"
        )
    if view.nbytes == 0:
        return np.empty((0, VEC3_COMPONENTS), dtype=np.float64)

    decoded = np.frombuffer(view, dtype=VEC3_DTYPE).reshape(-1, VEC3_COMPONENTS)
    return decoded.astype(np.float64)
