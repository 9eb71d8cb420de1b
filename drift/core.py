"""
Core compensated summation implementations.

This module contains the Neumaier variant of Kahan summation, both as a
scalar accumulator over python floats and as an element-wise accumulator
over torch tensors.
"""

import logging
from typing import Optional, Tuple, Union

import numpy as np
import torch

from .config import DEFAULT_TENSOR_DTYPE, default_device

logger = logging.getLogger(__name__)


def neumaier_add(total: float, value: float, correction: float = 0.0) -> Tuple[float, float]:
    """
    Single-step Neumaier addition.

    The rounding residue of ``total + value`` is computed from whichever
    operand has the larger magnitude; computing it from the smaller one
    loses the residue itself.

    Args:
        total: Current running sum
        value: Value to add
        correction: Current compensation term

    Returns:
        Tuple of (new_sum, new_correction)
    """
    t = total + value
    if abs(total) >= abs(value):
        correction += (total - t) + value
    else:
        correction += (value - t) + total
    return t, correction


class NeumaierAccumulator:
    """
    Neumaier summation accumulator for a single float.

    Keeps ``sum + correction`` within a few ulps of the exact sum of every
    value added since the last reset, however many additions were made.

    Attributes:
        sum: The running total
        correction: Rounding residue not yet folded into ``sum``
    """

    __slots__ = ("sum", "correction")

    def __init__(self, initial: float = 0.0):
        self.sum = float(initial)
        self.correction = 0.0

    def add(self, value: float):
        """Add value with Neumaier compensation."""
        self.sum, self.correction = neumaier_add(self.sum, float(value), self.correction)

    def total(self) -> float:
        """Get compensated sum."""
        return self.sum + self.correction

    def reset(self):
        """Reset the accumulator to zero."""
        self.sum = 0.0
        self.correction = 0.0

    def copy(self) -> "NeumaierAccumulator":
        """Independent accumulator with identical sum and correction."""
        clone = NeumaierAccumulator(self.sum)
        clone.correction = self.correction
        return clone

    def __repr__(self):
        return f"NeumaierAccumulator(sum={self.sum!r}, correction={self.correction!r})"


class TensorNeumaierAccumulator:
    """
    Element-wise Neumaier accumulator over a tensor.

    Each element is an independent compensated accumulator; elements never
    interact. Element i of ``total()`` is identical to what a
    :class:`NeumaierAccumulator` fed the same values would return.

    Attributes:
        sum: The accumulated sum tensor
        correction: The compensation tensor
    """

    def __init__(self, shape=(), dtype=DEFAULT_TENSOR_DTYPE, device=None,
                 initial: Optional[Union[torch.Tensor, np.ndarray, float]] = None):
        """
        Initialize tensor accumulator.

        Args:
            shape: Shape of the accumulator tensors
            dtype: Data type for the accumulator
            device: Device to place the tensors on
            initial: Optional seed value, broadcast to ``shape``
        """
        self.shape = torch.Size(shape)
        self.dtype = dtype
        self.device = torch.device(device) if device is not None else default_device()

        self.sum = torch.zeros(self.shape, dtype=dtype, device=self.device)
        self.correction = torch.zeros(self.shape, dtype=dtype, device=self.device)
        if initial is not None:
            self.sum = self._as_tensor(initial).expand(self.shape).clone()

    def _as_tensor(self, value) -> torch.Tensor:
        if isinstance(value, (int, float)):
            return torch.tensor(value, dtype=self.dtype, device=self.device)

        value = torch.as_tensor(value).to(dtype=self.dtype, device=self.device)
        try:
            broadcast = torch.broadcast_shapes(value.shape, self.shape)
        except RuntimeError:
            broadcast = None
        if broadcast != self.shape:
            raise ValueError(
                f"Cannot accumulate value of shape {tuple(value.shape)} "
                f"into accumulator of shape {tuple(self.shape)}"
            )
        return value

    def add(self, value: Union[torch.Tensor, np.ndarray, float]):
        """
        Add value with element-wise Neumaier compensation.

        Args:
            value: Tensor broadcastable to the accumulator shape, or a number
        """
        value = self._as_tensor(value)

        t = self.sum + value
        self.correction = self.correction + torch.where(
            self.sum.abs() >= value.abs(),
            (self.sum - t) + value,
            (value - t) + self.sum,
        )
        self.sum = t

    def total(self) -> torch.Tensor:
        """Get compensated sum."""
        return self.sum + self.correction

    def reset(self):
        """Reset the accumulator to zero."""
        self.sum.zero_()
        self.correction.zero_()

    def copy(self) -> "TensorNeumaierAccumulator":
        """Independent accumulator with cloned tensors."""
        clone = TensorNeumaierAccumulator(self.shape, dtype=self.dtype, device=self.device)
        clone.sum = self.sum.clone()
        clone.correction = self.correction.clone()
        return clone
