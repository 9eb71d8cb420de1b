"""
Plain 3D vectors and drift-free vector accumulators.

:class:`Vec3` is the input/output currency: callers build plain vectors, feed
them into a :class:`Vec3Accumulator` and later resolve a plain vector back
out. Accumulation is compensated per axis; everything on :class:`Vec3` itself
is ordinary floating-point arithmetic.
"""

import logging
import math
import numbers
from dataclasses import dataclass
from typing import ClassVar, Iterator, Union

import numpy as np
import torch

from .config import DEFAULT_TENSOR_DTYPE, VEC3_COMPONENTS, VEC3_DTYPE, VEC3_NBYTES
from .core import NeumaierAccumulator, TensorNeumaierAccumulator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Vec3:
    """
    A standard 3D vector of binary64 components.

    Used for inputs and outputs. For accumulation across many operations use
    :class:`Vec3Accumulator` instead.
    """

    x: float
    y: float
    z: float

    ZERO: ClassVar["Vec3"]

    def __post_init__(self):
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))
        object.__setattr__(self, "z", float(self.z))

    def to_bytes(self) -> bytes:
        """
        Raw little-endian IEEE-754 bytes, x then y then z (24 bytes).

        This is the only valid basis for determinism hashing. Text formatting
        of floats is not bit-stable across platforms and must not be hashed.
        """
        return np.array((self.x, self.y, self.z), dtype=VEC3_DTYPE).tobytes()

    @classmethod
    def from_bytes(cls, buffer: Union[bytes, bytearray, memoryview]) -> "Vec3":
        """
        Reconstruct a vector from :meth:`to_bytes` output.

        The round trip is bit-identical, which checkpoint restore and replay
        branching rely on.

        Raises:
            TypeError: If ``buffer`` is not bytes-like
            ValueError: If ``buffer`` is not exactly 24 bytes long
        """
        view = memoryview(buffer)
        if view.nbytes != VEC3_NBYTES:
            logger.debug("Rejected Vec3 buffer of %d bytes", view.nbytes)
            raise ValueError(f"Vec3 buffer must be exactly {VEC3_NBYTES} bytes, got {view.nbytes}")

        x, y, z = np.frombuffer(view, dtype=VEC3_DTYPE).tolist()
        return cls(x, y, z)

    def to_numpy(self) -> np.ndarray:
        """Copy of the components as a length-3 float64 array."""
        return np.array((self.x, self.y, self.z), dtype=np.float64)

    @classmethod
    def from_numpy(cls, array) -> "Vec3":
        """Build a vector from a length-3 array; other shapes raise ValueError."""
        array = np.asarray(array, dtype=np.float64)
        if array.shape != (VEC3_COMPONENTS,):
            raise ValueError(f"Expected array of shape (3,), got {array.shape}")
        return cls(*array.tolist())

    def dot(self, other: "Vec3") -> float:
        """Compute the dot product with another vector."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def magnitude_squared(self) -> float:
        """Compute the squared magnitude (avoids sqrt)."""
        return self.dot(self)

    def magnitude(self) -> float:
        """Compute the Euclidean length."""
        return math.sqrt(self.magnitude_squared())

    def scale(self, scalar: float) -> "Vec3":
        """Multiply each component by a binary64 scalar."""
        scalar = float(scalar)
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    def __add__(self, other):
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other):
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self):
        return Vec3(-self.x, -self.y, -self.z)

    def __mul__(self, scalar):
        if not isinstance(scalar, numbers.Real):
            return NotImplemented
        return self.scale(float(scalar))

    __rmul__ = __mul__

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))


Vec3.ZERO = Vec3(0.0, 0.0, 0.0)


class Vec3Accumulator:
    """
    A 3D spatial accumulator.

    Uses Neumaier-compensated summation on each axis independently, keeping
    the error bounded regardless of operation count.

    Example:
        >>> acc = Vec3Accumulator()
        >>> for _ in range(100_000):
        ...     acc.add(Vec3(1e15, 1e-15, 1.0))
        ...     acc.add(Vec3(-1e15, -1e-15, -1.0))
        >>> abs(acc.resolve().x) < 1e-10
        True
    """

    __slots__ = ("x", "y", "z")

    def __init__(self):
        self.x = NeumaierAccumulator()
        self.y = NeumaierAccumulator()
        self.z = NeumaierAccumulator()

    @classmethod
    def with_initial(cls, initial: Vec3) -> "Vec3Accumulator":
        """Create an accumulator seeded with ``initial``."""
        acc = cls()
        acc.x = NeumaierAccumulator(initial.x)
        acc.y = NeumaierAccumulator(initial.y)
        acc.z = NeumaierAccumulator(initial.z)
        return acc

    def add(self, vec: Vec3):
        """Add a vector to the accumulator."""
        self.x.add(vec.x)
        self.y.add(vec.y)
        self.z.add(vec.z)

    def add_scaled(self, vec: Vec3, scalar: float):
        """
        Add ``vec * scalar`` to the accumulator.

        Note:
            The multiplication is NOT compensated. Only the accumulation into
            the running totals uses Neumaier summation; ``vec.x * scalar`` is
            plain binary64 arithmetic. Callers that need a compensated product
            must compute it themselves and pass the result to :meth:`add`.
        """
        scalar = float(scalar)
        self.x.add(vec.x * scalar)
        self.y.add(vec.y * scalar)
        self.z.add(vec.z * scalar)

    def resolve(self) -> Vec3:
        """Extract the compensated total of each axis as a plain vector."""
        return Vec3(self.x.total(), self.y.total(), self.z.total())

    def reset(self):
        """Reset the accumulator to zero."""
        self.x.reset()
        self.y.reset()
        self.z.reset()

    def copy(self) -> "Vec3Accumulator":
        """Independent accumulator with identical per-axis state."""
        clone = Vec3Accumulator()
        clone.x = self.x.copy()
        clone.y = self.y.copy()
        clone.z = self.z.copy()
        return clone

    def __repr__(self):
        return f"Vec3Accumulator({self.resolve()!r})"


class BatchVec3Accumulator:
    """
    Drift-free accumulator for ``n`` vectors at once.

    Row ``i`` behaves exactly like an independent :class:`Vec3Accumulator`.
    Backed by a single :class:`TensorNeumaierAccumulator` of shape ``(n, 3)``.
    """

    def __init__(self, n: int, dtype=DEFAULT_TENSOR_DTYPE, device=None):
        """
        Initialize batch accumulator.

        Args:
            n: Number of vectors (bodies) tracked
            dtype: Data type for the accumulator
            device: Device to place the tensors on
        """
        self.n = int(n)
        self._acc = TensorNeumaierAccumulator((self.n, VEC3_COMPONENTS), dtype=dtype, device=device)
        logger.debug("BatchVec3Accumulator n=%d dtype=%s device=%s", self.n, dtype, self._acc.device)

    @classmethod
    def with_initial(cls, positions, dtype=DEFAULT_TENSOR_DTYPE, device=None) -> "BatchVec3Accumulator":
        """Create an accumulator seeded with an ``(n, 3)`` tensor or array."""
        positions = torch.as_tensor(positions)
        if positions.ndim != 2 or positions.shape[1] != VEC3_COMPONENTS:
            raise ValueError(f"Expected positions of shape (n, 3), got {tuple(positions.shape)}")

        acc = cls(positions.shape[0], dtype=dtype, device=device)
        acc._acc = TensorNeumaierAccumulator(acc._acc.shape, dtype=dtype, device=acc._acc.device,
                                             initial=positions)
        return acc

    @property
    def dtype(self):
        return self._acc.dtype

    @property
    def device(self):
        return self._acc.device

    def add(self, vectors: Union[torch.Tensor, np.ndarray]):
        """Add an ``(n, 3)`` batch of vectors (or one ``(3,)`` vector to every row)."""
        self._acc.add(vectors)

    def add_scaled(self, vectors: Union[torch.Tensor, np.ndarray],
                   scalar: Union[float, torch.Tensor, np.ndarray]):
        """
        Add ``vectors * scalar``.

        ``scalar`` is a number or a per-row ``(n,)`` tensor. As with
        :meth:`Vec3Accumulator.add_scaled`, the multiplication is NOT
        compensated.
        """
        vectors = self._acc._as_tensor(vectors)
        if not isinstance(scalar, (int, float)):
            scalar = torch.as_tensor(scalar).to(dtype=self.dtype, device=self.device)
            if scalar.ndim == 1:
                scalar = scalar.unsqueeze(-1)
            try:
                broadcast = torch.broadcast_shapes(scalar.shape, self._acc.shape)
            except RuntimeError:
                broadcast = None
            if broadcast != self._acc.shape:
                raise ValueError(
                    f"Cannot scale a batch of {self.n} vectors by scalar of shape {tuple(scalar.shape)}"
                )
        self._acc.add(vectors * scalar)

    def resolve(self) -> torch.Tensor:
        """Compensated totals as an ``(n, 3)`` tensor."""
        return self._acc.total()

    def resolve_vec3(self, index: int) -> Vec3:
        """Compensated total of row ``index`` as a plain vector."""
        return Vec3(*self.resolve()[index].tolist())

    def reset(self):
        """Reset every row to zero."""
        self._acc.reset()

    def __len__(self):
        return self.n
