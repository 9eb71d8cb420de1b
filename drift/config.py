"""
Package-wide constants for drift accumulators.

The byte layout constants are load-bearing for checkpoint files and replay
logs written elsewhere; changing them breaks interoperability.
"""

import os

import numpy as np
import torch

# Three little-endian IEEE-754 binary64 values, ordered x, y, z
VEC3_DTYPE = np.dtype("<f8")
VEC3_COMPONENTS = 3
VEC3_NBYTES = VEC3_COMPONENTS * VEC3_DTYPE.itemsize  # 24

DEFAULT_TENSOR_DTYPE = torch.float64


def default_device() -> torch.device:
    """Device used by tensor accumulators when none is given."""
    return torch.device(os.environ.get("DRIFT_DEFAULT_DEVICE", "cpu"))
