#!/usr/bin/env python3
"""
Pytest configuration and fixtures for drift accumulator tests.

This file contains shared test fixtures, configuration, and utilities
used across the test suite.
"""

import pytest
import numpy as np
import torch
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from drift.vector import Vec3


@pytest.fixture
def simple_vectors():
    """Balanced small case: sums to (5, 7, 9)."""
    return [Vec3(1.0, 2.0, 3.0), Vec3(4.0, 5.0, 6.0)]


@pytest.fixture
def cancellation_vectors():
    """Large, unit, then cancelling large vector; exact sum is (1, 1, 1)."""
    return [
        Vec3(1e16, 1e16, 1e16),
        Vec3(1.0, 1.0, 1.0),
        Vec3(-1e16, -1e16, -1e16),
    ]


@pytest.fixture
def neumaier_breaker():
    """Sequence where classic Kahan summation returns 0 but the exact sum is 2."""
    return [1.0, 1e100, 1.0, -1e100]


@pytest.fixture
def random_vector_array():
    """Random (n, 3) float64 array spanning several orders of magnitude."""
    rng = np.random.default_rng(42)
    n = 500
    exponents = rng.uniform(-8, 8, (n, 3))
    signs = rng.choice([-1.0, 1.0], (n, 3))
    return signs * 10.0 ** exponents


@pytest.fixture(params=["cpu"] + (["cuda"] if torch.cuda.is_available() else []))
def device(request):
    """Parameterized fixture for different devices."""
    return torch.device(request.param)


class AccuracyChecker:
    """Utility class for checking numerical accuracy."""

    @staticmethod
    def naive_vec3_sum(vectors) -> Vec3:
        """Plain running sum, the baseline that drifts."""
        x = y = z = 0.0
        for v in vectors:
            x += v.x
            y += v.y
            z += v.z
        return Vec3(x, y, z)

    @staticmethod
    def classic_kahan_sum(values) -> float:
        """Kahan summation without Neumaier's magnitude branch."""
        total = 0.0
        c = 0.0
        for value in values:
            y = value - c
            t = total + y
            c = (t - total) - y
            total = t
        return total

    @staticmethod
    def assert_vec3_close(computed: Vec3, expected: Vec3, atol: float):
        """Assert per-axis absolute error is within ``atol``."""
        for axis in ("x", "y", "z"):
            got = getattr(computed, axis)
            want = getattr(expected, axis)
            assert abs(got - want) < atol, (
                f"{axis}: expected {want}, got {got} (atol={atol})"
            )


@pytest.fixture
def accuracy_checker():
    """Fixture providing accuracy checking utilities."""
    return AccuracyChecker()


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers automatically."""
    for item in items:
        # Mark tests that take long time as slow
        if "long_horizon" in item.name or "stress" in item.name:
            item.add_marker(pytest.mark.slow)

        # Mark integration tests
        if "integration" in item.name or "end_to_end" in item.name:
            item.add_marker(pytest.mark.integration)
