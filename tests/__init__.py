"""
Test suite for the Drift accumulator library.

Test Structure:
- test_core.py: Scalar and tensor Neumaier accumulators
- test_vector.py: Vec3, its byte encoding and the vector accumulators
- test_algorithms.py: Reductions and the batch vector codec
- test_serialization.py: Structured record adapter (needs pydantic)
- conftest.py: Shared fixtures and configuration

Usage:
    # Run all tests
    pytest

    # Run tests with coverage
    pytest --cov=drift

    # Run only fast tests
    pytest -m "not slow"
"""

__version__ = "1.0.0"
