#!/usr/bin/env python3
"""
Basic usage examples for the Drift accumulator library.

This script demonstrates how naive accumulation drifts and how the
compensated accumulators keep long-running totals stable.
"""

import hashlib

# Import the drift library
import sys
sys.path.append('..')

from drift import (
    NeumaierAccumulator,
    Vec3,
    Vec3Accumulator,
    neumaier_sum,
)


def demonstrate_precision_loss():
    """Show how standard summation loses the small term."""
    print("=" * 60)
    print("DEMONSTRATION: Precision Loss in Standard Summation")
    print("=" * 60)

    data = [1e16, 1.0, -1e16]
    print(f"Test data: {data}")
    print("Expected result: 1.0")
    print()

    naive_result = 0.0
    for value in data:
        naive_result += value
    print(f"Naive sum result:     {naive_result}")

    acc = NeumaierAccumulator()
    for value in data:
        acc.add(value)
    print(f"Neumaier result:      {acc.total()}")
    print(f"  sum={acc.sum}, correction={acc.correction}")
    print(f"neumaier_sum():       {neumaier_sum(data)}")
    print()


def demonstrate_position_integration():
    """Integrate a constant velocity for an hour of 60 Hz frames."""
    print("=" * 60)
    print("DEMONSTRATION: Integrating Velocity Into Position")
    print("=" * 60)

    velocity = Vec3(1.0, 2.0, 3.0)
    dt = 1.0 / 60.0
    frames = 60 * 60 * 60

    naive = Vec3.ZERO
    position = Vec3Accumulator()
    for _ in range(frames):
        naive = naive + velocity.scale(dt)
        position.add_scaled(velocity, dt)

    expected = velocity.scale(frames / 60.0)
    resolved = position.resolve()

    print(f"Frames:         {frames}")
    print(f"Expected:       {tuple(expected)}")
    print(f"Naive:          {tuple(naive)}")
    print(f"Accumulated:    {tuple(resolved)}")
    print(f"Naive drift:    {(naive - expected).magnitude():.3e}")
    print(f"Drift:          {(resolved - expected).magnitude():.3e}")
    print()


def demonstrate_checkpointing():
    """Snapshot state as bytes and replay two identical branches."""
    print("=" * 60)
    print("DEMONSTRATION: Checkpoint and Replay")
    print("=" * 60)

    acc = Vec3Accumulator()
    acc.add(Vec3(0.1, 0.2, 0.3))
    snapshot = acc.resolve().to_bytes()
    print(f"Snapshot ({len(snapshot)} bytes): {snapshot.hex()}")
    print(f"SHA-256: {hashlib.sha256(snapshot).hexdigest()}")

    branches = []
    for _ in range(2):
        branch = Vec3Accumulator.with_initial(Vec3.from_bytes(snapshot))
        for _ in range(1000):
            branch.add_scaled(Vec3(1.0, -1.0, 0.5), 1e-3)
        branches.append(hashlib.sha256(branch.resolve().to_bytes()).hexdigest())

    print(f"Branch hashes identical: {branches[0] == branches[1]}")
    print()


def main():
    """Run all demonstrations."""
    print("DRIFT ACCUMULATOR LIBRARY - BASIC USAGE EXAMPLES")
    print("=" * 60)
    print()

    demonstrate_precision_loss()
    demonstrate_position_integration()
    demonstrate_checkpointing()

    print("=" * 60)
    print("All demonstrations completed!")
    print("=" * 60)


if __name__ == "__main__":
    main()
