#!/usr/bin/env python3
"""
Accuracy comparison benchmarks for drift accumulators.

Compares naive running sums, classic Kahan summation and the Neumaier
accumulator on long incremental-update workloads with known exact results.
"""

import numpy as np
import pandas as pd
from fractions import Fraction
from typing import Dict, List, Tuple
import sys
sys.path.append('..')

from drift import NeumaierAccumulator


def naive_sum(values: List[float]) -> float:
    total = 0.0
    for v in values:
        total += v
    return total


def classic_kahan_sum(values: List[float]) -> float:
    total = 0.0
    c = 0.0
    for v in values:
        y = v - c
        t = total + y
        c = (t - total) - y
        total = t
    return total


def neumaier_total(values: List[float]) -> float:
    acc = NeumaierAccumulator()
    for v in values:
        acc.add(v)
    return acc.total()


class AccuracyBenchmark:
    """
    Accuracy benchmark suite for incremental accumulation.
    """

    def __init__(self):
        self.algorithms = {
            'naive': naive_sum,
            'kahan': classic_kahan_sum,
            'neumaier': neumaier_total,
        }

        self.results = []

    def generate_test_case(self, case_type: str, size: int) -> Tuple[List[float], float]:
        """
        Generate test cases with exact results.

        Args:
            case_type: Type of test case
            size: Number of updates

        Returns:
            Tuple of (values, exact_result)
        """
        rng = np.random.default_rng(42)

        if case_type == 'frame_integration':
            # Velocity * dt added once per frame
            values = [1.0 / 60.0] * size
        elif case_type == 'large_offset':
            # Small steps on top of a large starting position
            values = [1e9] + rng.normal(0.0, 1e-6, size).tolist()
        elif case_type == 'cancelling_swings':
            # Large balanced swings with a unit residue
            swings = 10.0 ** rng.uniform(15, 16, size // 2)
            values = np.concatenate([swings, -swings, [1.0]])
            rng.shuffle(values)
            values = values.tolist()
        elif case_type == 'small_then_large':
            # Small terms absorbed by a much larger later term
            values = [1.0, 1e100, 1.0, -1e100] * (size // 4)
        else:
            raise ValueError(f"Unknown case type: {case_type}")

        exact = float(sum(Fraction(v) for v in values))
        return values, exact

    def run_single_benchmark(self, test_name: str, values: List[float], exact: float) -> Dict:
        result = {'test_name': test_name, 'size': len(values), 'exact': exact}

        for name, func in self.algorithms.items():
            computed = func(values)
            result[f'{name}_abs_error'] = abs(computed - exact)

        return result

    def run_comprehensive_benchmark(self) -> pd.DataFrame:
        test_cases = ['frame_integration', 'large_offset', 'cancelling_swings', 'small_then_large']
        sizes = [1_000, 10_000, 100_000]

        total_tests = len(test_cases) * len(sizes)
        test_count = 0

        for case_type in test_cases:
            for size in sizes:
                test_count += 1
                test_name = f"{case_type}_{size}"
                print(f"[{test_count}/{total_tests}] Running {test_name}...")

                values, exact = self.generate_test_case(case_type, size)
                result = self.run_single_benchmark(test_name, values, exact)
                result['case_type'] = case_type
                self.results.append(result)

        return pd.DataFrame(self.results)

    def analyze_results(self, df: pd.DataFrame) -> None:
        print("\n" + "=" * 80)
        print("ACCURACY BENCHMARK ANALYSIS")
        print("=" * 80)

        columns = [f'{name}_abs_error' for name in self.algorithms]
        print(df[['test_name'] + columns].to_string(index=False, float_format=lambda v: f"{v:.2e}"))

        print("\nMAX ABSOLUTE ERROR BY CASE:")
        print(df.groupby('case_type')[columns].max().to_string(float_format=lambda v: f"{v:.2e}"))


def main():
    """Run the accuracy benchmark suite."""
    print("DRIFT ACCUMULATOR LIBRARY - ACCURACY BENCHMARK")
    print("=" * 60)

    benchmark = AccuracyBenchmark()
    results_df = benchmark.run_comprehensive_benchmark()

    results_df.to_csv('accuracy_benchmark_results.csv', index=False)
    print("\nResults saved to accuracy_benchmark_results.csv")

    benchmark.analyze_results(results_df)


if __name__ == "__main__":
    main()
