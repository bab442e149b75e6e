#!/usr/bin/env python3
"""
Linking-constraint registration benchmark.

Builds a parent graph with ``--subgraphs`` children, each holding its own
backend, then registers random affine constraints on parent edges that couple
variables from two children. With ``--mirror-depth`` the edges live in nested
sub-graphs instead and are mirrored into every enclosing backend, so each
registration touches that many additional backends.
"""

from __future__ import annotations

import argparse
import math
import time
from dataclasses import dataclass
from typing import Iterable, List, Optional

import numpy as np

from linkgraph import AffExpr, Graph, LessThan, ScalarConstraint


@dataclass
class BenchmarkResult:
    scenario: str
    constraints: int
    backends_per_constraint: int
    min_s: float
    mean_s: float
    iterations: int

    @property
    def constraints_per_s(self) -> float:
        return self.constraints / self.min_s if self.min_s > 0 else math.nan


def build_linked(subgraphs: int, variables: int):
    root = Graph("root")
    columns = []
    for g in range(subgraphs):
        sub = root.add_subgraph(f"sub{g}")
        node = sub.add_node(f"n{g}")
        columns.append([node.add_variable(f"x{g}_{k}") for k in range(variables)])
    return root, columns


def build_mirrored(depth: int, variables: int):
    root = Graph("root")
    chain = [root]
    for level in range(depth):
        chain.append(chain[-1].add_subgraph(f"level{level}"))
    leaf = chain[-1]
    a, b = leaf.add_node("a"), leaf.add_node("b")
    columns = [
        [a.add_variable(f"a{k}") for k in range(variables)],
        [b.add_variable(f"b{k}") for k in range(variables)],
    ]
    edge = leaf.add_edge([a, b], label="link")
    for graph in reversed(chain[:-1]):
        leaf.mirror_edge(edge, graph)
    return edge, columns


def register_linked(*, subgraphs: int, variables: int, constraints: int, seed: int) -> int:
    rng = np.random.default_rng(seed)
    root, columns = build_linked(subgraphs, variables)
    nodes = [cols[0].node for cols in columns]
    backends = 0
    for c in range(constraints):
        i, j = rng.choice(subgraphs, size=2, replace=False)
        edge = root.add_edge([nodes[i], nodes[j]], label=f"e{c}")
        picks = rng.integers(0, variables, size=2)
        coefs = rng.normal(size=2)
        expr = AffExpr.from_terms(
            [(coefs[0], columns[i][picks[0]]), (coefs[1], columns[j][picks[1]])]
        )
        edge.add_constraint(ScalarConstraint(expr, LessThan(float(rng.random()))))
        backends = len(edge.containing_graphs())
    return backends


def register_mirrored(*, depth: int, variables: int, constraints: int, seed: int) -> int:
    rng = np.random.default_rng(seed)
    edge, columns = build_mirrored(depth, variables)
    for _ in range(constraints):
        picks = rng.integers(0, variables, size=2)
        coefs = rng.normal(size=2)
        expr = AffExpr.from_terms(
            [(coefs[0], columns[0][picks[0]]), (coefs[1], columns[1][picks[1]])]
        )
        edge.add_constraint(ScalarConstraint(expr, LessThan(float(rng.random()))))
    return len(edge.containing_graphs())


def bench(fn, *, iterations: int, warmup: int) -> List[float]:
    timings = []
    for step in range(iterations + warmup):
        start = time.perf_counter()
        fn()
        elapsed = time.perf_counter() - start
        if step >= warmup:
            timings.append(elapsed)
    return timings


def format_results(results: Iterable[BenchmarkResult]) -> str:
    header = (
        f"{'scenario':<10} {'cons':>8} {'backends':>9} {'min (ms)':>12} "
        f"{'mean (ms)':>12} {'iters':>6} {'cons/s':>12}"
    )
    rows = [header]
    for r in results:
        rows.append(
            f"{r.scenario:<10} {r.constraints:8d} {r.backends_per_constraint:9d} "
            f"{r.min_s * 1e3:12.3f} {r.mean_s * 1e3:12.3f} {r.iterations:6d} "
            f"{r.constraints_per_s:12.1f}"
        )
    return "\n".join(rows)


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Benchmark linkgraph constraint registration.")
    parser.add_argument("--subgraphs", type=int, default=16, help="Child graphs (default: 16).")
    parser.add_argument(
        "--variables", type=int, default=64, help="Variables per node (default: 64)."
    )
    parser.add_argument(
        "--constraints", type=int, default=2000, help="Constraints per run (default: 2000)."
    )
    parser.add_argument(
        "--mirror-depth", type=int, default=3, help="Enclosing backends per edge (default: 3)."
    )
    parser.add_argument("--seed", type=int, default=2024, help="Random seed (default: 2024).")
    parser.add_argument("--iterations", type=int, default=5, help="Timed runs (default: 5).")
    parser.add_argument("--warmup", type=int, default=1, help="Discarded runs (default: 1).")
    return parser.parse_args(argv)


def main(argv: Optional[Iterable[str]] = None) -> int:
    args = parse_args(argv)
    results = []

    linked_backends = []

    def run_linked():
        linked_backends.append(
            register_linked(
                subgraphs=args.subgraphs,
                variables=args.variables,
                constraints=args.constraints,
                seed=args.seed,
            )
        )

    timings = bench(run_linked, iterations=args.iterations, warmup=args.warmup)
    results.append(
        BenchmarkResult(
            scenario="linked",
            constraints=args.constraints,
            backends_per_constraint=linked_backends[-1],
            min_s=min(timings),
            mean_s=sum(timings) / len(timings),
            iterations=args.iterations,
        )
    )

    mirrored_backends = []

    def run_mirrored():
        mirrored_backends.append(
            register_mirrored(
                depth=args.mirror_depth,
                variables=args.variables,
                constraints=args.constraints,
                seed=args.seed,
            )
        )

    timings = bench(run_mirrored, iterations=args.iterations, warmup=args.warmup)
    results.append(
        BenchmarkResult(
            scenario="mirrored",
            constraints=args.constraints,
            backends_per_constraint=mirrored_backends[-1],
            min_s=min(timings),
            mean_s=sum(timings) / len(timings),
            iterations=args.iterations,
        )
    )

    print(format_results(results))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
