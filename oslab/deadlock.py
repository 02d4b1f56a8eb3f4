"""Banker's algorithm safety check and deadlock detection."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

Matrix = Sequence[Sequence[int]]


@dataclass(frozen=True)
class DetectionResult:
    """Outcome of deadlock detection."""

    deadlocked: bool
    sequence: tuple[int, ...]
    deadlocked_processes: tuple[int, ...]


def _check_dimensions(available: Sequence[int], *matrices: Matrix) -> None:
    rows = {len(matrix) for matrix in matrices}
    if len(rows) > 1:
        raise ValueError("matrices have different numbers of processes")
    for matrix in matrices:
        for row in matrix:
            if len(row) != len(available):
                raise ValueError("row length does not match the number of resources")


def need_matrix(maximum: Matrix, allocation: Matrix) -> list[list[int]]:
    """Return maximum minus allocation for every process and resource."""
    if len(maximum) != len(allocation):
        raise ValueError("matrices have different numbers of processes")
    return [
        [most - held for most, held in zip(max_row, alloc_row, strict=True)]
        for max_row, alloc_row in zip(maximum, allocation)
    ]


def _completion_order(demands: Matrix, allocation: Matrix, available: Sequence[int]) -> list[int]:
    work = list(available)
    finished = [False] * len(demands)
    order: list[int] = []
    progress = True
    while progress and not all(finished):
        progress = False
        for process, (demand, held) in enumerate(zip(demands, allocation)):
            if finished[process] or any(d > w for d, w in zip(demand, work)):
                continue
            work = [w + h for w, h in zip(work, held)]
            finished[process] = True
            order.append(process)
            progress = True
    return order


def safe_sequence(maximum: Matrix, allocation: Matrix, available: Sequence[int]) -> list[int] | None:
    """Return a safe execution order of process indices, or None if unsafe."""
    _check_dimensions(available, maximum, allocation)
    order = _completion_order(need_matrix(maximum, allocation), allocation, available)
    return order if len(order) == len(maximum) else None


def detect_deadlock(allocation: Matrix, request: Matrix, available: Sequence[int]) -> DetectionResult:
    """Find which processes can finish given their outstanding requests."""
    _check_dimensions(available, allocation, request)
    order = _completion_order(request, allocation, available)
    stuck = tuple(p for p in range(len(allocation)) if p not in set(order))
    return DetectionResult(bool(stuck), tuple(order), stuck)


def _next_int(values: Iterator[str]) -> int:
    try:
        return int(next(values))
    except StopIteration:
        raise ValueError("unexpected end of input") from None


def _read_matrix(values: Iterator[str], rows: int, cols: int) -> list[list[int]]:
    return [[_next_int(values) for _ in range(cols)] for _ in range(rows)]


def _bankers(values: Iterator[str]) -> None:
    processes, resources = _next_int(values), _next_int(values)
    maximum = _read_matrix(values, processes, resources)
    allocation = _read_matrix(values, processes, resources)
    available = [_next_int(values) for _ in range(resources)]
    print("Need matrix:")
    for row in need_matrix(maximum, allocation):
        print(" ".join(str(value) for value in row))
    order = safe_sequence(maximum, allocation, available)
    if order is None:
        print("System is in an unsafe state.")
        return
    print("Safe sequence: " + " -> ".join(f"P{p}" for p in order))
    print("System is in a safe state.")


def _detect(values: Iterator[str]) -> None:
    processes, resources = _next_int(values), _next_int(values)
    allocation = _read_matrix(values, processes, resources)
    request = _read_matrix(values, processes, resources)
    available = [_next_int(values) for _ in range(resources)]
    result = detect_deadlock(allocation, request, available)
    if result.deadlocked:
        print("Deadlock exists in the system")
        print("Deadlocked processes: " + " ".join(f"P{p + 1}" for p in result.deadlocked_processes))
    else:
        print("There is no deadlock in the system")
        print("Safe sequence: " + " ".join(f"P{p + 1}" for p in result.sequence))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="oslab-deadlock",
        description="Read process and resource counts and matrices from standard input.",
    )
    parser.add_argument("command", choices=("bankers", "detect"))
    args = parser.parse_args(argv)
    values = iter(sys.stdin.read().split())
    try:
        (_bankers if args.command == "bankers" else _detect)(values)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0