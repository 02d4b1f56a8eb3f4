"""CPU scheduling algorithms: FCFS, SJF and priority, with and without preemption.

Times are whole time units. A lower priority number means a more urgent
process. Every algorithm returns one ``ScheduledProcess`` per input process,
holding its completion, turnaround and waiting times.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class Process:
    """A process as submitted to the scheduler."""

    id: int
    arrival: int
    burst: int
    priority: int = 0

    def __post_init__(self) -> None:
        if self.arrival < 0:
            raise ValueError(f"process {self.id}: arrival time must not be negative")
        if self.burst < 1:
            raise ValueError(f"process {self.id}: burst time must be at least 1")


@dataclass(frozen=True)
class ScheduledProcess:
    """A process together with the time at which it completed."""

    id: int
    arrival: int
    burst: int
    priority: int
    completion: int

    @classmethod
    def finished(cls, process: Process, completion: int) -> ScheduledProcess:
        return cls(process.id, process.arrival, process.burst, process.priority, completion)

    @property
    def turnaround(self) -> int:
        return self.completion - self.arrival

    @property
    def waiting(self) -> int:
        return self.turnaround - self.burst


def _by_arrival(processes: Sequence[Process]) -> list[Process]:
    return sorted(processes, key=lambda p: p.arrival)


def fcfs(processes: Sequence[Process]) -> list[ScheduledProcess]:
    """Run processes in the order given, each to completion."""
    time = 0
    results = []
    for process in processes:
        time = max(time, process.arrival) + process.burst
        results.append(ScheduledProcess.finished(process, time))
    return results


def _non_preemptive(
    processes: list[Process], key: Callable[[Process], int]
) -> list[ScheduledProcess]:
    pending = dict(enumerate(processes))
    completion: dict[int, int] = {}
    time = 0
    while pending:
        ready = [i for i, p in pending.items() if p.arrival <= time]
        if not ready:
            time = min(p.arrival for p in pending.values())
            continue
        chosen = min(ready, key=lambda i: key(pending[i]))
        time += pending.pop(chosen).burst
        completion[chosen] = time
    return [ScheduledProcess.finished(p, completion[i]) for i, p in enumerate(processes)]


def sjf_non_preemptive(processes: Sequence[Process]) -> list[ScheduledProcess]:
    """Shortest job first without preemption; results are ordered by arrival."""
    return _non_preemptive(_by_arrival(processes), lambda p: p.burst)


def priority_non_preemptive(processes: Sequence[Process]) -> list[ScheduledProcess]:
    """Most urgent ready process first, run to completion; results are ordered by arrival."""
    return _non_preemptive(_by_arrival(processes), lambda p: p.priority)


def _preemptive(
    processes: list[Process], key: Callable[[Process, int], int]
) -> list[ScheduledProcess]:
    remaining = {i: p.burst for i, p in enumerate(processes)}
    completion: dict[int, int] = {}
    time = 0
    while remaining:
        ready = [i for i in remaining if processes[i].arrival <= time]
        if not ready:
            time = min(processes[i].arrival for i in remaining)
            continue
        chosen = min(ready, key=lambda i: key(processes[i], remaining[i]))
        remaining[chosen] -= 1
        time += 1
        if remaining[chosen] == 0:
            del remaining[chosen]
            completion[chosen] = time
    return [ScheduledProcess.finished(p, completion[i]) for i, p in enumerate(processes)]


def sjf_preemptive(processes: Sequence[Process]) -> list[ScheduledProcess]:
    """Shortest remaining time first, one time unit at a time; results keep input order."""
    return _preemptive(list(processes), lambda p, left: left)


def priority_preemptive(processes: Sequence[Process]) -> list[ScheduledProcess]:
    """Most urgent ready process each time unit; results are ordered by arrival."""
    return _preemptive(_by_arrival(processes), lambda p, left: p.priority)


_HEADER = (
    "Process",
    "Arrival Time",
    "Burst Time",
    "Priority",
    "Completion Time",
    "Turnaround Time",
    "Waiting Time",
)


def format_table(results: Sequence[ScheduledProcess]) -> str:
    """Render results as a tab-separated table with a header line."""
    rows = ["\t".join(_HEADER)]
    rows.extend(
        "\t".join(
            (
                f"P{r.id}",
                str(r.arrival),
                str(r.burst),
                str(r.priority),
                str(r.completion),
                str(r.turnaround),
                str(r.waiting),
            )
        )
        for r in results
    )
    return "\n".join(rows) + "\n"


_ALGORITHMS: dict[str, tuple[Callable[[Sequence[Process]], list[ScheduledProcess]], bool]] = {
    "fcfs": (fcfs, False),
    "sjf": (sjf_non_preemptive, False),
    "srtf": (sjf_preemptive, False),
    "priority": (priority_non_preemptive, True),
    "priority-preemptive": (priority_preemptive, True),
}


def _next_int(values: Iterator[str]) -> int:
    try:
        return int(next(values))
    except StopIteration:
        raise ValueError("unexpected end of input") from None


def _read_processes(values: Iterator[str], with_priority: bool) -> list[Process]:
    count = _next_int(values)
    if count < 0:
        raise ValueError("number of processes must not be negative")
    processes = []
    for number in range(1, count + 1):
        arrival, burst = _next_int(values), _next_int(values)
        priority = _next_int(values) if with_priority else 0
        processes.append(Process(number, arrival, burst, priority))
    return processes


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="oslab-schedule",
        description=(
            "Read a process count, then arrival and burst time (and priority for the "
            "priority algorithms) for each process from standard input."
        ),
    )
    parser.add_argument("algorithm", choices=tuple(_ALGORITHMS))
    args = parser.parse_args(argv)
    algorithm, with_priority = _ALGORITHMS[args.algorithm]
    try:
        processes = _read_processes(iter(sys.stdin.read().split()), with_priority)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(format_table(algorithm(processes)), end="")
    return 0