# oslab

A small toolkit for studying classic operating-system topics in Python. It has no
runtime dependencies and needs Python 3.10 or later.

- `oslab.phase1`: a card-driven batch machine with a flat memory of 100 four-character words.
- `oslab.phase2`: the same machine with paging over 300 words (30 frames of ten words), a
  process control block, time and line limits, and an error report at the end of every job.
- `oslab.deadlock`: the banker's safety check (`need_matrix`, `safe_sequence`) and deadlock
  detection (`detect_deadlock`).
- `oslab.scheduling`: FCFS, shortest-job-first and priority scheduling, with and without
  preemption, and `format_table` to print the results.
- `oslab.sync`: a bounded buffer, a readers-preference readers–writer lock, and timed
  producer–consumer and readers–writers demonstrations.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Command-line tools

| Command          | What it does                                                        |
|------------------|---------------------------------------------------------------------|
| `oslab-phase1`   | Runs a job deck on the phase 1 machine                              |
| `oslab-phase2`   | Runs a job deck on the paged phase 2 machine                        |
| `oslab-deadlock` | Banker's safety check or deadlock detection on matrices from stdin  |
| `oslab-schedule` | Schedules processes read from stdin and prints the result table     |
| `oslab-sync`     | Runs the producer–consumer or readers–writers demonstration         |

### `oslab-phase1 [input] [output]`

Reads cards from `input` (default `input.txt`) and writes program output to `output`
(default `output.txt`), overwriting it. If either file cannot be opened, the command prints
`Error opening file.` and exits with status 1.

### `oslab-phase2 [input] [output] [--seed N]`

Reads cards from `input` (default `input.txt`) and appends program output and job reports
to `output` (default `output.txt`). Progress messages go to standard output. `--seed` fixes
the random frame allocation.

### `oslab-deadlock bankers|detect`

Reads whitespace-separated integers from standard input.

- `bankers` expects the number of processes and the number of resources, then the maximum
  matrix, the allocation matrix and the available vector. It prints the need matrix and then
  either the safe sequence (`P0 -> P2 -> ...`) or `System is in an unsafe state.`
- `detect` expects the two counts, then the allocation matrix, the request matrix and the
  available vector. It reports either a safe sequence or the deadlocked processes.
  Processes are numbered from `P1` in this output.

### `oslab-schedule ALGORITHM`

`ALGORITHM` is one of `fcfs`, `sjf`, `srtf`, `priority` or `priority-preemptive`.
Standard input holds the number of processes, then the arrival and burst time of each
process. For the two priority algorithms, each process also has a priority number.

### `oslab-sync producer-consumer|readers-writers`

It takes these options:

- `--duration SECONDS`: how long to run. Without it, the demonstration runs until Enter is pressed.
- `--delay SECONDS`: the pause between steps. The default is 0.5.
- `--seed N`: the seed for the producer's random items.
- `--readers N` and `--writers N`: the numbers of readers and writers. Each defaults to 5.

## Using the library

### The batch machines

A job deck is plain text:

1. An `$AMJ` card starts a job. In phase 2, it carries the job id, the time limit and the line limit as three four-digit fields.
2. Program cards come next.
3. A `$DTA` card starts execution.
4. Data cards are read by `GD`.
5. An `$END` card closes the job.

The instructions are `GD`, `PD`, `LR`, `SR`, `CR`, `BT` and `H`.

```python
from oslab import phase1, phase2

deck = """$AMJ000100050001
GD10PD10H
$DTA
HELLO WORLD
$END0001
"""

print(phase1.run(deck))
print(phase2.run(deck, 42))
```

`phase2.run(text, seed)` seeds the frame allocator, so runs can be repeated. For finer
control, construct a machine and call its `load()` method:

- `Phase1Machine(cards, output)` takes two text streams.
- `Phase2Machine(cards, output, rng)` takes two text streams and a `random.Random`.

Phase 1 raises `Phase1Error` in two cases: an instruction has a non-numeric operand, or the
instruction counter runs past memory.

In phase 2, each job's counters live in a `PCB`, which has these fields:

- `job_id`
- `ttl` and `tll`
- `ttc` and `llc`

Every job ends with a report written to the output. The reason a job stopped is given as an
`ErrorCode`:

| `ErrorCode`            |
|------------------------|
| `NONE`                 |
| `OUT_OF_DATA`          |
| `LINE_LIMIT_EXCEEDED`  |
| `TIME_LIMIT_EXCEEDED`  |
| `OPERATION_CODE_ERROR` |
| `OPERAND_ERROR`        |
| `INVALID_PAGE_FAULT`   |

Paging works as follows:

- A page fault allocates a frame when it happens on `GD` or `SR`.
- On any other instruction, a page fault ends the job.
- `Phase2Machine.address_map(va)` translates a virtual address. It returns `None` if the translation terminated the job.

### Deadlock avoidance and detection

```python
from oslab.deadlock import need_matrix, safe_sequence, detect_deadlock

allocation = [[0, 1, 0], [2, 0, 0], [3, 0, 2], [2, 1, 1], [0, 0, 2]]
maximum    = [[7, 5, 3], [3, 2, 2], [9, 0, 2], [2, 2, 2], [4, 3, 3]]
available  = [3, 3, 2]

print(need_matrix(maximum, allocation))
print(safe_sequence(maximum, allocation, available))  # list of indices, or None if unsafe
```

`detect_deadlock(allocation, request, available)` returns a `DetectionResult` with three
fields:

- `deadlocked`
- `sequence`, the processes that could finish, in order
- `deadlocked_processes`

Mismatched matrix sizes raise `ValueError`.

### CPU scheduling

```python
from oslab.scheduling import Process, sjf_preemptive, format_table

procs = [Process(1, 0, 8), Process(2, 1, 4), Process(3, 2, 9)]
print(format_table(sjf_preemptive(procs)))
```

`Process(id, arrival, burst, priority=0)` rejects a negative arrival time and a burst time
below 1. A lower priority number is more urgent.

Each scheduler returns one `ScheduledProcess` per input. A `ScheduledProcess` has a
`completion` field and the `turnaround` and `waiting` properties. The order of the results
depends on the scheduler:

| Scheduler                 | Result order   |
|---------------------------|----------------|
| `fcfs`                    | order given    |
| `sjf_preemptive`          | input order    |
| `sjf_non_preemptive`      | arrival order  |
| `priority_non_preemptive` | arrival order  |
| `priority_preemptive`     | arrival order  |

### Synchronisation

- `BoundedBuffer(capacity=100)`
  - `put` blocks while the buffer is full.
  - `get` blocks while it is empty.
  - `len()` gives the number of items held.
- `ReadersWriterLock`
  - Methods: `acquire_read`, `release_read`, `acquire_write` and `release_write`.
  - Context managers: `read_locked()` and `write_locked()`.
  - Releasing a lock that is not held raises `RuntimeError`.
- `run_producer_consumer(duration, delay, seed)` runs the demonstration for `duration` seconds and returns the log lines.
- `run_readers_writers(readers, writers, duration, delay)` does the same for readers and writers.
- `producer` and `consumer` are the worker loops that `run_producer_consumer` uses.

## What it does not do

- There is no round-robin scheduler with a time quantum.
- The banker's module checks whether a state is safe. It does not grant or refuse individual resource requests.
- The commands read whole inputs at once; they do not prompt interactively.