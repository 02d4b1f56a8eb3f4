"""Phase 2 of the card-driven multiprogramming machine, with paging.

Memory holds 300 words of four characters, split into 30 frames of ten
words. Each job gets a randomly chosen frame for its page table and one
frame per program card. Virtual addresses 00-99 are mapped through the page
table; storing into an unmapped page allocates a frame, reading from one is
an invalid page fault. The job's time and line limits are enforced, and every
job ends with an error report written to the output.
"""

from __future__ import annotations

import argparse
import io
import logging
import random
import sys
from collections.abc import Iterator
from dataclasses import dataclass
from enum import IntEnum
from typing import NoReturn, TextIO

MEMORY_WORDS = 300
WORD_SIZE = 4
FRAME_WORDS = 10
FRAMES = MEMORY_WORDS // FRAME_WORDS
BUFFER_SIZE = 40
VIRTUAL_WORDS = 100

_EMPTY_WORD = "\0" * WORD_SIZE
_UNMAPPED = "*" * WORD_SIZE
_DIGITS = frozenset("0123456789")

log = logging.getLogger(__name__)


class ErrorCode(IntEnum):
    """Reasons a job is terminated."""

    NONE = 0
    OUT_OF_DATA = 1
    LINE_LIMIT_EXCEEDED = 2
    TIME_LIMIT_EXCEEDED = 3
    OPERATION_CODE_ERROR = 4
    OPERAND_ERROR = 5
    INVALID_PAGE_FAULT = 6

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    ErrorCode.NONE: "No Error: Program executed successfully",
    ErrorCode.OUT_OF_DATA: "Error: Out of Data",
    ErrorCode.LINE_LIMIT_EXCEEDED: "Error: Line Limit Exceeded",
    ErrorCode.TIME_LIMIT_EXCEEDED: "Error: Time Limit Exceeded",
    ErrorCode.OPERATION_CODE_ERROR: "Error: Operation Code Error",
    ErrorCode.OPERAND_ERROR: "Error: Operand Error",
    ErrorCode.INVALID_PAGE_FAULT: "Error: Invalid Page Fault",
}


@dataclass
class PCB:
    """Process control block: job identity, limits and counters."""

    job_id: int = 0
    ttl: int = 0
    tll: int = 0
    ttc: int = 0
    llc: int = 0


class _JobTerminated(Exception):
    """Raised internally once the running job has been terminated."""


def _program_words(text: str) -> Iterator[str]:
    """Split a program card into words; a halt ``H`` ends its word."""
    pos = 0
    while pos < len(text):
        word = ""
        while len(word) < WORD_SIZE and pos < len(text):
            ch = text[pos]
            pos += 1
            word += ch
            if ch == "H":
                break
        yield word.ljust(WORD_SIZE, "\0")


def _data_words(text: str) -> Iterator[str]:
    for start in range(0, len(text), WORD_SIZE):
        yield text[start:start + WORD_SIZE].ljust(WORD_SIZE, "\0")


def _parse_field(card: str, start: int) -> int:
    field = card[start:start + 4]
    if len(field) != 4 or not set(field) <= _DIGITS:
        raise ValueError(f"malformed job card: {card!r}")
    return int(field)


class Phase2Machine:
    """A paged machine reading job cards from one stream and reporting to another."""

    def __init__(self, cards: TextIO, output: TextIO, rng: random.Random | None = None) -> None:
        self.cards = cards
        self.output = output
        self.rng = rng if rng is not None else random.Random()
        self._page_fault_valid = False
        self._init()

    def _init(self) -> None:
        self.memory = [_EMPTY_WORD] * MEMORY_WORDS
        self.ir = _EMPTY_WORD
        self.r = _EMPTY_WORD
        self.c = True
        self.ic = 0
        self.si = self.pi = self.ti = 0
        self.pcb = PCB()
        self.ptr: int | None = None
        self.ra = 0
        self._pte = -1
        self._page_no = -1
        self._frames_in_use: set[int] = set()
        self._page_table_entries = 0
        self.terminated = False
        self._job_done = False

    def _allocate(self) -> int:
        free = [frame for frame in range(FRAMES) if frame not in self._frames_in_use]
        if not free:
            raise RuntimeError("no free memory frames")
        frame = self.rng.choice(free)
        self._frames_in_use.add(frame)
        return frame

    def _require_job(self) -> int:
        if self.ptr is None:
            raise RuntimeError("card found outside a job")
        return self.ptr

    def load(self) -> None:
        """Read every card, loading programs and running each job at ``$DTA``."""
        for raw in iter(self.cards.readline, ""):
            card = raw.removesuffix("\n")
            if card.startswith("$AMJ"):
                self._start_job(card)
            elif card.startswith("$DTA"):
                if not self._job_done:
                    log.info("Data card loading")
                    self._require_job()
                    self.execute()
                    self._job_done = True
            elif card.startswith("$END"):
                log.info("END of Job")
            elif not self._job_done:
                self._load_program_card(card)

    def _start_job(self, card: str) -> None:
        self._init()
        log.info("New Job started")
        self.pcb = PCB(
            job_id=_parse_field(card, 4),
            ttl=_parse_field(card, 8),
            tll=_parse_field(card, 12),
        )
        self.ptr = self._allocate() * FRAME_WORDS
        self.memory[self.ptr:self.ptr + FRAME_WORDS] = [_UNMAPPED] * FRAME_WORDS
        log.info("Allocated Page is for Page Table: %d", self.ptr // FRAME_WORDS)
        log.info("jobID: %d\nTTL: %d\nTLL: %d", self.pcb.job_id, self.pcb.ttl, self.pcb.tll)

    def _load_program_card(self, card: str) -> None:
        ptr = self._require_job()
        if self._page_table_entries >= FRAME_WORDS:
            raise RuntimeError("page table is full: a job has at most 10 program cards")
        page = self._allocate()
        self._page_no = page
        self.memory[ptr + self._page_table_entries] = f"{page:02d}" + _UNMAPPED[2:]
        self._page_table_entries += 1
        log.info("Program card loading")
        base = page * FRAME_WORDS
        for address, word in zip(range(base, base + FRAME_WORDS), _program_words(card[:BUFFER_SIZE])):
            self.memory[address] = word

    def address_map(self, virtual_address: int) -> int | None:
        """Translate a virtual address; return None if that terminated the job."""
        try:
            return self._map(virtual_address)
        except _JobTerminated:
            return None

    def _map(self, virtual_address: int) -> int:
        if not 0 <= virtual_address < VIRTUAL_WORDS:
            self.pi = 2
            self._master()
            return self._page_no * FRAME_WORDS
        self._pte = self._require_job() + virtual_address // FRAME_WORDS
        entry = self.memory[self._pte]
        if entry[0] == "*":
            self.pi = 3
            self._master()
            return self._page_no * FRAME_WORDS
        return int(entry[:2]) * FRAME_WORDS + virtual_address % FRAME_WORDS

    def execute(self) -> None:
        """Run the loaded program from virtual address 0 until the job ends."""
        self.ic = 0
        try:
            while True:
                self._step()
        except _JobTerminated:
            pass

    def _operand(self) -> int:
        digits = self.ir[2:]
        if len(digits) != 2 or not set(digits) <= _DIGITS:
            self.pi = 2
            self._master()
        return int(digits)

    def _charge(self, cost: int) -> None:
        self.pcb.ttc += cost
        if self.pcb.ttc >= self.pcb.ttl:
            self.ti = 2
            self._master()

    def _step(self) -> None:
        self.ir = self.memory[self._map(self.ic)]
        self.ic += 1
        opcode = self.ir[:2]
        if opcode == "GD":
            self._charge(2)
            self._page_fault_valid = True
            self.ra = self._map(self._operand())
            self.si = 1
            self._master()
        elif opcode == "PD":
            self._charge(1)
            self._page_fault_valid = False
            self.ra = self._map(self._operand())
            self.si = 2
            self._master()
        elif self.ir[0] == "H" and self.ir[1] == "\0":
            self._charge(1)
            self.si = 3
            self._master()
        elif opcode == "LR":
            self._charge(1)
            self._page_fault_valid = False
            self.ra = self._map(self._operand())
            self.r = self.memory[self.ra]
        elif opcode == "SR":
            self._charge(2)
            self._page_fault_valid = True
            self.ra = self._map(self._operand())
            self.memory[self.ra] = self.r
        elif opcode == "CR":
            self._charge(1)
            self._page_fault_valid = False
            self.ra = self._map(self._operand())
            self.c = self.memory[self.ra] == self.r
        elif opcode == "BT":
            self._charge(1)
            self._page_fault_valid = False
            target = self._operand()
            if self.c:
                self.ic = target
        else:
            self.pi = 1
            self.si = 0
            self._master()

    def _master(self) -> None:
        match (self.ti, self.si, self.pi):
            case (0, 1, _):
                self._read()
            case (0, 2, _):
                self._write()
            case (0, 3, _) | (2, 3, _):
                self._terminate(ErrorCode.NONE)
            case (2, 1, _):
                self._terminate(ErrorCode.TIME_LIMIT_EXCEEDED)
            case (2, 2, _):
                self._write()
                self._terminate(ErrorCode.TIME_LIMIT_EXCEEDED)
            case (0, _, 1):
                self._terminate(ErrorCode.OPERATION_CODE_ERROR)
            case (0, _, 2):
                self._terminate(ErrorCode.OPERAND_ERROR)
            case (0, _, 3):
                self._page_fault()
            case (2, _, 1) | (2, _, 2) | (2, _, 3):
                self._terminate(ErrorCode.TIME_LIMIT_EXCEEDED)

    def _page_fault(self) -> None:
        if not self._page_fault_valid:
            self._terminate(ErrorCode.INVALID_PAGE_FAULT)
        page = self._allocate()
        self._page_no = page
        self.memory[self._pte] = f"{page:02d}" + self.memory[self._pte][2:]
        self._page_table_entries += 1
        self.pi = 0
        log.info("Valid Page Fault:   Allocated Page Number: %d", page)

    def _read(self) -> None:
        log.info("Read function called")
        data = self.cards.readline().removesuffix("\n")
        if data.startswith("$END"):
            self._terminate(ErrorCode.OUT_OF_DATA)
        end = min(self.ra + FRAME_WORDS, MEMORY_WORDS)
        for address, word in zip(range(self.ra, end), _data_words(data[:BUFFER_SIZE])):
            self.memory[address] = word
        self.si = 0

    def _write(self) -> None:
        log.info("Write function called")
        self.pcb.llc += 1
        if self.pcb.llc > self.pcb.tll:
            self._terminate(ErrorCode.LINE_LIMIT_EXCEEDED)
        block = "".join(self.memory[self.ra:self.ra + FRAME_WORDS])
        self.si = 0
        self.output.write(block.split("\0", 1)[0] + "\n")

    def _terminate(self, code: ErrorCode) -> NoReturn:
        self.terminated = True
        lines = []
        if code is ErrorCode.TIME_LIMIT_EXCEEDED and self.ti == 2:
            if self.pi == 1:
                lines.append(ErrorCode.OPERATION_CODE_ERROR.message)
            if self.pi == 2:
                lines.append(ErrorCode.OPERAND_ERROR.message)
        lines.append(code.message)
        pcb = self.pcb
        summary = (
            f"Job Id :{pcb.job_id}  IC: {self.ic}  IR: {self.ir.replace(chr(0), '')}  "
            f"SI: {self.si}  PI: {self.pi}  TI: {self.ti}  "
            f"TLL: {pcb.tll}  LLC: {pcb.llc}  TTL: {pcb.ttl}  TTC: {pcb.ttc}  "
        )
        self.output.write("\n" + "".join(line + "\n" for line in lines) + summary + "\n\n\n")
        self.si = self.pi = self.ti = 0
        raise _JobTerminated


def run(text: str, seed: int | None = None) -> str:
    """Run every job in *text* and return what the machine wrote."""
    output = io.StringIO()
    Phase2Machine(io.StringIO(text), output, random.Random(seed)).load()
    return output.getvalue()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="oslab-phase2", description="Run paged phase 2 jobs from a card file."
    )
    parser.add_argument("input", nargs="?", default="input.txt")
    parser.add_argument("output", nargs="?", default="output.txt")
    parser.add_argument("--seed", type=int, default=None, help="seed for frame allocation")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s", stream=sys.stdout)
    try:
        with open(args.input, encoding="utf-8") as cards, open(
            args.output, "a", encoding="utf-8", newline=""
        ) as output:
            Phase2Machine(cards, output, random.Random(args.seed)).load()
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except (ValueError, RuntimeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0