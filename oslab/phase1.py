"""Phase 1 of the card-driven multiprogramming machine.

The machine has 100 words of four characters each, a general register, a
toggle and an instruction counter. Jobs arrive as cards: ``$AMJ`` starts a
job, program cards fill memory, ``$DTA`` starts execution and ``$END``
closes the job. ``GD``/``PD`` instructions read data cards and write output
lines through the master routine.
"""

from __future__ import annotations

import argparse
import io
import sys
from typing import TextIO

MEMORY_WORDS = 100
WORD_SIZE = 4
BUFFER_SIZE = 40
BLOCK_WORDS = BUFFER_SIZE // WORD_SIZE
_CARD_LIMIT = BUFFER_SIZE - 1
_BLANK_WORD = "-" * WORD_SIZE
_BLANK_BUFFER = "-" * BUFFER_SIZE


class Phase1Error(RuntimeError):
    """Raised when a program does something the machine cannot carry out."""


class Phase1Machine:
    """A phase 1 machine reading cards from one stream and writing to another."""

    def __init__(self, cards: TextIO, output: TextIO) -> None:
        self.cards = cards
        self.output = output
        self.si = 0
        self._eof = False
        self.reset()

    def reset(self) -> None:
        """Clear memory, registers and buffer for a new job."""
        self.memory = [_BLANK_WORD] * MEMORY_WORDS
        self.ir = _BLANK_WORD
        self.reg = _BLANK_WORD
        self.buffer = _BLANK_BUFFER
        self.ictr = 0
        self.cr = False

    def _read_card(self) -> str | None:
        """Read at most one card's worth of characters, tracking end of input."""
        line = self.cards.readline(_CARD_LIMIT)
        if not line:
            self._eof = True
            return None
        if not line.endswith("\n") and len(line) < _CARD_LIMIT:
            self._eof = True
        return line

    @staticmethod
    def _fill(line: str | None) -> str:
        if line is None:
            return _BLANK_BUFFER
        return (line + "\0").ljust(BUFFER_SIZE, "-")

    def load(self) -> None:
        """Read every card from the input, running each job as it arrives."""
        slot = 0
        self._eof = False
        while True:
            self.buffer = self._fill(self._read_card())
            if self.buffer.startswith("$AMJ"):
                self.reset()
            elif self.buffer.startswith("$DTA"):
                self.execute()
            elif self.buffer.startswith("$END"):
                slot = 0
            else:
                slot = self._store_card(slot)
            if self._eof:
                return

    def _store_card(self, slot: int) -> int:
        words = [self.buffer[k:k + WORD_SIZE] for k in range(0, BUFFER_SIZE, WORD_SIZE)]
        last = len(words) - 1
        for offset, address in enumerate(range(slot, MEMORY_WORDS)):
            self.memory[address] = words[offset]
            if offset == last:
                break
            slot += 1
        return slot

    def _operand(self) -> int:
        digits = self.ir[2:4]
        if len(digits) != 2 or not (digits.isascii() and digits.isdigit()):
            raise Phase1Error(f"invalid operand in instruction {self.ir!r}")
        return int(digits)

    def execute(self) -> None:
        """Run the loaded program from address 0 until it halts."""
        while True:
            if self.ictr >= MEMORY_WORDS:
                raise Phase1Error("instruction counter ran past the end of memory")
            self.ir = self.memory[self.ictr]
            self.ictr += 1
            opcode = self.ir[:2]
            if opcode == "GD":
                self.si = 1
                self._master()
            elif opcode == "PD":
                self.si = 2
                self._master()
            elif opcode == "LR":
                self.reg = self.memory[self._operand()]
            elif opcode == "SR":
                self.memory[self._operand()] = self.reg
            elif opcode == "BT":
                target = self._operand()
                if self.cr:
                    self.ictr = target
            elif opcode == "CR":
                self.cr = self.memory[self._operand()] == self.reg
            elif self.ir[0] == "H":
                self.si = 3
                self._master()
                return

    def _master(self) -> None:
        if self.si == 1:
            self._get_data(self._operand())
        elif self.si == 2:
            self._put_data(self._operand())
        elif self.si == 3:
            self.output.write("\n\n")

    @staticmethod
    def _block_end(location: int) -> int:
        return (location + BLOCK_WORDS) // BLOCK_WORDS * BLOCK_WORDS

    def _get_data(self, location: int) -> None:
        line = self._read_card()
        self.buffer = self._fill(line)
        text = "".join(" " if ch == "\n" else ch for ch in (line or ""))
        text = text.ljust(BUFFER_SIZE)[:BUFFER_SIZE]
        for offset, address in enumerate(range(location, self._block_end(location))):
            start = offset * WORD_SIZE
            self.memory[address] = text[start:start + WORD_SIZE]

    def _put_data(self, location: int) -> None:
        block = "".join(self.memory[location:self._block_end(location)])
        self.output.write(block.replace("-", " ") + "\n")


def run(text: str) -> str:
    """Run every job in *text* and return what the machine printed."""
    output = io.StringIO()
    Phase1Machine(io.StringIO(text), output).load()
    return output.getvalue()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="oslab-phase1", description="Run phase 1 jobs from a card file."
    )
    parser.add_argument("input", nargs="?", default="input.txt")
    parser.add_argument("output", nargs="?", default="output.txt")
    args = parser.parse_args(argv)
    try:
        cards = open(args.input, encoding="utf-8")
    except OSError:
        print("Error opening file.")
        return 1
    with cards:
        try:
            output = open(args.output, "w", encoding="utf-8", newline="")
        except OSError:
            print("Error opening file.")
            return 1
        with output:
            try:
                Phase1Machine(cards, output).load()
            except Phase1Error as exc:
                print(f"error: {exc}", file=sys.stderr)
                return 1
    return 0