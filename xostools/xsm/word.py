"""Machine words of sixteen bytes holding either an integer or a short string."""

from __future__ import annotations

import re

WORD_SIZE = 16
MEMORY_NUMPAGES = 128
PAGE_SIZE = 512
NUM_REG = 33
INSTRUCTION_SIZE = 2

DISK_IDLE = 0
DISK_BUSY = 1
CONSOLE_IDLE = 0
CONSOLE_BUSY = 1

INTERRUPT_EXCEPTION = 0
INTERRUPT_TIMER = 1
INTERRUPT_DISK = 2
INTERRUPT_CONSOLE = 3

DEFAULT_DISK = "../xfs-interface/disk.xfs"

_ATOI = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")
_DIGITS = frozenset("0123456789")


def _wrap(value):
    """Reduce ``value`` to a signed 32-bit integer."""
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def atoi(text):
    """Leading integer of ``text`` as a 32-bit value; 0 when there is none."""
    match = _ATOI.match(text)
    return _wrap(int(match.group(1))) if match else 0


class Word:
    """Sixteen raw bytes; the text is everything before the first NUL."""

    __slots__ = ("raw",)

    def __init__(self, text=""):
        self.raw = bytearray(WORD_SIZE)
        self.store_string(text)

    @property
    def text(self):
        """The string held in the word."""
        return bytes(self.raw).split(b"\0", 1)[0].decode("latin-1")

    def __str__(self):
        return self.text

    def __repr__(self):
        return f"Word({self.text!r})"

    def is_string(self):
        """True unless the word is an optional sign followed only by digits."""
        text = self.text
        if text[:1] in ("+", "-"):
            text = text[1:]
        return not all(ch in _DIGITS for ch in text)

    def as_int(self):
        """Integer value of the word's leading digits."""
        return atoi(self.text)

    def store_int(self, value):
        """Write ``value`` in decimal; bytes after its terminator are left as they were."""
        data = str(_wrap(int(value))).encode("ascii") + b"\0"
        self.raw[: len(data)] = data

    def store_string(self, text):
        """Write ``text``, cut to a word and padded with NULs."""
        data = str(text).encode("latin-1", "replace")[:WORD_SIZE]
        self.raw[:] = data.ljust(WORD_SIZE, b"\0")

    def copy_from(self, other):
        """Make this word a byte-for-byte copy of ``other``."""
        self.raw[:] = other.raw

    def encrypt(self):
        """Replace the word by the sum of its sixteen bytes, taken as signed."""
        self.store_int(sum(b - 256 if b > 127 else b for b in self.raw))