"""The machine's register file."""

from __future__ import annotations

from .word import Word

NAMES = (
    *(f"R{i}" for i in range(20)),
    "P0",
    "P1",
    "P2",
    "P3",
    "BP",
    "SP",
    "IP",
    "PTBR",
    "PTLR",
    "EIP",
    "EC",
    "EPN",
    "EMA",
)

REG_PORT_LOW = 20
REG_PORT_HIGH = 23
REG_KERN_LOW = 27
REG_KERN_HIGH = 32

# Number of general purpose registers saved by BACKUP.
REG_COUNT = 20

_CODES = {name: code for code, name in enumerate(NAMES)}


class RegisterFile:
    """Thirty-three named registers, looked up without regard to case."""

    def __init__(self):
        self._words = [Word() for _ in NAMES]

    def __len__(self):
        return len(self._words)

    def code(self, name):
        """Index of register ``name``, or None if there is no such register."""
        return _CODES.get(name.upper())

    def get(self, name):
        """The word of register ``name``, or None if there is no such register."""
        code = self.code(name)
        return None if code is None else self._words[code]

    def _require(self, name):
        word = self.get(name)
        if word is None:
            raise KeyError(name)
        return word

    def names(self):
        """Register names in register order."""
        return NAMES

    def get_int(self, name):
        """Integer value of register ``name``."""
        return self._require(name).as_int()

    def get_string(self, name):
        """Text of register ``name``, or None if there is no such register."""
        word = self.get(name)
        return None if word is None else word.text

    def store_int(self, name, value):
        """Store an integer in register ``name``."""
        self._require(name).store_int(value)

    def store_string(self, name, text):
        """Store text in register ``name``."""
        self._require(name).store_string(text)

    def user_mode_allowed(self, name):
        """True when register ``name`` may be used in user mode."""
        code = self.code(name)
        if code is None:
            return False
        if REG_PORT_LOW <= code <= REG_PORT_HIGH:
            return False
        # Of the kernel registers only the first is barred, as the machine defines it.
        return code != REG_KERN_LOW