"""Resolution of symbolic jump and call targets in XSM assembly code."""

from __future__ import annotations

import re

from . import layout

# Lines are read in pieces no longer than these buffers allow.
_COLLECT_BUFFER = layout.XSM_INSTRUCTION_SIZE * layout.XSM_WORD_SIZE + 1
_RESOLVE_BUFFER = 100

_OPERAND_SPLIT = re.compile(r"[ ,]")


class LabelError(Exception):
    """A source file could not be read or a label could not be resolved."""


def is_label(line):
    """True when ``line`` declares a label, i.e. ends with a colon."""
    return line.endswith(":")


def has_letters(text):
    """True when ``text`` holds at least one letter."""
    if not text:
        return False
    return any(ch.isalpha() for ch in text)


def label_name(line):
    """The name declared by a label line such as ``loop:``."""
    parts = [part for part in line.split(":") if part]
    return parts[0] if parts else ""


def _pieces(lines, size):
    """Yield lines as a fixed-size line reader would return them, newline removed."""
    step = size - 1
    for line in lines:
        for start in range(0, len(line), step):
            yield line[start : start + step].split("\n", 1)[0]


class LabelTable:
    """Addresses of the labels declared in one piece of assembly code."""

    def __init__(self):
        self._targets = {}

    def reset(self):
        """Forget every label."""
        self._targets.clear()

    def insert(self, name, address):
        """Record ``name`` at ``address``; a later declaration wins."""
        self._targets[name] = address

    def target(self, name):
        """Address of ``name``, or None when it was never declared."""
        return self._targets.get(name)

    def collect(self, lines):
        """First pass: record every label at the address of the next instruction."""
        address = 0
        for piece in _pieces(lines, _COLLECT_BUFFER):
            if is_label(piece):
                self.insert(label_name(piece), address)
            elif piece:
                address += layout.XSM_INSTRUCTION_SIZE
        return self

    def resolve(self, lines, base_address):
        """Second pass: return the code with label targets made absolute."""
        output = []
        for piece in _pieces(lines, _RESOLVE_BUFFER):
            if not piece or is_label(piece):
                continue
            tokens = [token for token in _OPERAND_SPLIT.split(piece) if token]
            if not tokens:
                output.append(piece)
                continue

            opcode = tokens[0]
            leftop = tokens[1] if len(tokens) > 1 else None
            rightop = tokens[2] if len(tokens) > 2 else None
            upper = opcode.upper()
            separator = ""
            is_jump = False

            if upper in ("JMP", "CALL"):
                is_jump = True
                rightop, leftop = leftop, ""
            elif upper in ("JNZ", "JZ"):
                is_jump = True
                separator = ", "

            if is_jump and has_letters(rightop):
                address = self.target(rightop)
                if address is None:
                    raise LabelError(f'Can not resolve label "{rightop}".')
                output.append(f"{opcode} {leftop or ''}{separator}{address + base_address}")
            else:
                output.append(piece)
        return output


def resolve_file(path, base_address):
    """Read assembly code from ``path`` and return it with labels resolved."""
    try:
        with open(path, encoding="latin-1", newline="\n") as fh:
            lines = list(fh)
    except OSError as exc:
        raise LabelError("Can't open source file.") from exc
    table = LabelTable()
    table.collect(lines)
    return table.resolve(lines, base_address)