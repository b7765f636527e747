"""The machine's disk: blocks of words kept in memory and saved to a file."""

from __future__ import annotations

import os

from .word import PAGE_SIZE, WORD_SIZE, Word

BLOCK_NUM = 512
BLOCK_SIZE = PAGE_SIZE
BLOCK_BYTES = BLOCK_SIZE * WORD_SIZE
DISK_BYTES = BLOCK_NUM * BLOCK_BYTES


class Disk:
    """A memory copy of a disk file, written back when closed."""

    def __init__(self, path):
        self.path = os.fspath(path)
        self._data = bytearray(DISK_BYTES)
        try:
            with open(self.path, "rb") as fh:
                content = fh.read(DISK_BYTES)
        except FileNotFoundError:
            with open(self.path, "wb"):
                pass
        else:
            self._data[: len(content)] = content

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _offset(self, block):
        if not 0 <= block < BLOCK_NUM:
            raise IndexError(f"block {block} out of range")
        return block * BLOCK_BYTES

    def read_block(self, block):
        """Copies of the words held in ``block``."""
        start = self._offset(block)
        words = []
        for offset in range(start, start + BLOCK_BYTES, WORD_SIZE):
            word = Word()
            word.raw[:] = self._data[offset : offset + WORD_SIZE]
            words.append(word)
        return words

    def write_block(self, block, words):
        """Replace the contents of ``block`` by a page of words."""
        words = list(words)
        if len(words) != BLOCK_SIZE:
            raise ValueError(f"a block holds {BLOCK_SIZE} words, got {len(words)}")
        start = self._offset(block)
        self._data[start : start + BLOCK_BYTES] = b"".join(bytes(w.raw) for w in words)

    def close(self):
        """Write the memory copy to the disk file; returns the number of bytes written."""
        with open(self.path, "wb") as fh:
            return fh.write(bytes(self._data))