"""Memory copy of an XFS disk image, backed by a disk file."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass

from . import layout

BLOCK_BYTES = layout.BLOCK_SIZE * layout.WORD_SIZE

CANT_OPEN_MESSAGE = "Unable to open disk file"
CANT_CREATE_MESSAGE = "Failed to create disk file"

_INT_PREFIX = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")


class DiskError(Exception):
    """The disk file could not be opened or created."""


@dataclass(frozen=True)
class XfsFile:
    """A file recorded in the inode table."""

    name: str
    size: int


def parse_int(text):
    """Read a leading integer from ``text`` the way disk words are read; 0 if none."""
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


class VirtualDisk:
    """Blocks of 512 sixteen-byte words, held in memory and synced with a file."""

    def __init__(self, path):
        self.path = os.fspath(path)
        self._blocks = {}

    def _check_block(self, block):
        if not 0 <= block < layout.XFS_NUM_BLOCKS:
            raise IndexError(f"block {block} out of range")

    def _block(self, block):
        self._check_block(block)
        buf = self._blocks.get(block)
        if buf is None:
            buf = self._blocks[block] = bytearray(BLOCK_BYTES)
        return buf

    def _open(self, mode):
        try:
            return open(self.path, mode)
        except OSError as exc:
            raise DiskError(CANT_OPEN_MESSAGE) from exc

    def create(self, format):
        """Create the disk file; truncate it too when ``format`` is true."""
        try:
            with open(self.path, "wb" if format else "ab"):
                pass
        except OSError as exc:
            raise DiskError(CANT_CREATE_MESSAGE) from exc

    def check_exists(self):
        """Raise DiskError unless the disk file can be opened."""
        with self._open("rb"):
            pass

    def read_block(self, virt_block, file_block):
        """Copy block ``file_block`` of the file into ``virt_block`` of memory."""
        self._check_block(file_block)
        buf = self._block(virt_block)
        with self._open("rb") as fh:
            fh.seek(BLOCK_BYTES * file_block)
            data = fh.read(BLOCK_BYTES)
        buf[: len(data)] = data

    def write_block(self, virt_block, file_block):
        """Copy ``virt_block`` of memory into block ``file_block`` of the file."""
        self._check_block(file_block)
        buf = self._block(virt_block)
        with self._open("r+b") as fh:
            fh.seek(BLOCK_BYTES * file_block)
            fh.write(bytes(buf))

    def empty_block(self, block):
        """Make every word of ``block`` the empty string."""
        buf = self._block(block)
        # Only the terminator is written; the rest of each word stays as it was.
        for offset in range(0, BLOCK_BYTES, layout.WORD_SIZE):
            buf[offset] = 0

    def word(self, block, index):
        """The text held in word ``index`` of ``block``."""
        if not 0 <= index < layout.BLOCK_SIZE:
            raise IndexError(f"word {index} out of range")
        start = index * layout.WORD_SIZE
        raw = bytes(self._block(block)[start : start + layout.WORD_SIZE])
        return raw.split(b"\0", 1)[0].decode("latin-1")

    def set_word(self, block, index, text):
        """Store ``text`` (at most one word long) in word ``index`` of ``block``."""
        if not 0 <= index < layout.BLOCK_SIZE:
            raise IndexError(f"word {index} out of range")
        data = str(text).encode("latin-1", "replace")[: layout.WORD_SIZE]
        buf = self._block(block)
        start = index * layout.WORD_SIZE
        buf[start : start + len(data)] = data
        if len(data) < layout.WORD_SIZE:
            buf[start + len(data)] = 0

    def get_value_at(self, address):
        """Integer value of the word at a disk-wide word address."""
        return parse_int(self.word(*divmod(address, layout.BLOCK_SIZE)))

    def store_value_at(self, address, value):
        """Store an integer in the word at a disk-wide word address."""
        self.set_word(*divmod(address, layout.BLOCK_SIZE), str(int(value)))

    def store_string_at(self, address, text):
        """Store text in the word at a disk-wide word address."""
        self.set_word(*divmod(address, layout.BLOCK_SIZE), text)

    def find_free_block(self):
        """Claim the first free block in the free list; None if the disk is full."""
        base = layout.DISK_FREE_LIST * layout.BLOCK_SIZE
        for block in range(layout.NO_OF_FREE_LIST_BLOCKS * layout.BLOCK_SIZE):
            if self.get_value_at(base + block) == 0:
                self.store_value_at(base + block, 1)
                return block
        return None

    def free_blocks(self, blocks):
        """Release blocks up to the first -1 or 0, blanking them on the file."""
        base = layout.DISK_FREE_LIST * layout.BLOCK_SIZE
        for block in blocks:
            if block in (-1, 0):
                break
            self.store_value_at(base + block, 0)
            self.empty_block(layout.TEMP_BLOCK)
            self.write_block(layout.TEMP_BLOCK, block)

    def set_default_values(self, structure):
        """Fill the free list, inode table or root file with fresh values."""
        if structure == layout.DISK_FREE_LIST:
            base = layout.DISK_FREE_LIST * layout.BLOCK_SIZE
            for block in range(layout.NO_OF_FREE_LIST_BLOCKS * layout.BLOCK_SIZE):
                used = not layout.DATA_START_BLOCK <= block < layout.NO_OF_DISK_BLOCKS
                self.store_value_at(base + block, 1 if used else 0)
        elif structure == layout.INODE:
            base = layout.INODE * layout.BLOCK_SIZE
            for offset in range(layout.INODE_SIZE):
                self.store_value_at(base + offset, -1)
            for entry in range(0, layout.INODE_USER_TABLE_OFFSET, layout.INODE_ENTRY_SIZE):
                self.store_value_at(base + entry + layout.INODE_ENTRY_FILESIZE, 0)
        elif structure == layout.ROOTFILE:
            base = layout.ROOTFILE * layout.BLOCK_SIZE
            for offset in range(layout.NO_OF_ROOTFILE_BLOCKS * layout.BLOCK_SIZE):
                self.store_value_at(base + offset, -1)
            for entry in range(
                0, layout.NO_OF_ROOTFILE_BLOCKS * layout.BLOCK_SIZE, layout.ROOTFILE_ENTRY_SIZE
            ):
                self.store_value_at(base + entry + layout.ROOTFILE_ENTRY_FILESIZE, 0)
        else:
            raise ValueError(f"unknown disk structure {structure}")

    def commit(self, structure):
        """Write a structure to the file; the inode table carries the root file with it."""
        if structure == layout.DISK_FREE_LIST:
            for i in range(layout.NO_OF_FREE_LIST_BLOCKS):
                self.write_block(layout.DISK_FREE_LIST + i, layout.DISK_FREE_LIST + i)
            return
        if structure == layout.INODE:
            for i in range(layout.NO_OF_INODE_BLOCKS):
                self.write_block(layout.INODE + i, layout.INODE + i)
        elif structure != layout.ROOTFILE:
            raise ValueError(f"unknown disk structure {structure}")
        for i in range(layout.NO_OF_ROOTFILE_BLOCKS):
            self.write_block(layout.ROOTFILE + i, layout.ROOTFILE + i)

    def load(self):
        """Read the free list, inode table and root file from the file."""
        for first, count in (
            (layout.DISK_FREE_LIST, layout.NO_OF_FREE_LIST_BLOCKS),
            (layout.INODE, layout.NO_OF_INODE_BLOCKS),
            (layout.ROOTFILE, layout.NO_OF_ROOTFILE_BLOCKS),
        ):
            for block in range(first, first + count):
                self.read_block(block, block)

    def clear(self):
        """Wipe the memory copy."""
        self._blocks.clear()

    def files(self):
        """Files recorded in the memory copy of the inode table."""
        self.check_exists()
        base = layout.INODE * layout.BLOCK_SIZE
        found = []
        for entry in range(0, layout.INODE_USER_TABLE_OFFSET, layout.INODE_ENTRY_SIZE):
            address = base + entry + layout.INODE_ENTRY_FILENAME
            if self.get_value_at(address) == -1:
                continue
            name = self.word(*divmod(address, layout.BLOCK_SIZE))
            size = self.get_value_at(base + entry + layout.INODE_ENTRY_FILESIZE)
            found.append(XfsFile(name, size))
        return found