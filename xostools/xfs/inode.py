"""Entries of the inode table and the root file held on a virtual disk."""

from __future__ import annotations

from . import layout
from .storage import parse_int

INODE_BASE = layout.INODE * layout.BLOCK_SIZE
ROOT_BASE = layout.ROOTFILE * layout.BLOCK_SIZE

_OWNERSHIP = {
    layout.FILETYPE_ROOT: (0, 0),
    layout.FILETYPE_DATA: (1, 1),
    layout.FILETYPE_EXEC: (0, -1),
}


def _entries():
    """Offsets of the inode entries, leaving out the user table."""
    return range(0, layout.INODE_USER_TABLE_OFFSET, layout.INODE_ENTRY_SIZE)


def _word_at(disk, address):
    return disk.word(*divmod(address, layout.BLOCK_SIZE))


def find_empty_entry(disk):
    """Offset of the first unused inode entry, or None when the table is full."""
    for entry in _entries():
        if disk.get_value_at(INODE_BASE + entry + layout.INODE_ENTRY_FILENAME) == layout.XFS_FAILURE:
            return entry
    return None


def find_entry(disk, name):
    """Offset of the inode entry for ``name``, or None when there is none."""
    if name is None:
        return None
    for entry in _entries():
        word = _word_at(disk, INODE_BASE + entry + layout.INODE_ENTRY_FILENAME)
        if word == name and parse_int(word) != layout.XFS_FAILURE:
            return entry
    return None


def add_entry(disk, index, file_type, name, size, blocks):
    """Record a file in the inode table and the root file."""
    base = INODE_BASE + index
    disk.store_value_at(base + layout.INODE_ENTRY_FILETYPE, file_type)
    disk.store_string_at(base + layout.INODE_ENTRY_FILENAME, name)
    disk.store_value_at(base + layout.INODE_ENTRY_FILESIZE, size)

    ownership = _OWNERSHIP.get(file_type)
    if ownership is not None:
        user_id, permission = ownership
        disk.store_value_at(base + layout.INODE_ENTRY_USERID, user_id)
        disk.store_value_at(base + layout.INODE_ENTRY_PERMISSION, permission)

    addresses = list(blocks)[: layout.INODE_NUM_DATA_BLOCKS]
    addresses += [-1] * (layout.INODE_NUM_DATA_BLOCKS - len(addresses))
    for i, block in enumerate(addresses):
        disk.store_value_at(base + layout.INODE_ENTRY_DATABLOCK + i, block)

    root_index = index // layout.INODE_ENTRY_SIZE * layout.ROOTFILE_ENTRY_SIZE
    add_root_entry(disk, root_index, file_type, name, size)


def add_root_entry(disk, index, file_type, name, size):
    """Record a file's name, size and type in the root file."""
    base = ROOT_BASE + index
    disk.store_string_at(base + layout.ROOTFILE_ENTRY_FILENAME, name)
    disk.store_value_at(base + layout.ROOTFILE_ENTRY_FILESIZE, size)
    disk.store_value_at(base + layout.ROOTFILE_ENTRY_FILETYPE, file_type)


def remove_entry(disk, location):
    """Mark the inode entry at ``location`` and its root file entry unused."""
    base = INODE_BASE + location
    disk.store_value_at(base + layout.INODE_ENTRY_FILETYPE, -1)
    disk.store_value_at(base + layout.INODE_ENTRY_FILENAME, -1)
    disk.store_value_at(base + layout.INODE_ENTRY_FILESIZE, 0)
    disk.store_value_at(base + layout.INODE_ENTRY_USERID, -1)
    disk.store_value_at(base + layout.INODE_ENTRY_PERMISSION, -1)
    for i in range(layout.INODE_NUM_DATA_BLOCKS):
        disk.store_value_at(base + layout.INODE_ENTRY_DATABLOCK + i, -1)

    remove_root_entry(disk, location // layout.INODE_ENTRY_SIZE * layout.ROOTFILE_ENTRY_SIZE)


def remove_root_entry(disk, location):
    """Mark the root file entry at ``location`` unused."""
    base = ROOT_BASE + location
    disk.store_value_at(base + layout.ROOTFILE_ENTRY_FILETYPE, -1)
    disk.store_value_at(base + layout.ROOTFILE_ENTRY_FILENAME, -1)
    disk.store_value_at(base + layout.ROOTFILE_ENTRY_FILESIZE, 0)


def data_blocks(disk, location):
    """The data block numbers stored in the inode entry at ``location``."""
    base = INODE_BASE + location + layout.INODE_ENTRY_DATABLOCK
    return [disk.get_value_at(base + i) for i in range(layout.INODE_NUM_DATA_BLOCKS)]