"""Whole-file operations on an XFS disk: formatting, listing, reading, exporting, deleting."""

from __future__ import annotations

import os
from itertools import takewhile

from . import layout
from .inode import add_entry, data_blocks, find_entry, remove_entry
from .loader import expand_path

ROOT_NAME = "root"

# Initial user table: the kernel and root users with their encrypted passwords.
USER_TABLE = ("kernel", "-1", "root", "452")


def format_disk(disk, format):
    """Create the disk file; when ``format`` is true, write a fresh file system to it."""
    disk.create(False)
    if not format:
        return

    disk.clear()
    disk.set_default_values(layout.DISK_FREE_LIST)
    disk.commit(layout.DISK_FREE_LIST)

    disk.set_default_values(layout.INODE)
    disk.set_default_values(layout.ROOTFILE)

    root_blocks = [layout.ROOTFILE + i for i in range(layout.NO_OF_ROOTFILE_BLOCKS)]
    add_entry(
        disk,
        0,
        layout.FILETYPE_ROOT,
        ROOT_NAME,
        layout.NO_OF_ROOTFILE_BLOCKS * layout.BLOCK_SIZE,
        root_blocks,
    )

    base = layout.INODE * layout.BLOCK_SIZE + layout.INODE_USER_TABLE_OFFSET
    for offset, text in enumerate(USER_TABLE):
        disk.store_string_at(base + offset, text)

    disk.commit(layout.INODE)
    disk.commit(layout.ROOTFILE)


def list_files(disk):
    """Files recorded on the disk, in inode table order."""
    return disk.files()


def _file_blocks(disk, name):
    disk.check_exists()
    location = find_entry(disk, name)
    if location is None:
        raise FileNotFoundError(f"File '{name}' not found!")
    return list(takewhile(lambda block: block > 0, data_blocks(disk, location)))


def _block_words(disk, block):
    disk.empty_block(layout.TEMP_BLOCK)
    disk.read_block(layout.TEMP_BLOCK, block)
    words = [disk.word(layout.TEMP_BLOCK, i) for i in range(layout.BLOCK_SIZE)]
    disk.empty_block(layout.TEMP_BLOCK)
    return words


def file_contents(disk, name):
    """The non-empty words of an XFS file."""
    return [
        word
        for block in _file_blocks(disk, name)
        for word in _block_words(disk, block)
        if word
    ]


def _write_words(path, words):
    try:
        fh = open(path, "w", encoding="latin-1", newline="\n")
    except OSError as exc:
        raise FileNotFoundError(f"File '{path}' not found!") from exc
    with fh:
        for word in words:
            fh.write(f"{word}\n")


def export_file(disk, name, target):
    """Write every word of an XFS file, one per line, to a host file; returns its path."""
    blocks = _file_blocks(disk, name)
    target = expand_path(os.fspath(target))
    _write_words(target, (word for block in blocks for word in _block_words(disk, block)))
    return target


def copy_blocks_to_file(disk, start, end, path):
    """Write the words of disk blocks ``start`` to ``end`` inclusive to a host file."""
    disk.check_exists()
    path = expand_path(os.fspath(path))
    _write_words(
        path,
        (word for block in range(start, end + 1) for word in _block_words(disk, block)),
    )
    return path


def free_list_report(disk):
    """Text listing the memory copy of the free list and the count of free blocks."""
    disk.check_exists()
    lines = []
    free = 0
    for block in range(layout.NO_OF_FREE_LIST_BLOCKS):
        for index in range(layout.BLOCK_SIZE):
            word = disk.word(layout.DISK_FREE_LIST + block, index)
            lines.append(f"{index} \t - \t {word}  \n")
            if disk.get_value_at((layout.DISK_FREE_LIST + block) * layout.BLOCK_SIZE + index) == 0:
                free += 1
    lines.append(f"\nNo of Free Blocks = {free}")
    lines.append(f"\nTotal no of Blocks = {layout.NO_OF_DISK_BLOCKS}\n")
    return "".join(lines)


def delete_file(disk, name):
    """Remove an executable or data file and release its blocks."""
    if name == ROOT_NAME:
        raise ValueError("Root file cannot be deleted")
    disk.check_exists()
    location = find_entry(disk, name)
    if location is None:
        raise FileNotFoundError(f"File '{name}' not found!")

    disk.free_blocks(data_blocks(disk, location))
    remove_entry(disk, location)

    disk.commit(layout.INODE)
    disk.commit(layout.DISK_FREE_LIST)


def dump_root_file(disk, path):
    """Copy the root file blocks to a host file."""
    return copy_blocks_to_file(
        disk, layout.ROOTFILE, layout.ROOTFILE + layout.NO_OF_ROOTFILE_BLOCKS - 1, path
    )


def dump_inode_table(disk, path):
    """Copy the inode table and user table blocks to a host file."""
    return copy_blocks_to_file(
        disk, layout.INODE, layout.INODE + layout.NO_OF_INODE_BLOCKS - 1, path
    )