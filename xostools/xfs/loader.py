"""Loading code and data files from the host onto an XFS disk."""

from __future__ import annotations

import enum
import io
import os
import string

from . import layout
from .inode import add_entry, find_empty_entry, find_entry
from .labels import LabelError, resolve_file
from .storage import XfsFile

_C_SPACE = " \t\n\v\f\r"
_CODE_LINE_BUFFER = 100
_CODE_WORD_LIMIT = 31
_DATA_WORD_BUFFER = 16


class LoadError(Exception):
    """A file could not be loaded onto the disk."""


class FileKind(enum.IntEnum):
    """How a host file is laid out in disk words."""

    ASSEMBLY_CODE = 0
    DATA_FILE = 1


def trim(text):
    """Strip surrounding whitespace."""
    return text.strip(_C_SPACE)


def expand_path(path):
    """Replace a leading ``$NAME`` path component by the value of that variable."""
    head, sep, rest = path.partition("/")
    name = head[1:]
    value = os.environ.get(name) if name else None
    expanded = value if value is not None else head
    return f"{expanded}/{rest}" if sep else expanded


def add_extension(name, ext):
    """Append ``ext`` unless present, keeping the name under sixteen characters."""
    if len(name) >= 16:
        return name[:11] + ext
    if len(name) < 4 or name[len(name) - 4 :] != ext:
        name += ext
        if len(name) >= 16:
            return name[:11] + ext
    return name


def _fgets(stream, size):
    """Read as a bounded line reader does; also report whether the end was hit."""
    chunk = stream.readline(size - 1)
    eof = len(chunk) < size - 1 and not chunk.endswith("\n")
    return chunk, eof


class _Tokens:
    """Successive delimited tokens of one string, each call with its own delimiters."""

    def __init__(self, text):
        self._text = text
        self._pos = 0

    def next(self, delims):
        text, pos = self._text, self._pos
        while pos < len(text) and text[pos] in delims:
            pos += 1
        if pos >= len(text):
            self._pos = pos
            return None
        end = pos
        while end < len(text) and text[end] not in delims:
            end += 1
        self._pos = end + 1 if end < len(text) else end
        return text[pos:end]


def _clip(line):
    """Cut a source line to what fits in an instruction, shortening string literals."""
    quote = line.find('"')
    if quote < 0 or len(line) - quote <= 16:
        return line[:_CODE_WORD_LIMIT]
    return line[: quote + 14] + '"'


def _assemble(buffer):
    """Disk words for one line of code."""
    tokens = _Tokens(buffer)
    instr = tokens.next(" ")
    arg1 = tokens.next(",")
    arg2 = tokens.next("")
    if instr is None:
        return []

    opcode = trim(instr)
    if opcode[:1] in string.digits and opcode:
        return [opcode]
    if arg1 is not None:
        first = f"{opcode} {trim(arg1)}" + ("," if arg2 is not None else "")
        return [first, trim(arg2) if arg2 is not None else ""]
    return [instr, ""]


def _put(disk, index, text):
    if index < layout.BLOCK_SIZE:
        disk.set_word(layout.TEMP_BLOCK, index, text)


def _fill_code(disk, stream):
    count = 0
    while count < layout.BLOCK_SIZE:
        line, eof = _fgets(stream, _CODE_LINE_BUFFER)
        if eof:
            return False
        buffer = _clip(line)
        if len(buffer) <= 1:
            continue
        if buffer.endswith("\n"):
            buffer = buffer[:-1]
        for offset, word in enumerate(_assemble(buffer)):
            _put(disk, count + offset, word)
        count += len(_assemble(buffer))
    return True


def _fill_data(disk, stream):
    for index in range(layout.BLOCK_SIZE):
        chunk, eof = _fgets(stream, _DATA_WORD_BUFFER)
        if eof:
            _put(disk, index, "")
            return False
        newline = chunk.find("\n", 1)
        if newline >= 1:
            chunk = chunk[:newline]
        _put(disk, index, chunk)
    return True


def write_file_to_disk(disk, stream, block_number, kind):
    """Fill one disk block from ``stream``; True if the block filled before the end."""
    disk.empty_block(layout.TEMP_BLOCK)
    if FileKind(kind) is FileKind.ASSEMBLY_CODE:
        full = _fill_code(disk, stream)
    else:
        full = _fill_data(disk, stream)
    disk.write_block(layout.TEMP_BLOCK, block_number)
    return full


def data_file_size(stream):
    """Number of words a data file takes on the disk."""
    stream.seek(0)
    reads = 0
    while True:
        _, eof = _fgets(stream, _DATA_WORD_BUFFER)
        reads += 1
        if eof:
            return reads - 1


def clear_disk_blocks(disk, start, count):
    """Blank ``count`` blocks on the disk file from ``start``."""
    disk.empty_block(layout.TEMP_BLOCK)
    for block in range(start, start + count):
        disk.write_block(layout.TEMP_BLOCK, block)


def _open_source(path):
    return open(path, encoding="latin-1", newline="\n")


def _load_stream(disk, stream, start, count):
    full = False
    for i in range(count):
        full = write_file_to_disk(disk, stream, start + i, FileKind.ASSEMBLY_CODE)
        if not full:
            break
    if full:
        clear_disk_blocks(disk, start, count)
        raise LoadError(f"Code exceeds {count} block")


def load_code(disk, path, start, count):
    """Load assembly code from ``path`` into ``count`` blocks from ``start``."""
    path = expand_path(path)
    try:
        fh = _open_source(path)
    except OSError as exc:
        raise LoadError(f"File {path} not found.") from exc
    with fh:
        _load_stream(disk, fh, start, count)


def load_code_with_labels(disk, path, start, count, page):
    """Load assembly code whose labels refer to memory page ``page``."""
    path = expand_path(path)
    try:
        lines = resolve_file(path, page * layout.XSM_PAGE_SIZE)
    except LabelError as exc:
        raise LoadError(str(exc)) from exc
    stream = io.StringIO("".join(line + "\n" for line in lines), newline="\n")
    _load_stream(disk, stream, start, count)


_FIXED_REGIONS = {
    "os": (layout.OS_STARTUP_CODE, layout.OS_STARTUP_CODE_SIZE, layout.MEM_OS_STARTUP_CODE),
    "timer": (layout.TIMERINT, layout.TIMERINT_SIZE, layout.MEM_TIMERINT),
    "disk": (
        layout.DISKCONTROLLER_INT,
        layout.DISKCONTROLLER_INT_SIZE,
        layout.MEM_DISKCONTROLLER_INT,
    ),
    "console": (layout.CONSOLE_INT, layout.CONSOLE_INT_SIZE, layout.MEM_CONSOLE_INT),
    "exhandler": (layout.EX_HANDLER, layout.EX_HANDLER_SIZE, layout.MEM_EX_HANDLER),
    "init": (layout.INIT_BLOCK, layout.NO_OF_INIT_BLOCKS, None),
    "idle": (layout.IDLE_BLOCK, layout.NO_OF_IDLE_BLOCKS, None),
    "shell": (layout.SHELL_BLOCK, layout.NO_OF_SHELL_BLOCKS, None),
    "library": (layout.LIBRARY_BLOCK, layout.NO_OF_LIBRARY_BLOCKS, None),
}


def _region(target, number):
    """First block, block count and memory page (None: no labels) of a system target."""
    if target in _FIXED_REGIONS:
        return _FIXED_REGIONS[target]
    if target in ("int", "module"):
        if number is None:
            raise ValueError(f"{target} needs a number")
        if target == "int":
            return layout.interrupt_block(number), layout.INT_SIZE, layout.interrupt_page(number)
        return layout.module_block(number), layout.MOD_SIZE, layout.module_page(number)
    raise ValueError(f"unknown system code target {target!r}")


def load_system_code(disk, path, target, number=None):
    """Load OS code, an interrupt, a module or a system program to its fixed blocks."""
    start, count, page = _region(target, number)
    if page is None:
        load_code(disk, path, start, count)
    else:
        load_code_with_labels(disk, path, start, count, page)


def delete_system_code(disk, target, number=None):
    """Blank the fixed blocks of a system code target."""
    start, count, _ = _region(target, number)
    clear_disk_blocks(disk, start, count)


def _xfs_name(name, ext):
    base = name.rsplit("/", 1)[-1]
    return add_extension(base[:15], ext)


def _allocate(disk, count, message):
    blocks = []
    for _ in range(count):
        block = disk.find_free_block()
        if block is None:
            disk.free_blocks(blocks)
            raise LoadError(message)
        blocks.append(block)
    return blocks


def _register(disk, blocks, file_type, filename, size, stream, kind):
    if find_entry(disk, filename) is not None:
        disk.free_blocks(blocks)
        raise LoadError(
            "Disk already contains the file with this name. Try again with a different name."
        )
    entry = find_empty_entry(disk)
    if entry is None:
        disk.free_blocks(blocks)
        raise LoadError("No free INODE entry found.")

    disk.commit(layout.DISK_FREE_LIST)
    disk.empty_block(layout.TEMP_BLOCK)
    for block in blocks:
        write_file_to_disk(disk, stream, block, kind)

    add_entry(disk, entry, file_type, filename, size, blocks)
    disk.commit(layout.INODE)
    return XfsFile(filename, size)


def load_data_file(disk, path):
    """Store a host data file as an XFS data file; returns the new file."""
    filename = _xfs_name(path, ".dat")
    path = expand_path(path)
    try:
        with _open_source(path) as fh:
            text = fh.read()
    except OSError as exc:
        raise LoadError(f"File '{path}' not found.!") from exc

    stream = io.StringIO(text, newline="\n")
    words = data_file_size(stream)
    needed = -(-words // layout.BLOCK_SIZE)
    if needed > layout.INODE_MAX_BLOCK_NUM:
        raise LoadError(
            f"The size of file exceeds {layout.INODE_MAX_BLOCK_NUM} blocks\n"
            f"The file contains {words} words, an xfs file can have only upto "
            f"{layout.INODE_MAX_BLOCK_NUM * layout.BLOCK_SIZE} words"
        )

    stream.seek(0)
    blocks = _allocate(disk, needed, "Disk does not have enough space to contain the file.")
    return _register(
        disk, blocks, layout.FILETYPE_DATA, filename, words, stream, FileKind.DATA_FILE
    )


def load_executable(disk, path):
    """Store a host assembly file as an XFS executable; returns the new file."""
    filename = _xfs_name(path, ".xsm")
    path = expand_path(path)
    try:
        with _open_source(path) as fh:
            text = fh.read()
    except OSError as exc:
        raise LoadError(f"File {path} not found.") from exc

    lines = text.count("\n") + 1
    needed = lines // (layout.BLOCK_SIZE // 2) + 1
    if needed > layout.INODE_MAX_BLOCK_NUM:
        raise LoadError(f"The size of file exceeds {layout.INODE_MAX_BLOCK_NUM} blocks")

    stream = io.StringIO(text, newline="\n")
    blocks = _allocate(disk, needed, "Insufficient disk space!")
    return _register(
        disk, blocks, layout.FILETYPE_EXEC, filename, lines * 2, stream, FileKind.ASSEMBLY_CODE
    )