# xostools

Tools for working with a small teaching operating system:

- `xfs-interface` creates and manages an XFS disk image (`disk.xfs`). It
  formats the disk and loads operating-system code, interrupt routines,
  modules, system programs, executables and data files onto it. It also lists,
  shows, exports and removes files.
- `xostools.xsm` holds the parts of an XSM machine: sixteen-byte machine
  words, the register file, paged main memory, an instruction tokenizer and
  the machine's disk.

## Installation

```
pip install .
```

## The disk interface

Start an interactive session. The prompt is `# `. Where the `readline`
module is available, commands, options and file names complete on Tab.

```
xfs-interface
```

Or run a single command and exit:

```
xfs-interface fdisk
xfs-interface load --os os_startup.xsm
xfs-interface load --int=timer timer.xsm
xfs-interface load --int=7 int7.xsm
xfs-interface load --module 0 mod0.xsm
xfs-interface load --exec program.xsm
xfs-interface load --data numbers.dat
xfs-interface ls
```

By default the disk image is `disk.xfs` in the current directory. To use
another one:

```
xfs-interface --disk-file /path/to/disk.xfs ls
```

Commands:

| Command | Effect |
| --- | --- |
| `fdisk` | Format the disk with the XFS file system |
| `run <pathname>` | Run the interface commands in a file, one per line |
| `load --exec <pathname>` | Load an executable (name ending in `.xsm`, at most 12 characters) |
| `load --data <pathname>` | Load a data file (name ending in `.dat`, at most 12 characters) |
| `load --os/--init/--idle/--shell/--library/--exhandler <pathname>` | Load code to its fixed blocks |
| `load --int=timer/disk/console/4..18 <pathname>` | Load an interrupt routine |
| `load --module <number> <pathname>` | Load a module |
| `export <xfs_filename> <pathname>` | Copy a file from the disk to the host |
| `rm <xfs_filename>` | Remove a file (the root file cannot be removed) |
| `ls` | List files |
| `df` | Show the free list and the number of free blocks |
| `cat <xfs_filename>` | Show the non-empty words of a file |
| `copy <start_block> <end_block> <unix_filename>` | Copy a range of blocks to a host file |
| `dump --inodeusertable` / `dump --rootfile` | Write the inode and user table to `inodeusertable.txt`, or the root file to `rootfile.txt` |
| `help`, `exit` | Show help, leave the session |

Labels (`name:` lines, used as targets of `JMP`, `CALL`, `JZ` and `JNZ`) are
resolved to absolute addresses when OS startup code, interrupt routines, the
exception handler and modules are loaded. A path may begin with `$NAME/`; the
value of that environment variable is put in its place.

## Using the library

```python
from xostools.xfs.storage import VirtualDisk
from xostools.xfs.files import format_disk, list_files
from xostools.xfs.loader import load_executable

disk = VirtualDisk("disk.xfs")
format_disk(disk, True)
load_executable(disk, "program.xsm")
for entry in list_files(disk):
    print(entry.name, entry.size)
```

Failures are raised: `DiskError` (`xostools.xfs.storage`) when the disk file
cannot be opened or created, `LoadError` (`xostools.xfs.loader`) when a file
cannot be loaded, `FileNotFoundError` when a file is missing.

The machine parts can be used on their own:

```python
from xostools.xsm.registers import RegisterFile
from xostools.xsm.memory import Memory
from xostools.xsm.tokenizer import tokenize

registers = RegisterFile()
registers.store_int("R0", 42)
memory = Memory()
memory.word(0).store_string("MOV R0, 5")
print(list(tokenize(memory.raw_instruction(0))))
```

`xostools.xsm.disk.Disk` reads a disk image into memory, hands out and
replaces blocks of words, and writes the image back on `close()` (or when used
as a context manager).

## What the package does not do

There is no machine simulator here: nothing decodes and executes
instructions, handles interrupts or exceptions, or boots from a disk image,
and there is no `xsm` command or debugger. The `xostools.xsm` modules are only
the words, registers, memory, tokenizer and disk such a simulator would be
built from.

## Running the tests

```
pip install .[test]
pytest
```