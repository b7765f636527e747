"""Command interpreter for managing an XFS disk from the host."""

from __future__ import annotations

import os
import posixpath
import sys

from . import files, layout
from .loader import LoadError, load_data_file, load_executable, load_system_code
from .storage import DiskError, VirtualDisk, parse_int

DEFAULT_DISK_NAME = "disk.xfs"

COMMANDS = (
    "fdisk", "run", "load", "export", "rm", "ls", "df", "cat", "copy", "dump", "exit", "help",
)
LOAD_OPTIONS = (
    "--int=", "--exec", "--data", "--init", "--os", "--idle", "--shell", "--library",
    "--exhandler", "--module",
)
INT_OPTIONS = tuple(str(i) for i in range(4, 19)) + ("timer", "disk", "console")
MODULE_OPTIONS = tuple(str(i) for i in range(8))
DUMP_OPTIONS = ("--inodeusertable", "--rootfile")

HELP_TEXT = """\
 fdisk 
\t Format the disk with XFS filesystem
 run <pathname> 
\t Executes the set of xfs-interface commands sequentially 
 load --exec <pathname> 
\t Loads an executable file to XFS disk 
 load --data <pathname> 
\t Loads a data file to XFS disk 
 load --init <pathname> 
\t Loads INIT code to XFS disk 
 load --os <pathname> 
\t Loads OS startup code to XFS disk 
 load --idle <pathname> 
\t Loads Idle code to XFS disk 
 load --shell <pathname> 
\t Loads Shell code to XFS disk 
 load --library <pathname> 
\t Loads Library code to XFS disk 
 load --int=timer <pathname>
\t Loads Timer Interrupt routine to XFS disk 
 load --int=disk <pathname>
\t Loads Disk Controller Interrupt routine to XFS disk 
 load --int=console <pathname>
\t Loads Console Interrupt routine to XFS disk 
 load --int=[4-18] <pathname>
\t Loads the specified Interrupt routine to XFS disk 
 load --exhandler <pathname> 
\t Loads exception handler routine to XFS disk 
 load --module [0-7] <pathname>
\t Loads the specified Module to XFS disk 
 export <xfs_filename> <pathname>
\t Exports a data file from XFS disk to UNIX file system
 rm <xfs_filename>
\t Removes a file from XFS disk 
 ls 
\t List all files
 df 
\t Display free list and free space
 cat <xfs_filename> 
\t to display contents of a file
 copy <start_blocks> <end_block> <unix_filename> 
\t Copies contents of specified range of blocks to a UNIX file.
 dump --inodeusertable
\t Copies the contents of inode table and the user table to an external UNIX file named inodeusertable.txt
 dump --rootfile 
\t Copies the contents of root file to an external UNIX file named rootfile.txt
 exit 
\t Exit the interface
"""

_SIMPLE_LOADS = {
    "--init": "init",
    "--shell": "shell",
    "--library": "library",
    "--idle": "idle",
    "--os": "os",
    "--exhandler": "exhandler",
}
_NAMED_INTERRUPTS = ("timer", "disk", "console")


def candidates(options, text):
    """Options that start with ``text``, in their given order."""
    return [option for option in options if option.startswith(text)]


def _arg(args, index):
    return args[index] if index < len(args) else None


class Shell:
    """Runs interface commands against one virtual disk."""

    def __init__(self, disk, out=None):
        self.disk = disk
        self.out = out if out is not None else sys.stdout

    def _say(self, text=""):
        print(text, file=self.out)

    def run_command(self, command):
        """Run one command line, writing its output to the shell's stream."""
        args = [part for part in command.split(" ") if part]
        if not args:
            return
        name = args[0]
        handler = getattr(self, f"_cmd_{name}", None) if name in COMMANDS else None
        if handler is None:
            self._say(f'Unknown command "{name}". See "help" for more information.')
            return
        try:
            handler(args[1:])
        except (DiskError, LoadError, FileNotFoundError, ValueError, IndexError) as exc:
            self._say(str(exc))

    def _cmd_help(self, args):
        self.out.write(HELP_TEXT)

    def _cmd_fdisk(self, args):
        self._say('Formatting Complete. "disk.xfs" created.')
        files.format_disk(self.disk, True)

    def _cmd_run(self, args):
        path = _arg(args, 0)
        try:
            fh = open(path or "", encoding="latin-1")
        except OSError:
            self._say(f"Unable to open file : {path or ''}.")
            return
        with fh:
            for line in fh:
                self.run_command(line.rstrip("\n"))

    def _cmd_load(self, args):
        option = _arg(args, 0)
        path = _arg(args, 1)
        extra = _arg(args, 2)
        if path is None:
            self._say('Missing <pathname> for load. See "help" for more information.')
            return
        path = path[:100]
        option, _, int_type = option.partition("=")

        if option in ("--exec", "--data"):
            ext = ".xsm" if option == "--exec" else ".dat"
            if len(posixpath.basename(path)) > 12:
                self._say("Filename is more than 12 characters long.")
                return
            dot = path.rfind(".")
            if dot < 0 or path[dot:] != ext:
                self._say(f'Filename does not have "{ext}" extension.')
                return
            (load_executable if option == "--exec" else load_data_file)(self.disk, path)
        elif option in _SIMPLE_LOADS:
            load_system_code(self.disk, path, _SIMPLE_LOADS[option])
        elif option == "--int":
            if int_type in _NAMED_INTERRUPTS:
                load_system_code(self.disk, path, int_type)
                return
            number = parse_int(int_type)
            if int_type and 4 <= number <= layout.NO_OF_INTERRUPTS:
                load_system_code(self.disk, path, "int", number)
            else:
                self._say('Invalid argument for "--int=".')
        elif option == "--module":
            number = parse_int(path)
            if not 0 <= number <= layout.NO_OF_MODULES:
                self._say('Invalid argument for "--module=".')
            elif extra is None:
                self._say('Missing <pathname> for load. See "help" for more information.')
            else:
                load_system_code(self.disk, extra, "module", number)
        else:
            self._say(f'Invalid argument "{option}" for load. See "help" for more information.')

    def _cmd_rm(self, args):
        name = _arg(args, 0)
        if name is None:
            self._say('Missing <xfs_filename> for rm. See "help" for more information.')
            return
        files.delete_file(self.disk, name)

    def _cmd_export(self, args):
        name, target = _arg(args, 0), _arg(args, 1)
        if target is None:
            self._say('Missing <pathname> for export. See "help" for more information.')
            return
        files.export_file(self.disk, name, target)

    def _cmd_ls(self, args):
        found = files.list_files(self.disk)
        if not found:
            self._say("The disk contains no files.")
            return
        for entry in found:
            self._say(f"Filename: {entry.name} \t Filesize {entry.size}")

    def _cmd_df(self, args):
        self.out.write(files.free_list_report(self.disk))

    def _cmd_cat(self, args):
        name = _arg(args, 0)
        if name is None:
            self._say('Missing <xfs_filename> for cat. See "help" for more information.')
            return
        for word in files.file_contents(self.disk, name):
            self._say(f"{word}\t")

    def _cmd_copy(self, args):
        if len(args) < 3:
            self._say('Insufficient arguments for "copy". See "help" for more information.')
            return
        start, end = parse_int(args[0]), parse_int(args[1])
        files.copy_blocks_to_file(self.disk, start, end, args[2][:50])

    def _cmd_dump(self, args):
        option = _arg(args, 0)
        if option == "--inodeusertable":
            files.dump_inode_table(self.disk, "inodeusertable.txt")
        elif option == "--rootfile":
            files.dump_root_file(self.disk, "rootfile.txt")
        else:
            self._say(f'Invalid argument "{option or ""}" for dump. See "help" for more information.')

    def _cmd_exit(self, args):
        raise SystemExit(0)

    def _file_names(self):
        try:
            return [entry.name for entry in self.disk.files()]
        except DiskError:
            return []

    def complete(self, line, text, start):
        """Completions for ``text``, which begins at ``start`` in ``line``."""
        context = [part for part in line[:start].split(" ") if part]
        if not context:
            return candidates(COMMANDS, text)
        command = context[0]
        if command == "load":
            if start >= 6 and line[start - 6 : start] == "--int=":
                return candidates(INT_OPTIONS, text)
            if len(context) > 1 and context[1] == "--module":
                return candidates(MODULE_OPTIONS, text)
            return candidates(LOAD_OPTIONS, text)
        if command in ("export", "cat", "rm"):
            return candidates(self._file_names(), text)
        if command == "dump":
            return candidates(DUMP_OPTIONS, text)
        return []

    def interact(self, prompt="# "):
        """Read and run commands until ``exit`` or end of input."""
        try:
            import readline
        except ImportError:
            readline = None

        if readline is not None:
            matches = []

            def completer(text, state):
                if state == 0:
                    matches[:] = self.complete(
                        readline.get_line_buffer(), text, readline.get_begidx()
                    )
                return matches[state] if state < len(matches) else None

            readline.set_completer_delims(" \t\n")
            readline.set_completer(completer)
            readline.parse_and_bind("tab: complete")

        while True:
            try:
                line = input(prompt)
            except EOFError:
                break
            command = line.strip()
            if not command:
                continue
            if command == "exit":
                break
            self.run_command(command)


def main(argv=None):
    """Run the interface: one command from the arguments, or interactively."""
    args = list(sys.argv[1:] if argv is None else argv)
    disk_file = DEFAULT_DISK_NAME

    if args and args[0] == "--disk-file":
        args.pop(0)
        if not args:
            print("--disk-file option requires a file name.")
            print()
            print("Syntax: --disk-file /path/to/disk.xfs")
            print("Specifies the path to disk.xfs to use.")
            return -1
        disk_file = args.pop(0)

    disk = VirtualDisk(disk_file)
    if os.path.isfile(disk_file):
        try:
            disk.load()
        except DiskError:
            pass

    shell = Shell(disk, sys.stdout)
    try:
        if args:
            shell.run_command(" ".join(args))
        else:
            print('Unix-XFS Interace Version 2.0. \nType "help" for getting a list of commands.')
            shell.interact()
    except SystemExit as exc:
        return exc.code or 0
    return 0