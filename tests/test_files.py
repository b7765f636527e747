import pytest

from xostools.xfs import layout
from xostools.xfs.files import (
    copy_blocks_to_file,
    delete_file,
    dump_inode_table,
    dump_root_file,
    export_file,
    file_contents,
    format_disk,
    free_list_report,
    list_files,
)
from xostools.xfs.inode import data_blocks, find_entry
from xostools.xfs.loader import load_data_file
from xostools.xfs.storage import DiskError, VirtualDisk, XfsFile

ROOT = XfsFile("root", layout.NO_OF_ROOTFILE_BLOCKS * layout.BLOCK_SIZE)


@pytest.fixture
def disk(tmp_path):
    d = VirtualDisk(tmp_path / "disk.xfs")
    format_disk(d, True)
    return d


def _data_file(tmp_path, name="a.dat", text="hello\nworld\n"):
    path = tmp_path / name
    path.write_bytes(text.encode())
    return str(path)


def _lines(path):
    with open(path, encoding="latin-1", newline="\n") as fh:
        return fh.read().split("\n")[:-1]


def test_format_lists_root(disk):
    assert list_files(disk) == [ROOT]


def test_format_persists_to_file(disk, tmp_path):
    again = VirtualDisk(tmp_path / "disk.xfs")
    again.load()
    assert list_files(again) == [ROOT]


def test_format_false_only_creates(tmp_path):
    path = tmp_path / "new.xfs"
    format_disk(VirtualDisk(path), False)
    assert path.exists()
    assert path.stat().st_size == 0


def test_missing_disk_raises(tmp_path):
    with pytest.raises(DiskError):
        list_files(VirtualDisk(tmp_path / "none.xfs"))


def test_loaded_data_file_listed_and_read(disk, tmp_path):
    load_data_file(disk, _data_file(tmp_path))
    assert list_files(disk) == [ROOT, XfsFile("a.dat", 2)]
    assert file_contents(disk, "a.dat") == ["hello", "world"]


def test_file_contents_missing(disk):
    with pytest.raises(FileNotFoundError):
        file_contents(disk, "nothere.dat")


def test_export_writes_every_word(disk, tmp_path):
    load_data_file(disk, _data_file(tmp_path))
    target = export_file(disk, "a.dat", str(tmp_path / "out.txt"))
    lines = _lines(target)
    assert lines[:2] == ["hello", "world"]
    assert len(lines) == layout.BLOCK_SIZE
    assert set(lines[2:]) == {""}


def test_export_missing_file(disk, tmp_path):
    with pytest.raises(FileNotFoundError):
        export_file(disk, "nothere.dat", str(tmp_path / "out.txt"))


def test_delete_frees_blocks(disk, tmp_path):
    load_data_file(disk, _data_file(tmp_path))
    blocks = data_blocks(disk, find_entry(disk, "a.dat"))
    delete_file(disk, "a.dat")
    assert list_files(disk) == [ROOT]
    assert find_entry(disk, "a.dat") is None
    assert disk.find_free_block() == blocks[0]


def test_delete_persists(disk, tmp_path):
    load_data_file(disk, _data_file(tmp_path))
    delete_file(disk, "a.dat")
    again = VirtualDisk(tmp_path / "disk.xfs")
    again.load()
    assert list_files(again) == [ROOT]


def test_delete_root_refused(disk):
    with pytest.raises(ValueError):
        delete_file(disk, "root")


def test_delete_missing(disk):
    with pytest.raises(FileNotFoundError):
        delete_file(disk, "ghost.dat")


def test_dump_inode_table_holds_user_table(disk, tmp_path):
    path = dump_inode_table(disk, str(tmp_path / "inodeusertable.txt"))
    lines = _lines(path)
    assert len(lines) == layout.NO_OF_INODE_BLOCKS * layout.BLOCK_SIZE
    offset = layout.INODE_USER_TABLE_OFFSET
    assert lines[offset : offset + 4] == ["kernel", "-1", "root", "452"]
    assert lines[layout.INODE_ENTRY_FILENAME] == "root"


def test_dump_root_file(disk, tmp_path):
    lines = _lines(dump_root_file(disk, str(tmp_path / "rootfile.txt")))
    assert lines[layout.ROOTFILE_ENTRY_FILENAME] == "root"
    assert lines[layout.ROOTFILE_ENTRY_FILETYPE] == str(layout.FILETYPE_ROOT)
    assert len(lines) == layout.BLOCK_SIZE


def test_copy_free_list_block(disk, tmp_path):
    path = copy_blocks_to_file(
        disk, layout.DISK_FREE_LIST, layout.DISK_FREE_LIST, str(tmp_path / "fl.txt")
    )
    lines = _lines(path)
    assert lines[0] == "1"
    assert lines[layout.DATA_START_BLOCK - 1] == "1"
    assert lines[layout.DATA_START_BLOCK] == "0"


def test_free_list_report_counts(disk):
    report = free_list_report(disk)
    free = layout.NO_OF_DISK_BLOCKS - layout.DATA_START_BLOCK
    assert f"No of Free Blocks = {free}" in report
    assert report.endswith(f"Total no of Blocks = {layout.NO_OF_DISK_BLOCKS}\n")


def test_free_list_report_after_load(disk, tmp_path):
    load_data_file(disk, _data_file(tmp_path))
    free = layout.NO_OF_DISK_BLOCKS - layout.DATA_START_BLOCK - 1
    assert f"No of Free Blocks = {free}" in free_list_report(disk)