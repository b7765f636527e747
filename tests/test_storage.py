import pytest

from xostools.xfs import layout
from xostools.xfs.storage import DiskError, VirtualDisk, XfsFile, parse_int

INODE_BASE = layout.INODE * layout.BLOCK_SIZE
FREE_BASE = layout.DISK_FREE_LIST * layout.BLOCK_SIZE


@pytest.fixture
def disk(tmp_path):
    vdisk = VirtualDisk(tmp_path / "disk.xfs")
    vdisk.create(True)
    return vdisk


@pytest.mark.parametrize(
    "text, expected",
    [("42", 42), ("  -7xyz", -7), ("+5", 5), ("abc", 0), ("", 0)],
)
def test_parse_int(text, expected):
    assert parse_int(text) == expected


def test_check_exists_missing(tmp_path):
    with pytest.raises(DiskError, match="Unable to open disk file"):
        VirtualDisk(tmp_path / "absent.xfs").check_exists()


def test_create_in_missing_directory(tmp_path):
    with pytest.raises(DiskError, match="Failed to create disk file"):
        VirtualDisk(tmp_path / "nowhere" / "disk.xfs").create(True)


def test_create_without_format_keeps_contents(tmp_path):
    path = tmp_path / "disk.xfs"
    path.write_bytes(b"keep")
    VirtualDisk(path).create(False)
    assert path.read_bytes() == b"keep"
    VirtualDisk(path).create(True)
    assert path.read_bytes() == b""


def test_word_round_trip(disk):
    disk.set_word(10, 3, "MOV R0, R1")
    assert disk.word(10, 3) == "MOV R0, R1"
    assert disk.word(10, 4) == ""


def test_long_word_is_cut_to_word_size(disk):
    text = "abcdefghijklmnopqrstuvwxyz"
    disk.set_word(10, 0, text)
    assert disk.word(10, 0) == text[: layout.WORD_SIZE]


def test_shorter_word_overwrites_longer(disk):
    disk.set_word(10, 0, "longer text")
    disk.set_word(10, 0, "ab")
    assert disk.word(10, 0) == "ab"


def test_value_round_trip(disk):
    disk.store_value_at(INODE_BASE + 5, -123)
    assert disk.get_value_at(INODE_BASE + 5) == -123
    disk.store_string_at(INODE_BASE + 6, "root")
    assert disk.word(layout.INODE, 6) == "root"


def test_out_of_range_block(disk):
    with pytest.raises(IndexError):
        disk.word(layout.XFS_NUM_BLOCKS, 0)
    with pytest.raises(IndexError):
        disk.set_word(0, layout.BLOCK_SIZE, "x")


def test_empty_block(disk):
    for index in range(layout.BLOCK_SIZE):
        disk.set_word(layout.TEMP_BLOCK, index, f"w{index}")
    disk.empty_block(layout.TEMP_BLOCK)
    assert all(disk.word(layout.TEMP_BLOCK, i) == "" for i in range(layout.BLOCK_SIZE))


def test_block_round_trip_through_file(disk):
    disk.set_word(layout.TEMP_BLOCK, 0, "first")
    disk.set_word(layout.TEMP_BLOCK, 511, "last")
    disk.write_block(layout.TEMP_BLOCK, 100)
    disk.empty_block(layout.TEMP_BLOCK)
    disk.read_block(layout.TEMP_BLOCK, 100)
    assert disk.word(layout.TEMP_BLOCK, 0) == "first"
    assert disk.word(layout.TEMP_BLOCK, 511) == "last"


def test_write_block_needs_file(tmp_path):
    vdisk = VirtualDisk(tmp_path / "absent.xfs")
    with pytest.raises(DiskError):
        vdisk.write_block(layout.TEMP_BLOCK, 80)


def test_default_free_list(disk):
    disk.set_default_values(layout.DISK_FREE_LIST)
    values = [disk.get_value_at(FREE_BASE + b) for b in range(layout.NO_OF_DISK_BLOCKS)]
    assert set(values[: layout.DATA_START_BLOCK]) == {1}
    assert values.count(0) == layout.NO_OF_DISK_BLOCKS - layout.DATA_START_BLOCK


def test_find_free_block_claims_in_order(disk):
    disk.set_default_values(layout.DISK_FREE_LIST)
    first = disk.find_free_block()
    assert first == layout.DATA_START_BLOCK
    assert disk.get_value_at(FREE_BASE + first) == 1
    assert disk.find_free_block() == layout.DATA_START_BLOCK + 1


def test_find_free_block_when_full(disk):
    disk.set_default_values(layout.DISK_FREE_LIST)
    claimed = [disk.find_free_block() for _ in range(layout.NO_OF_DISK_BLOCKS - layout.DATA_START_BLOCK)]
    assert None not in claimed
    assert disk.find_free_block() is None


def test_free_blocks_releases_until_marker(disk):
    disk.set_default_values(layout.DISK_FREE_LIST)
    a = disk.find_free_block()
    b = disk.find_free_block()
    c = disk.find_free_block()
    disk.set_word(layout.TEMP_BLOCK, 0, "data")
    disk.write_block(layout.TEMP_BLOCK, a)
    disk.free_blocks([a, b, -1, c])
    assert disk.get_value_at(FREE_BASE + a) == 0
    assert disk.get_value_at(FREE_BASE + b) == 0
    assert disk.get_value_at(FREE_BASE + c) == 1
    disk.set_word(layout.TEMP_BLOCK, 0, "other")
    disk.read_block(layout.TEMP_BLOCK, a)
    assert disk.word(layout.TEMP_BLOCK, 0) == ""


def test_default_inode_table(disk):
    disk.set_default_values(layout.INODE)
    for entry in range(0, layout.INODE_USER_TABLE_OFFSET, layout.INODE_ENTRY_SIZE):
        assert disk.get_value_at(INODE_BASE + entry + layout.INODE_ENTRY_FILENAME) == layout.XFS_FAILURE
        assert disk.get_value_at(INODE_BASE + entry + layout.INODE_ENTRY_FILESIZE) == 0
    assert disk.files() == []


def test_unknown_structure(disk):
    with pytest.raises(ValueError):
        disk.set_default_values(layout.TEMP_BLOCK)
    with pytest.raises(ValueError):
        disk.commit(layout.TEMP_BLOCK)


def test_commit_and_load_round_trip(disk):
    disk.set_default_values(layout.DISK_FREE_LIST)
    disk.set_default_values(layout.INODE)
    disk.set_default_values(layout.ROOTFILE)
    disk.store_string_at(INODE_BASE + layout.INODE_ENTRY_FILENAME, "root")
    disk.store_string_at(layout.ROOTFILE * layout.BLOCK_SIZE, "root")
    disk.find_free_block()
    disk.commit(layout.DISK_FREE_LIST)
    disk.commit(layout.INODE)

    fresh = VirtualDisk(disk.path)
    fresh.load()
    for address in (INODE_BASE + 1, layout.ROOTFILE * layout.BLOCK_SIZE, FREE_BASE + layout.DATA_START_BLOCK):
        block, index = divmod(address, layout.BLOCK_SIZE)
        assert fresh.word(block, index) == disk.word(block, index)


def test_files_lists_entries(disk):
    disk.set_default_values(layout.INODE)
    entry = layout.INODE_ENTRY_SIZE * 2
    disk.store_string_at(INODE_BASE + entry + layout.INODE_ENTRY_FILENAME, "notes.dat")
    disk.store_value_at(INODE_BASE + entry + layout.INODE_ENTRY_FILESIZE, 300)
    assert disk.files() == [XfsFile("notes.dat", 300)]


def test_files_needs_disk_file(tmp_path):
    with pytest.raises(DiskError):
        VirtualDisk(tmp_path / "absent.xfs").files()


def test_clear(disk):
    disk.set_word(layout.INODE, 0, "value")
    disk.clear()
    assert disk.word(layout.INODE, 0) == ""