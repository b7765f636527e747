"""The machine's main memory and its paged address translation."""

from __future__ import annotations

from .word import INSTRUCTION_SIZE, MEMORY_NUMPAGES, PAGE_SIZE, Word

MEMORY_SIZE = PAGE_SIZE * MEMORY_NUMPAGES

# What an address is being translated for.
INSTR_FETCH = -5
OPER_FETCH = -6
DEBUG_FETCH = -7


class TranslationFault(Exception):
    """A logical address has no usable translation through the page table."""

    NOWRITE = -1
    PAGEFAULT = -2
    ILLPAGE = -3

    _MESSAGES = {
        NOWRITE: "page is not writable",
        PAGEFAULT: "page is not in memory",
        ILLPAGE: "page outside the logical address space",
    }

    def __init__(self, kind, page=None):
        super().__init__(self._MESSAGES.get(kind, "translation fault"))
        self.kind = kind
        self.page = page


def address_page(address):
    """Page number holding ``address``; -1 for a negative address."""
    if address < 0:
        return -1
    return address // PAGE_SIZE


class Memory:
    """Words of memory, 512 to a page, 128 pages."""

    def __init__(self):
        self._words = [Word() for _ in range(MEMORY_SIZE)]

    def __len__(self):
        return len(self._words)

    def word(self, address):
        """The word at a physical address, or None if the address is outside memory."""
        if not self.is_valid(address):
            return None
        return self._words[address]

    def is_valid(self, address):
        """True when ``address`` lies inside memory."""
        return 0 <= address < MEMORY_SIZE

    def _require(self, address):
        word = self.word(address)
        if word is None:
            raise IndexError(f"address {address} outside memory")
        return word

    def translate_address(self, ptbr, ptlr, address, write):
        """Physical address of a logical one; raises TranslationFault on failure."""
        page = address_page(address)
        offset = address % PAGE_SIZE
        target = self.translate_page(ptbr, ptlr, page, write)
        return target * PAGE_SIZE + offset

    def translate_page(self, ptbr, ptlr, page, write):
        """Physical page of a logical page, using the page table at ``ptbr``."""
        if page < 0 or page >= ptlr:
            raise TranslationFault(TranslationFault.ILLPAGE, page)
        entry_address = page * 2 + ptbr
        entry = self._require(entry_address).as_int()
        info = self._require(entry_address + 1).text
        if info[1:2] == "0":
            raise TranslationFault(TranslationFault.PAGEFAULT, page)
        if write and info[2:3] == "0":
            raise TranslationFault(TranslationFault.NOWRITE, page)
        return entry

    def raw_instruction(self, address):
        """Text of the instruction stored at a physical address."""
        return "".join(
            self._require(address + i).text for i in range(INSTRUCTION_SIZE)
        )

    def page(self, number):
        """The words of page ``number``, or None if there is no such page."""
        if not 0 <= number < MEMORY_NUMPAGES:
            return None
        start = number * PAGE_SIZE
        return self._words[start : start + PAGE_SIZE]