"""
Parsers for the /proc/<pid>/maps and /proc/<pid>/smaps formats.

A region starts with a header line::

    7f2a1b3c4000-7f2a1b5c4000 r-xp 00001000 08:01 1234567 /usr/lib/libc.so.6

In smaps it is followed by detail lines until the next header::

    Rss:                 592 kB
    Pss:                  87 kB
"""

import logging
import re
import string

from pymemmap.errors import (
    InvalidAddress,
    InvalidDevice,
    InvalidInt,
    InvalidPermissions,
    MissingField,
)
from pymemmap.models import (
    ANONYMOUS,
    HEAP,
    STACK,
    VDSO,
    VSYSCALL,
    VVAR,
    DetailedMemoryRegion,
    MemoryRegion,
    PathType,
    Permissions,
)

logger = logging.getLogger(__name__)

U64_MAX = 2**64 - 1
U8_MAX = 2**8 - 1

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")
_DEC_DIGITS = re.compile(r"[0-9]+")

_PSEUDO_PATHS = {
    "": ANONYMOUS,
    "[heap]": HEAP,
    "[stack]": STACK,
    "[vdso]": VDSO,
    "[vvar]": VVAR,
    "[vsyscall]": VSYSCALL,
}

DELETED_SUFFIX = " (deleted)"

# Field names reported by MissingField, in column order.
HEADER_FIELDS = ("address range", "permissions", "offset", "device", "inode")


def _parse_int(text: str, radix: int, maximum: int) -> int:
    # int() alone would also accept signs, underscores, '0x' and whitespace.
    pattern = _HEX_DIGITS if radix == 16 else _DEC_DIGITS
    if not pattern.fullmatch(text):
        raise InvalidInt(text, radix)
    value = int(text, radix)
    if value > maximum:
        raise InvalidInt(text, radix)
    return value


def parse_hex(text: str, maximum: int = U64_MAX) -> int:
    """Parse an unsigned base-16 field such as an address or offset."""
    return _parse_int(text, 16, maximum)


def parse_decimal(text: str, maximum: int = U64_MAX) -> int:
    """Parse an unsigned base-10 field such as an inode."""
    return _parse_int(text, 10, maximum)


def parse_address_range(text: str) -> tuple[int, int]:
    """Parse 'start-end' into two integers."""
    start, sep, end = text.partition("-")
    if not sep:
        raise InvalidAddress(text)
    return parse_hex(start), parse_hex(end)


def parse_permissions(text: str) -> Permissions:
    """Parse a four character 'rwxp' permission column."""
    if len(text) != 4:
        raise InvalidPermissions(text)
    return Permissions(
        read=text[0] == "r",
        write=text[1] == "w",
        execute=text[2] == "x",
        shared=text[3] == "s",
    )


def parse_device(text: str) -> tuple[int, int]:
    """Parse a 'major:minor' device column (hexadecimal)."""
    major, sep, minor = text.partition(":")
    if not sep:
        raise InvalidDevice(text)
    return parse_hex(major, U8_MAX), parse_hex(minor, U8_MAX)


def classify(text: str) -> PathType:
    """Classify the pathname column. Never fails."""
    pseudo = _PSEUDO_PATHS.get(text)
    if pseudo is not None:
        return pseudo
    if text.endswith(DELETED_SUFFIX):
        return PathType.deleted(text[: -len(DELETED_SUFFIX)])
    return PathType.file(text)


def is_header_line(line: str) -> bool:
    """
    Check whether a line starts a new region.

    Header lines start with a hex digit. Some smaps keys do too
    ('Anonymous:', 'FilePmdMapped:'), so a first token ending in ':'
    marks a detail line.
    """
    if not line or line[0] not in string.hexdigits:
        return False
    first_token = line.split(None, 1)[0]
    return not first_token.endswith(":")


def parse_region_header(line: str) -> MemoryRegion:
    """
    Parse one header line into a MemoryRegion.

    The first five columns are whitespace separated; everything after
    them is the pathname, which may itself contain spaces.

    Raises:
        MissingField: One of the five mandatory columns is absent.
        InvalidAddress, InvalidPermissions, InvalidDevice, InvalidInt:
            A column is present but malformed.
    """
    parts = line.split(None, 5)
    for index, name in enumerate(HEADER_FIELDS):
        if index >= len(parts):
            raise MissingField(name)

    start, end = parse_address_range(parts[0])
    permissions = parse_permissions(parts[1])
    offset = parse_hex(parts[2])
    device = parse_device(parts[3])
    inode = parse_decimal(parts[4])
    path = classify(parts[5].strip()) if len(parts) > 5 else None

    return MemoryRegion(
        start=start,
        end=end,
        permissions=permissions,
        offset=offset,
        device=device,
        inode=inode,
        path=path,
    )


def parse_detail_into_region(counters: dict[str, int], line: str) -> bool:
    """
    Fold a 'Key: value [unit]' line into the counters of the open region.

    Malformed lines are skipped rather than failing the snapshot.

    Returns:
        True if a counter was stored, False if the line was skipped.
    """
    key, sep, rest = line.partition(":")
    key = key.strip()
    fields = rest.split()
    if not sep or not key or not fields or not _DEC_DIGITS.fullmatch(fields[0]):
        logger.debug("Skipping detail line %r", line)
        return False

    counters[key] = int(fields[0])
    return True


def parse_regions(text: str) -> list[DetailedMemoryRegion]:
    """
    Group the lines of a maps or smaps document into regions.

    Header errors propagate; no partial list is returned. Detail lines
    before the first header are ignored.
    """
    regions: list[DetailedMemoryRegion] = []
    current: MemoryRegion | None = None
    counters: dict[str, int] = {}

    # Only \n ends a line; other characters splitlines() breaks on may
    # appear in a mapped file's name.
    for line in text.split("\n"):
        line = line.removesuffix("\r")
        if is_header_line(line):
            if current is not None:
                regions.append(DetailedMemoryRegion(current, counters))
            current = parse_region_header(line)
            counters = {}
        elif current is not None:
            parse_detail_into_region(counters, line)
        elif line.strip():
            logger.debug("Skipping line outside of any region: %r", line)

    if current is not None:
        regions.append(DetailedMemoryRegion(current, counters))

    return regions
