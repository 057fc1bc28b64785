"""Data models for pymemmap."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


def format_size(size: int) -> str:
    """Format a byte count as a human-readable string."""
    kib = 1024
    mib = 1024 * kib
    gib = 1024 * mib

    if size >= gib:
        return f"{size / gib:.1f} GiB"
    if size >= mib:
        return f"{size / mib:.1f} MiB"
    if size >= kib:
        return f"{size / kib:.1f} KiB"
    return f"{size} B"


def printable(text: str) -> str:
    """Show undecodable path bytes (kept as surrogates) as \\x escapes."""
    return text.encode("utf-8", "surrogateescape").decode("utf-8", "backslashreplace")


@dataclass(slots=True, frozen=True)
class Permissions:
    """Access flags of a mapping, as in the 'rwxp' column."""

    read: bool
    write: bool
    execute: bool
    shared: bool  # 's' shared, 'p' private (copy-on-write)

    def __str__(self) -> str:
        return (
            ("r" if self.read else "-")
            + ("w" if self.write else "-")
            + ("x" if self.execute else "-")
            + ("s" if self.shared else "p")
        )


class PathKind(Enum):
    """Backing object categories of a mapping."""

    FILE = "file"
    DELETED = "deleted"
    ANONYMOUS = "anonymous"
    HEAP = "heap"
    STACK = "stack"
    VDSO = "vdso"
    VVAR = "vvar"
    VSYSCALL = "vsyscall"


# Kernel pseudo-regions and the token the kernel prints for them.
PSEUDO_TOKENS: dict[PathKind, str] = {
    PathKind.HEAP: "[heap]",
    PathKind.STACK: "[stack]",
    PathKind.VDSO: "[vdso]",
    PathKind.VVAR: "[vvar]",
    PathKind.VSYSCALL: "[vsyscall]",
}

ANONYMOUS_LABEL = "[anonymous]"
SIZE_COUNTER = "Size"


@dataclass(slots=True, frozen=True)
class PathType:
    """
    Classified pathname column of a mapping.

    ``path`` is only set for FILE and DELETED; the other kinds are
    singletons exposed as module constants.
    """

    kind: PathKind
    path: str = ""

    @classmethod
    def file(cls, path: str) -> "PathType":
        """A mapping backed by a file on disk."""
        return cls(PathKind.FILE, path)

    @classmethod
    def deleted(cls, path: str) -> "PathType":
        """A mapping whose file was unlinked while still mapped."""
        return cls(PathKind.DELETED, path)

    @property
    def label(self) -> str:
        """Grouping label: the file path, or the bracketed kernel token."""
        if self.kind in (PathKind.FILE, PathKind.DELETED):
            return self.path
        if self.kind is PathKind.ANONYMOUS:
            return ANONYMOUS_LABEL
        return PSEUDO_TOKENS[self.kind]

    def __str__(self) -> str:
        if self.kind is PathKind.DELETED:
            return f"{self.path} (deleted)"
        return self.label


ANONYMOUS = PathType(PathKind.ANONYMOUS)
HEAP = PathType(PathKind.HEAP)
STACK = PathType(PathKind.STACK)
VDSO = PathType(PathKind.VDSO)
VVAR = PathType(PathKind.VVAR)
VSYSCALL = PathType(PathKind.VSYSCALL)


@dataclass(slots=True, frozen=True)
class MemoryRegion:
    """One header line of /proc/<pid>/maps or smaps."""

    start: int
    end: int
    permissions: Permissions
    offset: int
    device: tuple[int, int]  # (major, minor)
    inode: int
    path: PathType | None = None

    @property
    def size(self) -> int:
        """Size in bytes; zero if the range is inverted."""
        return max(self.end - self.start, 0)

    @property
    def path_type(self) -> PathType:
        """The classified path, ANONYMOUS when the column was absent."""
        return self.path if self.path is not None else ANONYMOUS

    def __str__(self) -> str:
        major, minor = self.device
        path = str(self.path) if self.path is not None else ""
        return (
            f"{self.start:012x}-{self.end:012x} {self.permissions} "
            f"{self.offset:8x} {format_size(self.size):>10} "
            f"{major:02x}:{minor:02x} {self.inode:8} {path}"
        ).rstrip()


@dataclass(slots=True, frozen=True)
class DetailedMemoryRegion:
    """A region plus the per-region counters smaps reports, in KiB."""

    region: MemoryRegion
    counters: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Read-only copy; the snapshot has no mutation path.
        object.__setattr__(self, "counters", MappingProxyType(dict(self.counters)))

    def counter(self, name: str) -> int:
        """
        Value of a counter; counters the kernel did not report are 0.

        The one exception is "Size" on a region without any counters,
        which only happens with the minimal maps format: it falls back to
        the region size so that such a snapshot can still be ranked.
        """
        if name == SIZE_COUNTER and not self.counters:
            return self.region.size // 1024
        return self.counters.get(name, 0)

    @property
    def rss(self) -> int:
        return self.counter("Rss")

    @property
    def pss(self) -> int:
        return self.counter("Pss")

    @property
    def swap(self) -> int:
        return self.counter("Swap")

    @property
    def start(self) -> int:
        return self.region.start

    @property
    def end(self) -> int:
        return self.region.end

    @property
    def size(self) -> int:
        return self.region.size

    @property
    def permissions(self) -> Permissions:
        return self.region.permissions

    @property
    def path_type(self) -> PathType:
        return self.region.path_type


@dataclass(slots=True, frozen=True)
class Process:
    """Immutable snapshot of a process's address space."""

    pid: int
    cmd_line: str
    regions: tuple[DetailedMemoryRegion, ...]  # kernel order, ascending address
