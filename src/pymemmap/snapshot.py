"""Snapshot builder: turns the raw /proc text of a process into a Process."""

import errno
import logging
from pathlib import Path

from pymemmap.errors import AccessDenied, ProcessNotFound, SnapshotIOError
from pymemmap.models import Process
from pymemmap.parsing import parse_regions

logger = logging.getLogger(__name__)


def normalize_cmdline(raw: bytes | str) -> str:
    """Turn the NUL separated cmdline blob into a printable string."""
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    return raw.replace("\0", " ").strip()


def build_process(pid: int, maps_text: str, cmdline_raw: bytes | str) -> Process:
    """Build a Process from already obtained maps/smaps and cmdline text."""
    regions = parse_regions(maps_text)
    return Process(
        pid=pid,
        cmd_line=normalize_cmdline(cmdline_raw),
        regions=tuple(regions),
    )


class ProcfsSource:
    """
    Reads the raw per-process files from a procfs tree.

    OS errors are translated into SnapshotIOError subclasses so callers
    only have to deal with pymemmap exceptions.
    """

    def __init__(self, root: str | Path = "/proc", detailed: bool = True) -> None:
        """
        Initialize the ProcfsSource.

        Args:
            root: Mount point of procfs.
            detailed: Read 'smaps' (with counters) instead of 'maps'.
        """
        self._root = Path(root)
        self._detailed = detailed

    @property
    def root(self) -> Path:
        return self._root

    @property
    def maps_name(self) -> str:
        """Name of the mapping file read for each process."""
        return "smaps" if self._detailed else "maps"

    def read_cmdline(self, pid: int) -> bytes:
        """Read the raw invocation blob of a process."""
        return self._read(pid, "cmdline")

    def read_maps(self, pid: int) -> str:
        """Read the mapping descriptor text of a process."""
        return self._read(pid, self.maps_name).decode("utf-8", errors="surrogateescape")

    def _read(self, pid: int, name: str) -> bytes:
        path = self._root / str(pid) / name
        try:
            return path.read_bytes()
        except OSError as exc:
            raise _translate(pid, path, exc) from exc


def _translate(pid: int, path: Path, exc: OSError) -> SnapshotIOError:
    reason = f"cannot read {path}: {exc.strerror or exc}"
    if isinstance(exc, (FileNotFoundError, ProcessLookupError)) or exc.errno == errno.ESRCH:
        return ProcessNotFound(pid, reason)
    if isinstance(exc, PermissionError):
        return AccessDenied(pid, reason)
    return SnapshotIOError(pid, reason)


def take_snapshot(pid: int, source: ProcfsSource | None = None) -> Process:
    """
    Take the one snapshot of a process.

    Raises:
        SnapshotIOError: The process files could not be read.
        MapsParseError: A region header line is malformed.
    """
    if source is None:
        source = ProcfsSource()

    cmdline = source.read_cmdline(pid)
    maps_text = source.read_maps(pid)
    process = build_process(pid, maps_text, cmdline)

    logger.info(
        "Snapshot of pid %d (%s): %d regions from %s",
        pid,
        source.maps_name,
        len(process.regions),
        source.root,
    )
    return process
