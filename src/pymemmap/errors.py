"""Exceptions raised by pymemmap."""


class MemmapError(Exception):
    """Base class for all pymemmap errors."""


class MapsParseError(MemmapError, ValueError):
    """A region header line could not be parsed."""


class MissingField(MapsParseError):
    """A mandatory header token is absent."""

    def __init__(self, field: str) -> None:
        super().__init__(f"missing field: {field}")
        self.field = field


class InvalidAddress(MapsParseError):
    """The address range has no '-' separator."""

    def __init__(self, text: str) -> None:
        super().__init__(f"invalid address range: {text!r}")
        self.text = text


class InvalidPermissions(MapsParseError):
    """The permission token is not exactly four characters."""

    def __init__(self, text: str) -> None:
        super().__init__(f"invalid permissions: {text!r}")
        self.text = text


class InvalidDevice(MapsParseError):
    """The device token has no ':' separator."""

    def __init__(self, text: str) -> None:
        super().__init__(f"invalid device: {text!r}")
        self.text = text


class InvalidInt(MapsParseError):
    """A numeric token is not valid in its radix or is out of range."""

    def __init__(self, text: str, radix: int = 10) -> None:
        super().__init__(f"invalid integer: {text!r} (base {radix})")
        self.text = text
        self.radix = radix


class SnapshotIOError(MemmapError):
    """The raw text for a process could not be obtained."""

    def __init__(self, pid: int | None, reason: str) -> None:
        super().__init__(reason if pid is None else f"pid {pid}: {reason}")
        self.pid = pid
        self.reason = reason


class ProcessNotFound(SnapshotIOError):
    """The process does not exist or has already exited."""


class AccessDenied(SnapshotIOError):
    """The process exists but its files cannot be read."""
