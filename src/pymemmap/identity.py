"""Process identity resolution using psutil."""

import logging

import psutil

from pymemmap.errors import AccessDenied, ProcessNotFound

logger = logging.getLogger(__name__)


def find_pids_by_name(name: str) -> list[int]:
    """
    Return the pids of processes whose name matches, lowest first.

    Processes that die or deny access mid-iteration are skipped.
    """
    pids: list[int] = []
    for proc in psutil.process_iter(attrs=["pid", "name"]):
        try:
            if proc.info.get("name") == name:
                pids.append(proc.info["pid"])
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
            continue
    pids.sort()
    logger.debug("Processes named %r: %s", name, pids)
    return pids


def resolve_pid(name: str) -> int:
    """Resolve a process name to a single pid (the lowest match)."""
    pids = find_pids_by_name(name)
    if not pids:
        raise ProcessNotFound(None, f"no process named {name!r}")
    return pids[0]


def ensure_alive(pid: int) -> str:
    """
    Check that a pid refers to a live process and return its name.

    Raises:
        ProcessNotFound: The pid does not exist or is a zombie.
        AccessDenied: The process exists but cannot be inspected.
    """
    try:
        proc = psutil.Process(pid)
        if proc.status() == psutil.STATUS_ZOMBIE:
            raise ProcessNotFound(pid, "process is a zombie")
        return proc.name()
    except psutil.ZombieProcess as exc:
        raise ProcessNotFound(pid, "process is a zombie") from exc
    except psutil.NoSuchProcess as exc:
        raise ProcessNotFound(pid, "no such process") from exc
    except psutil.AccessDenied as exc:
        raise AccessDenied(pid, "access denied") from exc
