"""Shared fixtures: sample smaps text and a fake procfs tree."""

import pytest

SMAPS_SAMPLE = """\
55d0c0a00000-55d0c0a21000 r--p 00000000 08:01 1312 /usr/bin/cat
Size:                132 kB
Rss:                 120 kB
Pss:                 120 kB
Private_Dirty:         0 kB
Anonymous:             0 kB
VmFlags: rd mr mw me dw sd
55d0c1b00000-55d0c1b21000 rw-p 00000000 00:00 0 [heap]
Size:                132 kB
Rss:                  64 kB
Pss:                  64 kB
Private_Dirty:        64 kB
Anonymous:            64 kB
7f2a1b3c4000-7f2a1b5c4000 r-xp 00001000 08:01 1234567 /usr/lib/libc.so.6
Size:               2048 kB
Rss:                1500 kB
Pss:                 300 kB
Shared_Clean:       1500 kB
Private_Dirty:         0 kB
7f2a1b5c4000-7f2a1b5c8000 rw-p 001c4000 08:01 1234567 /usr/lib/libc.so.6
Size:                 16 kB
Rss:                  16 kB
Pss:                  16 kB
Private_Dirty:        16 kB
7f2a1b600000-7f2a1b700000 rw-p 00000000 00:00 0
Size:               1024 kB
Rss:                 200 kB
Pss:                 200 kB
Swap:                 40 kB
7f2a1b800000-7f2a1b801000 rw-s 00000000 00:05 77 /dev/shm/my buffer (deleted)
Size:                  4 kB
Rss:                   4 kB
7ffd4e100000-7ffd4e121000 rw-p 00000000 00:00 0 [stack]
Size:                132 kB
Rss:                  20 kB
Pss:                  20 kB
"""

MAPS_SAMPLE = """\
55d0c0a00000-55d0c0a21000 r--p 00000000 08:01 1312 /usr/bin/cat
55d0c1b00000-55d0c1b21000 rw-p 00000000 00:00 0 [heap]
7ffd4e100000-7ffd4e121000 rw-p 00000000 00:00 0 [stack]
"""

CMDLINE_SAMPLE = b"/usr/bin/cat\x00-n\x00file.txt\x00"


@pytest.fixture
def smaps_text() -> str:
    return SMAPS_SAMPLE


@pytest.fixture
def fake_proc(tmp_path):
    """A procfs-like tree with pid 4242 holding the sample files."""
    pid_dir = tmp_path / "4242"
    pid_dir.mkdir()
    (pid_dir / "cmdline").write_bytes(CMDLINE_SAMPLE)
    (pid_dir / "smaps").write_text(SMAPS_SAMPLE)
    (pid_dir / "maps").write_text(MAPS_SAMPLE)
    return tmp_path
