"""Shared fixtures: a synthetic process information tree."""

from dataclasses import dataclass
from pathlib import Path

import pytest

from procmon.config import ProcmonConfig

AGGREGATE_STAT = """\
cpu  100 0 50 800 20 10 20 0 0 0
cpu0 50 0 25 400 10 5 10 0 0 0
cpu1 50 0 25 400 10 5 10 0 0 0
intr 12345
ctxt 67890
btime 1700000000
processes 4242
procs_running 3
procs_blocked 0
"""

MEMINFO = """\
MemTotal:           1000 kB
MemAvailable:        400 kB
Buffers:              10 kB
"""

CPUINFO = """\
processor\t: 0
vendor_id\t: GenuineIntel
model name\t: Intel(R) Core(TM) i5-7200U CPU @ 2.50GHz
cpu MHz\t\t: 2711.996
cache size\t: 3072 KB
physical id\t: 0

processor\t: 1
vendor_id\t: GenuineIntel
model name\t: Intel(R) Core(TM) i5-7200U CPU @ 2.50GHz
cpu MHz\t\t: 2712.4
cache size\t: 3072 KB
physical id\t: 0
"""

PASSWD = """\
root:x:0:0:root:/root:/bin/bash
daemon:x:1:1:daemon:/usr/sbin:/usr/sbin/nologin
bob:x:10000:10000::/home/bob:/bin/sh
alice:x:1000:1000::/home/alice:/bin/sh
"""

OS_RELEASE = """\
NAME="Ubuntu"
VERSION="20.04.3 LTS (Focal Fossa)"
ID=ubuntu
PRETTY_NAME="Ubuntu 20.04.3 LTS"
"""


def stat_line(pid: int, comm: str, utime: int, stime: int, fields: int = 24) -> str:
    """Build a /proc/<pid>/stat line with utime/stime at fields 14 and 15."""
    values = [str(pid), f"({comm})", "S"] + ["0"] * (fields - 3)
    if fields >= 15:
        values[13] = str(utime)
        values[14] = str(stime)
    return " ".join(values) + "\n"


def status_text(name: str, uid: int | None, vmsize_kb: int | None) -> str:
    lines = [f"Name:\t{name}", "Umask:\t0022", "State:\tS (sleeping)"]
    if uid is not None:
        lines.append(f"Uid:\t{uid}\t{uid}\t{uid}\t{uid}")
        lines.append(f"Gid:\t{uid}\t{uid}\t{uid}\t{uid}")
    if vmsize_kb is not None:
        lines.append(f"VmSize:\t{vmsize_kb:>8} kB")
    return "\n".join(lines) + "\n"


@dataclass
class FakeProc:
    """Handle on a synthetic /proc tree and its companion /etc files."""

    root: Path
    passwd: Path
    os_release: Path

    @property
    def config(self) -> ProcmonConfig:
        return ProcmonConfig(
            proc_root=str(self.root),
            os_release_path=str(self.os_release),
            passwd_path=str(self.passwd),
        )

    def write(self, relative: str, content: str) -> Path:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    def add_process(
        self,
        pid: int,
        name: str = "proc",
        uid: int | None = 0,
        vmsize_kb: int | None = 1024,
        cmdline: str = "",
        utime: int = 0,
        stime: int = 0,
        stat_fields: int = 24,
    ) -> Path:
        self.write(f"{pid}/status", status_text(name, uid, vmsize_kb))
        self.write(f"{pid}/stat", stat_line(pid, name, utime, stime, stat_fields))
        self.write(f"{pid}/cmdline", cmdline)
        return self.root / str(pid)


@pytest.fixture
def fake_proc(tmp_path: Path) -> FakeProc:
    """A /proc tree with three processes and two cores."""
    root = tmp_path / "proc"
    root.mkdir()
    etc = tmp_path / "etc"
    etc.mkdir()
    passwd = etc / "passwd"
    passwd.write_text(PASSWD)
    os_release = etc / "os-release"
    os_release.write_text(OS_RELEASE)

    proc = FakeProc(root=root, passwd=passwd, os_release=os_release)
    proc.write("stat", AGGREGATE_STAT)
    proc.write("meminfo", MEMINFO)
    proc.write("uptime", "12345.67 54321.00\n")
    proc.write(
        "version",
        "Linux version 5.10.16.3-microsoft-standard-WSL2 (oe-user@oe-host) #1 SMP\n",
    )
    proc.write("cpuinfo", CPUINFO)

    proc.add_process(1, name="systemd", uid=0, vmsize_kb=12800,
                     cmdline="/sbin/init\0splash\0", utime=250, stime=150)
    proc.add_process(42, name="python3", uid=1000, vmsize_kb=1535,
                     cmdline="python3\0-m\0http.server\0", utime=10, stime=5)
    proc.add_process(7, name="kthreadd", uid=0, vmsize_kb=None,
                     cmdline="", stat_fields=10)

    # Non-process entries that the pid scan must skip
    (root / "self").mkdir()
    (root / "acpi").mkdir()
    proc.write("99", "not a directory\n")
    return proc
