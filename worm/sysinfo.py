"""Snapshot of host system information."""

from __future__ import annotations

import platform
from dataclasses import dataclass

import psutil

_MIB = 1024 * 1024


@dataclass(frozen=True)
class SysInfo:
    """Human-readable OS, CPU and memory summaries."""

    memory: str
    cpu: str
    os: str

    @classmethod
    def collect(cls) -> SysInfo:
        """Gather the current system state."""
        os_name = platform.platform() or "Unknown OS"

        usage = psutil.cpu_percent(interval=None, percpu=True)
        if usage:
            brand = platform.processor() or platform.machine()
            cpu = f"{brand} ({usage[0]:.2f}% active)"
        else:
            cpu = "Unknown CPU"

        mem = psutil.virtual_memory()
        total = mem.total // _MIB
        used = mem.used // _MIB
        memory = f"{used} MB / {total} MB digunakan"

        return cls(memory=memory, cpu=cpu, os=os_name)