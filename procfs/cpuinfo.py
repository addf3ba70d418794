"""Parsing of processor information from /proc/cpuinfo for several architectures."""

from __future__ import annotations

import dataclasses
import platform
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

from procfs.util import parse_uint

_CLOCK_RE = re.compile(r"([\d.]+)", re.ASCII)
_S390X_PROCESSOR_RE = re.compile(r"^processor\s+(\d+):.*", re.ASCII)
_ARM_FIRST_LINE_RE = re.compile(r"^[Pp]rocessor")


@dataclass
class CPUInfo:
    """General information about one system CPU."""

    processor: int = 0
    vendor_id: str = ""
    cpu_family: str = ""
    model: str = ""
    model_name: str = ""
    stepping: str = ""
    microcode: str = ""
    cpu_mhz: float = 0.0
    cache_size: str = ""
    physical_id: str = ""
    siblings: int = 0
    core_id: str = ""
    cpu_cores: int = 0
    apic_id: str = ""
    initial_apic_id: str = ""
    fpu: str = ""
    fpu_exception: str = ""
    cpuid_level: int = 0
    wp: str = ""
    flags: list[str] = field(default_factory=list)
    bugs: list[str] = field(default_factory=list)
    bogomips: float = 0.0
    clflush_size: int = 0
    cache_alignment: int = 0
    address_sizes: str = ""
    power_management: str = ""


_X86_TEXT = {
    "vendor": "vendor_id",
    "vendor_id": "vendor_id",
    "cpu family": "cpu_family",
    "model": "model",
    "model name": "model_name",
    "stepping": "stepping",
    "microcode": "microcode",
    "cache size": "cache_size",
    "physical id": "physical_id",
    "core id": "core_id",
    "apicid": "apic_id",
    "initial apicid": "initial_apic_id",
    "fpu": "fpu",
    "fpu_exception": "fpu_exception",
    "wp": "wp",
    "address sizes": "address_sizes",
    "power management": "power_management",
}
_X86_UINT = {
    "siblings": "siblings",
    "cpu cores": "cpu_cores",
    "cpuid level": "cpuid_level",
    "clflush size": "clflush_size",
    "cache_alignment": "cache_alignment",
}
_X86_FLOAT = {"cpu MHz": "cpu_mhz", "bogomips": "bogomips"}
_X86_LIST = {"flags": "flags", "bugs": "bugs"}


def _lines(data: str | bytes) -> Iterator[str]:
    if isinstance(data, bytes):
        data = data.decode("utf-8", errors="replace")
    lines = data.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return iter([line.removesuffix("\r") for line in lines])


def _first_non_empty_line(lines: Iterator[str]) -> str:
    for line in lines:
        if line.strip():
            return line
    return ""


def _split_field(line: str) -> tuple[str, str | None]:
    key, sep, value = line.partition(": ")
    return key.strip(), (value if sep else None)


def _require(value: str | None, line: str) -> str:
    if value is None:
        raise ValueError(f"malformed cpuinfo line: {line!r}")
    return value


def _invalid(line: str) -> ValueError:
    return ValueError(f"invalid cpuinfo file: {line!r}")


def _parse_uint32(text: str) -> int:
    return parse_uint(text, 0, 32)


def _parse_float(text: str) -> float:
    if not text or text != text.strip() or "_" in text:
        raise ValueError(f"invalid float value: {text!r}")
    try:
        return float(text)
    except ValueError:
        raise ValueError(f"invalid float value: {text!r}") from None


def _parse_clock(text: str) -> float:
    match = _CLOCK_RE.search(text.strip())
    return _parse_float(match.group(1) if match else "")


def _copy(cpu: CPUInfo) -> CPUInfo:
    return dataclasses.replace(cpu, flags=list(cpu.flags), bugs=list(cpu.bugs))


def _at(cpus: list[CPUInfo], index: int) -> CPUInfo:
    if not 0 <= index < len(cpus):
        raise ValueError(f"invalid cpuinfo file: processor {index} out of range")
    return cpus[index]


def _last(cpus: list[CPUInfo], line: str) -> CPUInfo:
    if not cpus:
        raise ValueError(f"invalid cpuinfo file: {line!r} precedes any processor")
    return cpus[-1]


def _first_processor(lines: Iterator[str], prefix: str) -> tuple[str, str]:
    first = _first_non_empty_line(lines)
    if not first.startswith(prefix) or ":" not in first:
        raise _invalid(first)
    _, value = _split_field(first)
    return first, _require(value, first)


def parse_cpu_info_x86(data: str | bytes) -> list[CPUInfo]:
    """Parse cpuinfo as written on x86 machines."""
    lines = _lines(data)
    _, value = _first_processor(lines, "processor")
    cpus = [CPUInfo(processor=_parse_uint32(value))]

    for line in lines:
        if ":" not in line:
            continue
        key, value = _split_field(line)
        if key == "processor":
            cpus.append(CPUInfo(processor=_parse_uint32(_require(value, line))))
            continue
        cpu = cpus[-1]
        if key in _X86_TEXT:
            setattr(cpu, _X86_TEXT[key], _require(value, line))
        elif key in _X86_UINT:
            setattr(cpu, _X86_UINT[key], _parse_uint32(_require(value, line)))
        elif key in _X86_FLOAT:
            setattr(cpu, _X86_FLOAT[key], _parse_float(_require(value, line)))
        elif key in _X86_LIST:
            setattr(cpu, _X86_LIST[key], _require(value, line).split())
    return cpus


def parse_cpu_info_arm(data: str | bytes) -> list[CPUInfo]:
    """Parse cpuinfo as written on ARM machines, including the legacy layouts."""
    lines = _lines(data)
    first = _first_non_empty_line(lines)
    if not _ARM_FIRST_LINE_RE.match(first) or ":" not in first:
        raise _invalid(first)
    key, value = _split_field(first)
    cpus: list[CPUInfo] = []
    common = CPUInfo()
    features_line = ""
    if key == "Processor":
        common = CPUInfo(model_name=_require(value, first))
    else:
        cpus.append(CPUInfo(processor=_parse_uint32(_require(value, first))))

    for line in lines:
        if ":" not in line:
            continue
        key, value = _split_field(line)
        if key == "processor":
            cpu = _copy(common)
            cpu.processor = _parse_uint32(_require(value, line))
            cpus.append(cpu)
        elif key == "BogoMIPS":
            if not cpus:
                cpu = _copy(common)
                cpu.processor = 0
                cpus.append(cpu)
            cpus[-1].bogomips = _parse_float(_require(value, line))
        elif key == "Features":
            features_line = line
        elif key == "model name":
            _last(cpus, line).model_name = _require(value, line)

    _, features = _split_field(features_line)
    if features is None:
        raise ValueError("invalid cpuinfo file: no Features line")
    for cpu in cpus:
        cpu.flags = features.split()
    return cpus


def parse_cpu_info_s390x(data: str | bytes) -> list[CPUInfo]:
    """Parse cpuinfo as written on s390x machines."""
    lines = _lines(data)
    first, vendor = _first_processor(lines, "vendor_id")
    cpus: list[CPUInfo] = []
    common = CPUInfo(vendor_id=vendor)

    for line in lines:
        if ":" not in line:
            continue
        key, value = _split_field(line)
        if key == "bogomips per cpu":
            common.bogomips = _parse_float(_require(value, line))
        elif key == "features":
            common.flags = _require(value, line).split()
        if line.startswith("processor"):
            match = _S390X_PROCESSOR_RE.match(line)
            if match is None:
                raise _invalid(first)
            cpu = _copy(common)
            cpu.processor = _parse_uint32(match.group(1))
            cpus.append(cpu)
        if line.startswith("cpu number"):
            break

    index = 0
    for line in lines:
        if ":" not in line:
            continue
        key, value = _split_field(line)
        if key == "cpu number":
            index += 1
        elif key == "cpu MHz dynamic":
            _at(cpus, index).cpu_mhz = _parse_clock(_require(value, line))
        elif key == "physical id":
            _at(cpus, index).physical_id = _require(value, line)
        elif key == "core id":
            _at(cpus, index).core_id = _require(value, line)
        elif key == "cpu cores":
            _at(cpus, index).cpu_cores = _parse_uint32(_require(value, line))
        elif key == "siblings":
            _at(cpus, index).siblings = _parse_uint32(_require(value, line))
    return cpus


def parse_cpu_info_mips(data: str | bytes) -> list[CPUInfo]:
    """Parse cpuinfo as written on MIPS machines."""
    lines = _lines(data)
    _, system_type = _first_processor(lines, "system type")
    cpus: list[CPUInfo] = []
    index = 0

    for line in lines:
        if ":" not in line:
            continue
        key, value = _split_field(line)
        if key == "processor":
            number = _parse_uint32(_require(value, line))
            index = number
            cpus.append(CPUInfo())
            cpu = _at(cpus, index)
            cpu.processor = number
            cpu.vendor_id = system_type
        elif key == "cpu model":
            _at(cpus, index).model_name = _require(value, line)
        elif key == "BogoMIPS":
            _at(cpus, index).bogomips = _parse_float(_require(value, line))
    return cpus


def parse_cpu_info_ppc(data: str | bytes) -> list[CPUInfo]:
    """Parse cpuinfo as written on POWER machines."""
    lines = _lines(data)
    _, value = _first_processor(lines, "processor")
    cpus = [CPUInfo(processor=_parse_uint32(value))]

    for line in lines:
        if ":" not in line:
            continue
        key, value = _split_field(line)
        if key == "processor":
            cpus.append(CPUInfo(processor=_parse_uint32(_require(value, line))))
        elif key == "cpu":
            cpus[-1].vendor_id = _require(value, line)
        elif key == "clock":
            cpus[-1].cpu_mhz = _parse_clock(_require(value, line))
    return cpus


def parse_cpu_info_riscv(data: str | bytes) -> list[CPUInfo]:
    """Parse cpuinfo as written on RISC-V machines."""
    lines = _lines(data)
    _, value = _first_processor(lines, "processor")
    cpus = [CPUInfo(processor=_parse_uint32(value))]
    index = 0

    for line in lines:
        if ":" not in line:
            continue
        key, value = _split_field(line)
        if key == "processor":
            number = _parse_uint32(_require(value, line))
            index = number
            cpus.append(CPUInfo())
            _at(cpus, index).processor = number
        elif key == "hart":
            _at(cpus, index).core_id = _require(value, line)
        elif key == "isa":
            _at(cpus, index).model_name = _require(value, line)
    return cpus


_X86_MACHINES = frozenset({"i386", "i486", "i586", "i686", "x86", "x86_64", "amd64"})
_PPC_MACHINES = frozenset({"ppc64", "ppc64le"})


def _parser_for(machine: str) -> Callable[[str | bytes], list[CPUInfo]]:
    if machine in _X86_MACHINES:
        return parse_cpu_info_x86
    if machine.startswith("arm") or machine.startswith("aarch64"):
        return parse_cpu_info_arm
    if machine.startswith("mips"):
        return parse_cpu_info_mips
    if machine in _PPC_MACHINES:
        return parse_cpu_info_ppc
    if machine.startswith("riscv"):
        return parse_cpu_info_riscv
    if machine == "s390x":
        return parse_cpu_info_s390x
    raise ValueError(f"cpuinfo parsing is not supported for machine {machine!r}")


def parse_cpu_info(data: str | bytes, machine: str | None = None) -> list[CPUInfo]:
    """Parse cpuinfo with the parser for the given machine, by default this one."""
    name = (machine or platform.machine()).lower()
    return _parser_for(name)(data)