"""Core typed dataclasses for path resolution, generation, and compile results."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from grpcbuild.report import CompileReport


@dataclass(frozen=True, slots=True)
class ResolvedPaths:
    """Parallel path forms produced by resolution.

    ``absolute_inputs[i]`` lives under the first root in ``absolute_roots``
    that contains it, and ``relative_inputs[i]`` is the remainder in POSIX
    form.
    """

    absolute_roots: tuple[Path, ...]
    absolute_inputs: tuple[Path, ...]
    relative_inputs: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class GeneratedArtifact:
    name: str
    content: bytes
    generator: str = ""
    source: str = ""


@dataclass(frozen=True, slots=True)
class GenerationOptions:
    """Knobs forwarded verbatim to back-ends that accept them."""

    module_suffix: str = "_pb2"
    stub_suffix: str = "_pb2_grpc"
    emit_header: bool = True
    # Dotted package prefix for imports between generated modules.
    import_prefix: str = ""


@dataclass(frozen=True, slots=True)
class CompileResult:
    resolved: ResolvedPaths
    written: tuple[Path, ...] = ()
    report: CompileReport = field(default_factory=CompileReport)
