"""Persisting generated artifacts into the output directory."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from pathlib import Path

from grpcbuild.errors import ArtifactCollisionError, CompileIOError
from grpcbuild.models import GeneratedArtifact


def write_artifacts(
    artifacts: Sequence[GeneratedArtifact],
    output_dir: str | Path,
    *,
    strict: bool = False,
) -> tuple[Path, ...]:
    """Write each artifact under ``output_dir`` in order and return the paths.

    Same-named artifacts overwrite each other in write order unless
    ``strict`` is set, in which case duplicates are rejected before any file
    is touched. A failed write stops the remaining writes; files already
    written stay on disk.
    """
    destination = Path(output_dir)
    if strict:
        _ensure_unique_names(artifacts)

    written: list[Path] = []
    for artifact in artifacts:
        target = destination / artifact.name
        try:
            target.write_bytes(artifact.content)
        except OSError as exc:
            raise CompileIOError(
                f"Could not write generated file `{target}`.",
                path=str(target),
                hint="Make sure the output directory exists and is writable.",
                context={
                    "operation": "write",
                    "generator": artifact.generator,
                    "source": artifact.source,
                },
            ) from exc
        written.append(target)
    return tuple(written)


def _ensure_unique_names(artifacts: Sequence[GeneratedArtifact]) -> None:
    counts = Counter(artifact.name for artifact in artifacts)
    duplicates = sorted(name for name, count in counts.items() if count > 1)
    if duplicates:
        raise ArtifactCollisionError(
            "Generated artifacts share output names.",
            names=duplicates,
            hint="Rename one of the inputs or change the module/stub suffix options.",
            context={"operation": "write"},
        )
