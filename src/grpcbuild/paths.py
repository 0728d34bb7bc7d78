"""Input path resolution against ordered include roots.

An input may be given three ways: as an absolute path, relative to the
working directory, or relative to one of the include roots. Resolution picks
a single existing location for each input and re-derives the root-relative
name that ``protoc`` and the code generators key their output on.

Root order is significant at both steps: the first root under which an
input exists wins, and the first root that contains the accepted location
supplies its relative name.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Sequence
from pathlib import Path

from grpcbuild.errors import PathConversionError
from grpcbuild.models import ResolvedPaths

PathLike = str | os.PathLike[str]
PathExists = Callable[[Path], bool]


def resolve_paths(
    inputs: Sequence[PathLike],
    roots: Sequence[PathLike],
    *,
    cwd: PathLike | None = None,
    exists: PathExists | None = None,
) -> ResolvedPaths:
    """Resolve ``inputs`` against ``roots`` into absolute and root-relative forms."""
    base = Path.cwd() if cwd is None else absolutize(cwd, Path.cwd())
    check = _path_exists if exists is None else exists

    absolute_roots = tuple(absolutize(root, base) for root in roots)
    root_labels = tuple(path_to_str(root) for root in absolute_roots)

    absolute_inputs = tuple(
        _locate(entry, roots=absolute_roots, root_labels=root_labels, base=base, exists=check)
        for entry in inputs
    )
    relative_inputs = tuple(
        _relativize(candidate, roots=absolute_roots, root_labels=root_labels)
        for candidate in absolute_inputs
    )
    return ResolvedPaths(
        absolute_roots=absolute_roots,
        absolute_inputs=absolute_inputs,
        relative_inputs=relative_inputs,
    )


def absolutize(path: PathLike, base: Path) -> Path:
    """Return ``path`` unchanged when absolute, otherwise joined onto ``base``."""
    candidate = Path(path_to_str(path))
    if candidate.is_absolute():
        return candidate
    return base / candidate


def path_to_str(path: PathLike | bytes) -> str:
    """Render a path as text, rejecting names that are not valid UTF-8."""
    text = os.fsdecode(os.fspath(path))
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as exc:
        printable = text.encode("utf-8", "backslashreplace").decode("utf-8")
        raise PathConversionError(
            f"Path `{printable}` cannot be represented as text.",
            path=printable,
            hint="Rename the file or directory so its name is valid UTF-8.",
        ) from exc
    return text


def _locate(
    entry: PathLike,
    *,
    roots: tuple[Path, ...],
    root_labels: tuple[str, ...],
    base: Path,
    exists: PathExists,
) -> Path:
    label = path_to_str(entry)
    original = Path(label)
    naive = original if original.is_absolute() else base / original
    if exists(naive):
        return naive

    for root in roots:
        candidate = root / original
        if exists(candidate):
            return candidate

    raise PathConversionError(
        f"Input `{label}` does not exist relative to the working directory "
        "or any include root.",
        path=label,
        roots=root_labels,
        hint="Check the input path or add the directory that contains it to the include roots.",
    )


def _relativize(
    candidate: Path,
    *,
    roots: tuple[Path, ...],
    root_labels: tuple[str, ...],
) -> str:
    for root in roots:
        try:
            relative = candidate.relative_to(root)
        except ValueError:
            continue
        if relative.parts:
            return path_to_str(relative.as_posix())

    label = path_to_str(candidate)
    raise PathConversionError(
        f"Input `{label}` is not located under any include root.",
        path=label,
        roots=root_labels,
        hint="Every input must live below one of the include roots passed to the compiler.",
    )


def _path_exists(path: Path) -> bool:
    return path.exists()
