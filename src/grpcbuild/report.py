"""Compile report model and export helpers."""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import cbor2


@dataclass(frozen=True, slots=True)
class CompileReport:
    inputs: tuple[str, ...] = ()
    roots: tuple[str, ...] = ()
    artifact_digests: dict[str, str] = field(default_factory=dict)
    outputs: dict[str, tuple[str, ...]] = field(default_factory=dict)
    logs: tuple[dict[str, Any], ...] = ()
    schema_version: int = 1

    @classmethod
    def build(
        cls,
        *,
        inputs: Iterable[str],
        roots: Iterable[str],
        artifacts: Iterable[tuple[str, bytes]],
        outputs: dict[str, tuple[str, ...]] | None = None,
        logs: Iterable[dict[str, Any]] = (),
    ) -> CompileReport:
        # Later artifacts with the same name replace earlier ones, matching
        # what ends up on disk after a permissive write.
        digests = {name: hashlib.sha256(content).hexdigest() for name, content in artifacts}
        return cls(
            inputs=tuple(inputs),
            roots=tuple(roots),
            artifact_digests=digests,
            outputs=dict(outputs or {}),
            logs=tuple(logs),
        )

    def to_json(self, path: str | Path | None = None) -> str:
        encoded = json.dumps(self._payload(), indent=2, sort_keys=True) + "\n"
        if path is not None:
            Path(path).write_text(encoded, encoding="utf-8")
        return encoded

    def to_cbor(self, path: str | Path | None = None) -> bytes:
        encoded = cbor2.dumps(self._payload(), canonical=True)
        if path is not None:
            Path(path).write_bytes(encoded)
        return encoded

    def _payload(self) -> dict[str, object]:
        return {
            "schema_version": self.schema_version,
            "inputs": list(self.inputs),
            "roots": list(self.roots),
            "artifact_digests": dict(sorted(self.artifact_digests.items())),
            "outputs": {source: list(names) for source, names in sorted(self.outputs.items())},
            "logs": [dict(record) for record in self.logs],
        }
