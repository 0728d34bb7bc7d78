"""Structured logging and observability helpers."""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(slots=True)
class StructuredLogger:
    records: list[dict[str, Any]] = field(default_factory=list)

    def log(
        self,
        *,
        operation: str,
        stage: str,
        message: str,
        source: str | None = None,
        generator: str | None = None,
        level: str = "info",
        extra: dict[str, Any] | None = None,
    ) -> None:
        record: dict[str, Any] = {
            "level": level,
            "operation": operation,
            "stage": stage,
            "source": source,
            "generator": generator,
            "message": message,
        }
        if extra is not None:
            record["extra"] = extra
        self.records.append(record)

    def records_for_stage(self, stage: str) -> list[dict[str, Any]]:
        return [record for record in self.records if record.get("stage") == stage]

    def records_for_source(self, source: str) -> list[dict[str, Any]]:
        return [record for record in self.records if record.get("source") == source]

    def outputs_by_source(self, sources: Iterable[str]) -> dict[str, tuple[str, ...]]:
        """Map each input to the file names written for it, in write order."""
        outputs: dict[str, tuple[str, ...]] = {}
        for source in dict.fromkeys(sources):
            names = [
                record["extra"]["name"]
                for record in self.records_for_source(source)
                if record.get("operation") == "write_artifact"
            ]
            # Overwritten names appear once.
            outputs[source] = tuple(dict.fromkeys(names))
        return outputs

    def to_json_lines(self, path: str | Path) -> Path:
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        lines = [json.dumps(record, sort_keys=True) for record in self.records]
        output_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return output_path
