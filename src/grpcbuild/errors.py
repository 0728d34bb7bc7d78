"""Typed compile error model with stable, machine-readable error codes."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import StrEnum


class ErrorCode(StrEnum):
    """Stable error identifiers used across pipeline stages."""

    GENERIC = "E_GENERIC"
    IO = "E_IO"
    PATH_CONVERSION = "E_PATH_CONVERSION"
    DESCRIPTOR_DECODING = "E_DESCRIPTOR_DECODING"
    ENVIRONMENT = "E_ENVIRONMENT"


class CompileError(Exception):
    """Base error class that carries code, optional hint, and context."""

    code: str
    hint: str | None
    context: Mapping[str, str]

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code.value
        self.hint = hint
        self.context = dict(context or {})

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        if self.context:
            for k, v in self.context.items():
                if v:
                    parts.append(f"  {k}: {v}")
        return "\n".join(parts)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "code": self.code,
            "message": str(self),
            "context": dict(self.context),
        }
        if self.hint is not None:
            payload["hint"] = self.hint
        return payload


class GenericCompileError(CompileError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.GENERIC, hint=hint, context=context)


class ArtifactCollisionError(GenericCompileError):
    """Two generated artifacts share one output name (strict writes only)."""

    def __init__(
        self,
        message: str,
        *,
        names: Sequence[str],
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        self.names = tuple(names)
        merged = {"names": ", ".join(self.names), **dict(context or {})}
        super().__init__(message, hint=hint, context=merged)


class CompileIOError(CompileError):
    """Filesystem failure; the underlying ``OSError`` is the ``__cause__``."""

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        self.path = path
        merged = dict(context or {})
        if path is not None:
            merged.setdefault("path", path)
        super().__init__(message, code=ErrorCode.IO, hint=hint, context=merged)


class PathConversionError(CompileError):
    """A path cannot be rendered as text or placed under any include root."""

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        roots: Sequence[str] = (),
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        self.path = path
        self.roots = tuple(roots)
        merged = dict(context or {})
        if path is not None:
            merged.setdefault("path", path)
        if self.roots:
            merged.setdefault("roots", ", ".join(self.roots))
        super().__init__(message, code=ErrorCode.PATH_CONVERSION, hint=hint, context=merged)


class DescriptorDecodingError(CompileError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.DESCRIPTOR_DECODING, hint=hint, context=context)


class CompilerEnvironmentError(CompileError):
    """The external compiler executable cannot be located or run."""

    def __init__(
        self,
        message: str,
        *,
        executable: str | None = None,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        self.executable = executable
        merged = dict(context or {})
        if executable is not None:
            merged.setdefault("executable", executable)
        super().__init__(message, code=ErrorCode.ENVIRONMENT, hint=hint, context=merged)


__all__ = [
    "ArtifactCollisionError",
    "CompileError",
    "CompileIOError",
    "CompilerEnvironmentError",
    "DescriptorDecodingError",
    "ErrorCode",
    "GenericCompileError",
    "PathConversionError",
]
