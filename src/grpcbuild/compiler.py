"""External ``protoc`` invocation producing a serialized descriptor set.

The compiler is reached through the :class:`CompilerInvoker` protocol so the
pipeline can run against a stub that writes a fixed descriptor set. The
default :class:`ProtocInvoker` locates ``protoc`` from an explicit path, the
``PROTOC`` environment variable, or ``PATH``, in that order.
"""

from __future__ import annotations

import os
import shutil
import subprocess
import tempfile
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from grpcbuild.errors import CompileIOError, CompilerEnvironmentError, GenericCompileError
from grpcbuild.models import ResolvedPaths

MINIMUM_PROTOC_VERSION = (3, 0)
PROTOC_ENV_VAR = "PROTOC"


class CompilerInvoker(Protocol):
    name: str

    def ensure_available(self) -> None:
        """Raise ``CompilerEnvironmentError`` when the compiler cannot run."""

    def invoke(
        self,
        *,
        inputs: Sequence[Path],
        includes: Sequence[Path],
        descriptor_out: Path,
    ) -> None:
        """Compile ``inputs`` and write a descriptor set with imports to ``descriptor_out``."""


@dataclass(slots=True)
class ProtocInvoker:
    name: str = "protoc"
    executable: str | None = None
    extra_args: list[str] = field(default_factory=list)

    def requested_executable(self) -> str:
        if self.executable:
            return self.executable
        return os.environ.get(PROTOC_ENV_VAR) or "protoc"

    def locate(self) -> str | None:
        return shutil.which(self.requested_executable())

    def ensure_available(self) -> None:
        requested = self.requested_executable()
        resolved = shutil.which(requested)
        if resolved is None:
            raise CompilerEnvironmentError(
                f"Protocol buffer compiler `{requested}` was not found.",
                executable=requested,
                hint=(
                    "Install protoc (for example `apt install protobuf-compiler`) and make sure "
                    f"it is in PATH, or point the {PROTOC_ENV_VAR} environment variable at it."
                ),
                context={"operation": "ensure_available"},
            )
        self._check_protoc_version(resolved)

    def invoke(
        self,
        *,
        inputs: Sequence[Path],
        includes: Sequence[Path],
        descriptor_out: Path,
    ) -> None:
        executable = self.locate() or self.requested_executable()
        cmd: list[str] = [
            executable,
            "--include_imports",
            f"--descriptor_set_out={descriptor_out}",
        ]
        cmd.extend(f"--proto_path={include}" for include in includes)
        cmd.extend(self.extra_args)
        cmd.extend(str(path) for path in inputs)

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            raise CompileIOError(
                f"Could not start `{executable}`.",
                path=executable,
                context={"operation": "invoke", "command": " ".join(cmd)},
            ) from exc

        if result.returncode != 0:
            raise GenericCompileError(
                "protoc failed to compile the inputs.",
                hint="Check protoc output for details.",
                context={
                    "operation": "invoke",
                    "returncode": str(result.returncode),
                    "stderr": result.stderr[:2000] if result.stderr else "",
                    "command": " ".join(cmd),
                },
            )

    def _check_protoc_version(self, executable: str) -> None:
        """Verify protoc runs and meets the minimum version requirement."""
        try:
            result = subprocess.run(
                [executable, "--version"],
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            raise CompilerEnvironmentError(
                f"Protocol buffer compiler `{executable}` could not be executed.",
                executable=executable,
                hint="Check that the protoc binary is executable on this platform.",
                context={"operation": "ensure_available"},
            ) from exc
        if result.returncode != 0:
            raise CompilerEnvironmentError(
                f"Protocol buffer compiler `{executable}` is not runnable.",
                executable=executable,
                hint="Reinstall protoc or point the PROTOC environment variable at a working one.",
                context={
                    "operation": "ensure_available",
                    "returncode": str(result.returncode),
                    "stderr": result.stderr[:2000] if result.stderr else "",
                },
            )
        # protoc --version prints something like "libprotoc 3.21.12" or "libprotoc 25.1"
        version_str = result.stdout.strip()
        parts = version_str.replace("libprotoc", "").strip().split(".")
        try:
            version_tuple = tuple(int(p) for p in parts[:2])
        except (ValueError, IndexError):
            return
        if version_tuple < MINIMUM_PROTOC_VERSION:
            minimum = ".".join(str(v) for v in MINIMUM_PROTOC_VERSION)
            raise CompilerEnvironmentError(
                f"protoc version {version_str} is below minimum {minimum}.",
                executable=executable,
                hint="Upgrade protoc to a protobuf 3 release or newer.",
                context={
                    "operation": "ensure_available",
                    "version": version_str,
                    "minimum": minimum,
                },
            )


def compile_descriptor_set(resolved: ResolvedPaths, invoker: CompilerInvoker) -> bytes:
    """Run the compiler over resolved inputs and return the serialized descriptor set.

    Availability is checked before the temporary descriptor file is created,
    and the file is removed on every exit path.
    """
    invoker.ensure_available()

    try:
        scratch = tempfile.NamedTemporaryFile(prefix="grpcbuild-", suffix=".desc")
    except OSError as exc:
        raise CompileIOError(
            "Could not allocate a temporary descriptor set file.",
            context={"operation": "compile"},
        ) from exc

    with scratch as handle:
        descriptor_out = Path(handle.name)
        invoker.invoke(
            inputs=resolved.absolute_inputs,
            includes=resolved.absolute_roots,
            descriptor_out=descriptor_out,
        )
        try:
            return descriptor_out.read_bytes()
        except OSError as exc:
            raise CompileIOError(
                "Could not read the descriptor set written by the compiler.",
                path=str(descriptor_out),
                context={"operation": "compile", "compiler": invoker.name},
            ) from exc
