"""Protocol and naming helpers shared by code-generation back-ends."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import PurePosixPath
from typing import Protocol

from grpcbuild.descriptors import DescriptorTree
from grpcbuild.models import GeneratedArtifact, GenerationOptions

WELL_KNOWN_PREFIX = "google/protobuf/"

HEADER = "# Generated by grpcbuild. DO NOT EDIT!\n# source: {source}\n"


class CodeGenerator(Protocol):
    name: str
    accepts_options: bool

    def generate(
        self,
        tree: DescriptorTree,
        file_names: Sequence[str],
        options: GenerationOptions,
    ) -> list[GeneratedArtifact]:
        """Emit artifacts for ``file_names`` only, resolving references through ``tree``."""


def proto_stem(proto_name: str) -> str:
    """``foo/bar/baz.proto`` -> ``baz``."""
    return PurePosixPath(proto_name).stem


def module_name(proto_name: str, suffix: str, *, import_prefix: str = "") -> str:
    """Dotted import path of the generated module for ``proto_name``.

    Output is written flat, so generated modules import each other by stem,
    optionally under ``import_prefix``. Well-known types ship with the
    protobuf runtime and keep their package path.
    """
    stem = proto_stem(proto_name).replace("-", "_")
    if proto_name.startswith(WELL_KNOWN_PREFIX):
        package = PurePosixPath(proto_name).parent.as_posix().replace("/", ".")
        return f"{package}.{stem}_pb2"
    if import_prefix:
        return f"{import_prefix}.{stem}{suffix}"
    return f"{stem}{suffix}"


def module_alias(dotted: str) -> str:
    return dotted.replace("_", "__").replace(".", "_dot_")


def render_header(source: str, options: GenerationOptions) -> str:
    if not options.emit_header:
        return ""
    return HEADER.format(source=source)
