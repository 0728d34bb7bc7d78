"""Data-structure back-end: message and enum modules (``<stem>_pb2.py``).

Each module embeds its serialized ``FileDescriptorProto``, registers it with
the default descriptor pool, and lets the protobuf runtime build the message
and enum classes. Direct dependencies are imported first so the pool already
holds every file the descriptor references.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from google.protobuf import descriptor_pb2

from grpcbuild.descriptors import DescriptorTree
from grpcbuild.generators.base import module_alias, module_name, proto_stem, render_header
from grpcbuild.models import GeneratedArtifact, GenerationOptions

PREAMBLE = '''\
"""Generated protocol buffer code."""
from google.protobuf import descriptor as _descriptor
from google.protobuf import descriptor_pool as _descriptor_pool
from google.protobuf import symbol_database as _symbol_database
from google.protobuf.internal import builder as _builder

_sym_db = _symbol_database.Default()

'''


@dataclass(slots=True)
class MessageGenerator:
    name: str = "messages"
    accepts_options: bool = True

    def generate(
        self,
        tree: DescriptorTree,
        file_names: Sequence[str],
        options: GenerationOptions,
    ) -> list[GeneratedArtifact]:
        artifacts: list[GeneratedArtifact] = []
        for file_name in file_names:
            proto = tree.file(file_name)
            artifacts.append(
                GeneratedArtifact(
                    name=f"{proto_stem(file_name).replace('-', '_')}{options.module_suffix}.py",
                    content=self._render(proto, options).encode("utf-8"),
                    generator=self.name,
                    source=file_name,
                )
            )
        return artifacts

    def _render(
        self,
        proto: descriptor_pb2.FileDescriptorProto,
        options: GenerationOptions,
    ) -> str:
        own_module = module_name(
            proto.name,
            options.module_suffix,
            import_prefix=options.import_prefix,
        )
        lines = [render_header(proto.name, options) + PREAMBLE]
        for dependency in proto.dependency:
            lines.append(self._import_line(dependency, options))
        # `import public` re-exports the dependency's symbols from this module.
        for index in proto.public_dependency:
            dotted = module_name(
                proto.dependency[index],
                options.module_suffix,
                import_prefix=options.import_prefix,
            )
            lines.append(f"from {dotted} import *\n")
        if proto.dependency:
            lines.append("\n")
        serialized = proto.SerializeToString(deterministic=True)
        lines.append(
            f"DESCRIPTOR = _descriptor_pool.Default().AddSerializedFile({serialized!r})\n"
            "\n"
            "_globals = globals()\n"
            "_builder.BuildMessageAndEnumDescriptors(DESCRIPTOR, _globals)\n"
            f"_builder.BuildTopDescriptorsAndMessages(DESCRIPTOR, {own_module!r}, _globals)\n"
        )
        return "".join(lines)

    def _import_line(self, dependency: str, options: GenerationOptions) -> str:
        dotted = module_name(
            dependency,
            options.module_suffix,
            import_prefix=options.import_prefix,
        )
        alias = module_alias(dotted)
        package, _, leaf = dotted.rpartition(".")
        if package:
            return f"from {package} import {leaf} as {alias}\n"
        return f"import {leaf} as {alias}\n"
