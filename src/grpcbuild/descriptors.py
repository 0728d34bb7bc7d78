"""Decoding of serialized descriptor sets into a navigable tree."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from google.protobuf import descriptor_pb2
from google.protobuf.message import DecodeError

from grpcbuild.errors import DescriptorDecodingError, GenericCompileError


@dataclass(slots=True)
class DescriptorTree:
    """All compiled files, including transitively imported ones."""

    descriptor_set: descriptor_pb2.FileDescriptorSet
    _by_name: dict[str, descriptor_pb2.FileDescriptorProto] = field(
        init=False,
        repr=False,
        default_factory=dict,
    )
    _symbols: dict[str, descriptor_pb2.FileDescriptorProto] = field(
        init=False,
        repr=False,
        default_factory=dict,
    )

    def __post_init__(self) -> None:
        for proto in self.descriptor_set.file:
            self._by_name.setdefault(proto.name, proto)
            prefix = f".{proto.package}" if proto.package else ""
            for message in proto.message_type:
                self._index_message(proto, message, prefix)
            for enum in proto.enum_type:
                self._symbols.setdefault(f"{prefix}.{enum.name}", proto)
            for service in proto.service:
                self._symbols.setdefault(f"{prefix}.{service.name}", proto)

    def __iter__(self) -> Iterator[descriptor_pb2.FileDescriptorProto]:
        return iter(self.descriptor_set.file)

    def __len__(self) -> int:
        return len(self.descriptor_set.file)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def file(self, name: str) -> descriptor_pb2.FileDescriptorProto:
        try:
            return self._by_name[name]
        except KeyError:
            raise GenericCompileError(
                f"Descriptor set does not contain `{name}`.",
                hint="The compiler output does not match the requested inputs.",
                context={"operation": "lookup", "file": name},
            ) from None

    def file_for_symbol(self, full_name: str) -> descriptor_pb2.FileDescriptorProto:
        """Return the file declaring a fully-qualified (leading dot) type name."""
        key = full_name if full_name.startswith(".") else f".{full_name}"
        try:
            return self._symbols[key]
        except KeyError:
            raise GenericCompileError(
                f"Descriptor set does not declare `{full_name}`.",
                context={"operation": "lookup", "symbol": full_name},
            ) from None

    def _index_message(
        self,
        proto: descriptor_pb2.FileDescriptorProto,
        message: descriptor_pb2.DescriptorProto,
        prefix: str,
    ) -> None:
        qualified = f"{prefix}.{message.name}"
        self._symbols.setdefault(qualified, proto)
        for nested in message.nested_type:
            self._index_message(proto, nested, qualified)
        for enum in message.enum_type:
            self._symbols.setdefault(f"{qualified}.{enum.name}", proto)


def decode_descriptor_set(blob: bytes) -> DescriptorTree:
    try:
        descriptor_set = descriptor_pb2.FileDescriptorSet.FromString(blob)
    except DecodeError as exc:
        raise DescriptorDecodingError(
            "Compiler output is not a valid descriptor set.",
            hint=(
                "The protoc release and the protobuf runtime may be incompatible, "
                "or the descriptor file was corrupted."
            ),
            context={"operation": "decode", "size": str(len(blob))},
        ) from exc
    return DescriptorTree(descriptor_set=descriptor_set)
