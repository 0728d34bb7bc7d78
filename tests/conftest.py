"""Shared test fixtures."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest
from google.protobuf import descriptor_pb2

from grpcbuild.errors import CompilerEnvironmentError

ASSETS_DIR = Path(__file__).parent / "assets" / "protos"

FieldProto = descriptor_pb2.FieldDescriptorProto


def _string_field(message: descriptor_pb2.DescriptorProto, name: str, number: int) -> None:
    message.field.add(
        name=name,
        number=number,
        type=FieldProto.TYPE_STRING,
        label=FieldProto.LABEL_OPTIONAL,
        json_name=name,
    )


def helloworld_file() -> descriptor_pb2.FileDescriptorProto:
    proto = descriptor_pb2.FileDescriptorProto(
        name="helloworld.proto",
        package="helloworld",
        syntax="proto3",
    )
    _string_field(proto.message_type.add(name="HelloRequest"), "name", 1)
    _string_field(proto.message_type.add(name="HelloReply"), "message", 1)
    service = proto.service.add(name="Greeter")
    service.method.add(
        name="SayHello",
        input_type=".helloworld.HelloRequest",
        output_type=".helloworld.HelloReply",
    )
    return proto


def baz_file() -> descriptor_pb2.FileDescriptorProto:
    proto = descriptor_pb2.FileDescriptorProto(
        name="foo/bar/baz.proto",
        package="foo.bar",
        syntax="proto3",
        dependency=["helloworld.proto"],
    )
    reply = proto.message_type.add(name="EchoReply")
    _string_field(reply, "message", 1)
    reply.field.add(
        name="history",
        number=2,
        type=FieldProto.TYPE_STRING,
        label=FieldProto.LABEL_REPEATED,
        json_name="history",
    )
    service = proto.service.add(name="Baz")
    service.method.add(
        name="Echo",
        input_type=".helloworld.HelloRequest",
        output_type=".foo.bar.EchoReply",
    )
    service.method.add(
        name="Watch",
        input_type=".helloworld.HelloRequest",
        output_type=".foo.bar.EchoReply",
        server_streaming=True,
    )
    return proto


def plain_file() -> descriptor_pb2.FileDescriptorProto:
    proto = descriptor_pb2.FileDescriptorProto(name="plain.proto", package="plain", syntax="proto3")
    _string_field(proto.message_type.add(name="Note"), "text", 1)
    return proto


@dataclass(slots=True)
class StubInvoker:
    """Compiler stand-in that writes a fixed descriptor set."""

    payload: bytes
    name: str = "stub"
    available: bool = True
    fail_with: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    def ensure_available(self) -> None:
        if not self.available:
            raise CompilerEnvironmentError("stub compiler missing", executable="stub")

    def invoke(self, *, inputs, includes, descriptor_out: Path) -> None:
        self.calls.append(
            {
                "inputs": tuple(inputs),
                "includes": tuple(includes),
                "descriptor_out": descriptor_out,
                "existed": descriptor_out.exists(),
            }
        )
        if self.fail_with is not None:
            raise self.fail_with
        descriptor_out.write_bytes(self.payload)


@pytest.fixture
def assets_dir() -> Path:
    return ASSETS_DIR


@pytest.fixture
def descriptor_set() -> descriptor_pb2.FileDescriptorSet:
    return descriptor_pb2.FileDescriptorSet(file=[helloworld_file(), baz_file(), plain_file()])


@pytest.fixture
def descriptor_blob(descriptor_set: descriptor_pb2.FileDescriptorSet) -> bytes:
    return descriptor_set.SerializeToString(deterministic=True)


@pytest.fixture
def stub_invoker(descriptor_blob: bytes) -> StubInvoker:
    return StubInvoker(payload=descriptor_blob)
