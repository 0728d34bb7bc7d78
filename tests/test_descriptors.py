import pytest

from grpcbuild.descriptors import decode_descriptor_set
from grpcbuild.errors import DescriptorDecodingError, GenericCompileError


def test_decode_exposes_files_in_descriptor_order(descriptor_blob: bytes) -> None:
    tree = decode_descriptor_set(descriptor_blob)

    assert [proto.name for proto in tree] == [
        "helloworld.proto",
        "foo/bar/baz.proto",
        "plain.proto",
    ]
    assert len(tree) == 3
    assert "foo/bar/baz.proto" in tree
    assert tree.file("foo/bar/baz.proto").package == "foo.bar"


def test_symbol_lookup_resolves_across_files(descriptor_blob: bytes) -> None:
    tree = decode_descriptor_set(descriptor_blob)

    assert tree.file_for_symbol(".helloworld.HelloRequest").name == "helloworld.proto"
    assert tree.file_for_symbol("foo.bar.EchoReply").name == "foo/bar/baz.proto"
    assert tree.file_for_symbol(".foo.bar.Baz").name == "foo/bar/baz.proto"


def test_truncated_blob_is_a_decoding_error(descriptor_blob: bytes) -> None:
    with pytest.raises(DescriptorDecodingError) as excinfo:
        decode_descriptor_set(descriptor_blob[:-3])

    assert excinfo.value.code == "E_DESCRIPTOR_DECODING"
    assert excinfo.value.context["size"] == str(len(descriptor_blob) - 3)


def test_length_past_end_is_a_decoding_error() -> None:
    with pytest.raises(DescriptorDecodingError):
        decode_descriptor_set(b"\x0a\x05ab")


def test_unknown_file_lookup_fails(descriptor_blob: bytes) -> None:
    tree = decode_descriptor_set(descriptor_blob)

    with pytest.raises(GenericCompileError):
        tree.file("missing.proto")
