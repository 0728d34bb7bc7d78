from grpcbuild.errors import (
    ArtifactCollisionError,
    CompileError,
    CompileIOError,
    CompilerEnvironmentError,
    DescriptorDecodingError,
    ErrorCode,
    GenericCompileError,
    PathConversionError,
)


def test_error_codes_are_stable_and_machine_readable() -> None:
    errors = [
        GenericCompileError("generic"),
        CompileIOError("io"),
        PathConversionError("path"),
        DescriptorDecodingError("decode"),
        CompilerEnvironmentError("missing protoc"),
    ]
    assert [error.code for error in errors] == [
        ErrorCode.GENERIC.value,
        ErrorCode.IO.value,
        ErrorCode.PATH_CONVERSION.value,
        ErrorCode.DESCRIPTOR_DECODING.value,
        ErrorCode.ENVIRONMENT.value,
    ]
    assert all(isinstance(error, CompileError) for error in errors)


def test_path_conversion_error_carries_typed_fields() -> None:
    error = PathConversionError(
        "Input `a.proto` is not located under any include root.",
        path="a.proto",
        roots=["/r1", "/r2"],
    )

    assert error.path == "a.proto"
    assert error.roots == ("/r1", "/r2")
    assert error.context["roots"] == "/r1, /r2"
    assert "/r2" in str(error)


def test_to_dict_includes_hint_only_when_present() -> None:
    bare = GenericCompileError("boom").to_dict()
    hinted = CompilerEnvironmentError(
        "protoc missing",
        executable="protoc",
        hint="Install protoc.",
    ).to_dict()

    assert "hint" not in bare
    assert hinted["hint"] == "Install protoc."
    assert hinted["code"] == "E_ENVIRONMENT"
    assert hinted["context"] == {"executable": "protoc"}


def test_collision_error_is_generic_and_lists_names() -> None:
    error = ArtifactCollisionError("dup", names=["a.py", "b.py"])

    assert isinstance(error, GenericCompileError)
    assert error.code == "E_GENERIC"
    assert error.names == ("a.py", "b.py")
    assert error.context["names"] == "a.py, b.py"


def test_message_lives_in_exception_args() -> None:
    error = CompileIOError("disk full", path="/out/a_pb2.py", hint="Free some space.")

    assert error.args == ("disk full",)
    assert str(error).splitlines()[0] == "disk full"
    assert error.to_dict()["context"] == {"path": "/out/a_pb2.py"}
