import importlib
import shutil
import sys
from pathlib import Path

import pytest

from grpcbuild import compile_protos

pytestmark = pytest.mark.skipif(shutil.which("protoc") is None, reason="protoc is not installed.")


def test_real_protoc_compiles_assets(
    assets_dir: Path,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.delenv("PROTOC", raising=False)

    result = compile_protos(["helloworld.proto", "foo/bar/baz.proto"], [assets_dir], tmp_path)

    assert result.resolved.relative_inputs == ("helloworld.proto", "foo/bar/baz.proto")
    assert sorted(path.name for path in tmp_path.iterdir()) == [
        "baz_pb2.py",
        "baz_pb2_grpc.py",
        "helloworld_pb2.py",
        "helloworld_pb2_grpc.py",
    ]
    for path in tmp_path.iterdir():
        compile(path.read_text(encoding="utf-8"), str(path), "exec")


def test_generated_messages_import_and_serialize(
    assets_dir: Path,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.delenv("PROTOC", raising=False)
    compile_protos(["helloworld.proto"], [assets_dir], tmp_path)
    monkeypatch.syspath_prepend(str(tmp_path))

    try:
        module = importlib.import_module("helloworld_pb2")
        request = module.HelloRequest(name="world")
        assert module.HelloRequest.FromString(request.SerializeToString()).name == "world"
    finally:
        sys.modules.pop("helloworld_pb2", None)
