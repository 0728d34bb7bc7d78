"""Public package entrypoint for the protobuf/gRPC build orchestrator."""

from .compiler import CompilerInvoker, ProtocInvoker, compile_descriptor_set
from .descriptors import DescriptorTree, decode_descriptor_set
from .errors import (
    ArtifactCollisionError,
    CompileError,
    CompileIOError,
    CompilerEnvironmentError,
    DescriptorDecodingError,
    ErrorCode,
    GenericCompileError,
    PathConversionError,
)
from .generators import CodeGenerator, MessageGenerator, ServiceGenerator, default_generators
from .models import CompileResult, GeneratedArtifact, GenerationOptions, ResolvedPaths
from .observability import StructuredLogger
from .paths import resolve_paths
from .pipeline import compile_protos, generate_artifacts
from .report import CompileReport
from .writer import write_artifacts

__all__ = [
    "ArtifactCollisionError",
    "CodeGenerator",
    "CompileError",
    "CompileIOError",
    "CompileReport",
    "CompileResult",
    "CompilerEnvironmentError",
    "CompilerInvoker",
    "DescriptorDecodingError",
    "DescriptorTree",
    "ErrorCode",
    "GeneratedArtifact",
    "GenerationOptions",
    "GenericCompileError",
    "MessageGenerator",
    "PathConversionError",
    "ProtocInvoker",
    "ResolvedPaths",
    "ServiceGenerator",
    "StructuredLogger",
    "compile_descriptor_set",
    "compile_protos",
    "decode_descriptor_set",
    "default_generators",
    "generate_artifacts",
    "resolve_paths",
    "write_artifacts",
]
