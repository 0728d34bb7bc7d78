"""Top-level compile pipeline: resolve, compile, decode, generate, write."""

from __future__ import annotations

from collections.abc import Sequence

from grpcbuild.compiler import CompilerInvoker, ProtocInvoker, compile_descriptor_set
from grpcbuild.descriptors import DescriptorTree, decode_descriptor_set
from grpcbuild.generators import CodeGenerator, default_generators
from grpcbuild.models import CompileResult, GeneratedArtifact, GenerationOptions
from grpcbuild.observability import StructuredLogger
from grpcbuild.paths import PathLike, path_to_str, resolve_paths
from grpcbuild.report import CompileReport
from grpcbuild.writer import write_artifacts


def compile_protos(
    inputs: Sequence[PathLike],
    includes: Sequence[PathLike],
    output_dir: PathLike,
    options: GenerationOptions | None = None,
    *,
    invoker: CompilerInvoker | None = None,
    generators: Sequence[CodeGenerator] | None = None,
    strict: bool = False,
    logger: StructuredLogger | None = None,
    cwd: PathLike | None = None,
) -> CompileResult:
    """Compile ``inputs`` found under ``includes`` into modules in ``output_dir``.

    Stages run in order and the first failure propagates unchanged, so an
    input that cannot be placed under an include root never reaches the
    compiler.
    """
    log = StructuredLogger() if logger is None else logger
    active_invoker = ProtocInvoker() if invoker is None else invoker
    active_generators = default_generators() if generators is None else tuple(generators)

    resolved = resolve_paths(inputs, includes, cwd=cwd)
    for relative, absolute in zip(resolved.relative_inputs, resolved.absolute_inputs):
        log.log(
            operation="resolve_input",
            stage="resolve",
            source=relative,
            message="Resolved input against include roots.",
            extra={"path": path_to_str(absolute)},
        )

    blob = compile_descriptor_set(resolved, active_invoker)
    log.log(
        operation="compile",
        stage="compile",
        message="Compiler produced a descriptor set.",
        extra={"compiler": active_invoker.name, "size": len(blob)},
    )

    tree = decode_descriptor_set(blob)
    log.log(
        operation="decode",
        stage="decode",
        message="Decoded descriptor set.",
        extra={"files": len(tree)},
    )

    artifacts = generate_artifacts(
        tree,
        resolved.relative_inputs,
        active_generators,
        options,
        logger=log,
    )

    written = write_artifacts(artifacts, output_dir, strict=strict)
    for artifact, path in zip(artifacts, written):
        log.log(
            operation="write_artifact",
            stage="write",
            source=artifact.source,
            generator=artifact.generator,
            message="Wrote generated file.",
            extra={"name": artifact.name, "path": path_to_str(path)},
        )

    report = CompileReport.build(
        inputs=resolved.relative_inputs,
        roots=(path_to_str(root) for root in resolved.absolute_roots),
        artifacts=((artifact.name, artifact.content) for artifact in artifacts),
        outputs=log.outputs_by_source(resolved.relative_inputs),
        logs=log.records,
    )
    return CompileResult(resolved=resolved, written=written, report=report)


def generate_artifacts(
    tree: DescriptorTree,
    relative_inputs: Sequence[str],
    generators: Sequence[CodeGenerator],
    options: GenerationOptions | None = None,
    *,
    logger: StructuredLogger | None = None,
) -> list[GeneratedArtifact]:
    """Run every back-end in order and concatenate their artifacts.

    ``options`` is passed as-is to back-ends with ``accepts_options`` set.
    Back-ends without it, and every back-end when ``options`` is ``None``,
    get a default ``GenerationOptions()`` so the ``generate`` signature stays
    uniform.
    """
    forwarded = GenerationOptions() if options is None else options
    artifacts: list[GeneratedArtifact] = []
    for generator in generators:
        generator_options = forwarded if generator.accepts_options else GenerationOptions()
        produced = generator.generate(tree, relative_inputs, generator_options)
        artifacts.extend(produced)
        if logger is not None:
            logger.log(
                operation="generate",
                stage="generate",
                generator=generator.name,
                message="Generator produced artifacts.",
                extra={"artifacts": [artifact.name for artifact in produced]},
            )
    return artifacts
