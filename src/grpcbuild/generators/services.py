"""Service-stub back-end: gRPC client and server modules (``<stem>_pb2_grpc.py``)."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from google.protobuf import descriptor_pb2

from grpcbuild.descriptors import DescriptorTree
from grpcbuild.generators.base import module_alias, module_name, proto_stem, render_header
from grpcbuild.models import GeneratedArtifact, GenerationOptions

CARDINALITY = {
    (False, False): "unary_unary",
    (False, True): "unary_stream",
    (True, False): "stream_unary",
    (True, True): "stream_stream",
}


@dataclass(slots=True)
class ServiceGenerator:
    name: str = "services"
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
            # No stub module for files without services.
            if not proto.service:
                continue
            artifacts.append(
                GeneratedArtifact(
                    name=f"{proto_stem(file_name).replace('-', '_')}{options.stub_suffix}.py",
                    content=self._render(tree, proto, options).encode("utf-8"),
                    generator=self.name,
                    source=file_name,
                )
            )
        return artifacts

    def _render(
        self,
        tree: DescriptorTree,
        proto: descriptor_pb2.FileDescriptorProto,
        options: GenerationOptions,
    ) -> str:
        imports: set[str] = set()
        body: list[str] = []
        for service in proto.service:
            body.extend(self._render_service(tree, proto, service, options, imports))

        lines = [
            render_header(proto.name, options),
            '"""Client and server classes corresponding to protobuf-defined services."""\n',
            "import grpc\n",
            "\n",
        ]
        for dotted in sorted(imports):
            package, _, leaf = dotted.rpartition(".")
            alias = module_alias(dotted)
            if package:
                lines.append(f"from {package} import {leaf} as {alias}\n")
            else:
                lines.append(f"import {leaf} as {alias}\n")
        lines.extend(body)
        return "".join(lines)

    def _render_service(
        self,
        tree: DescriptorTree,
        proto: descriptor_pb2.FileDescriptorProto,
        service: descriptor_pb2.ServiceDescriptorProto,
        options: GenerationOptions,
        imports: set[str],
    ) -> list[str]:
        full_name = f"{proto.package}.{service.name}" if proto.package else service.name
        methods = [
            (
                method,
                CARDINALITY[(method.client_streaming, method.server_streaming)],
                self._type_ref(tree, method.input_type, options, imports),
                self._type_ref(tree, method.output_type, options, imports),
            )
            for method in service.method
        ]

        stub = [
            "\n",
            "\n",
            f"class {service.name}Stub(object):\n",
            f'    """Client stub for {full_name}."""\n',
            "\n",
            "    def __init__(self, channel):\n",
            '        """Constructor.\n',
            "\n",
            "        Args:\n",
            "            channel: A grpc.Channel.\n",
            '        """\n',
        ]
        if not methods:
            stub.append("        pass\n")
        for method, kind, request, response in methods:
            stub.extend(
                [
                    f"        self.{method.name} = channel.{kind}(\n",
                    f"                '/{full_name}/{method.name}',\n",
                    f"                request_serializer={request}.SerializeToString,\n",
                    f"                response_deserializer={response}.FromString,\n",
                    "                )\n",
                ]
            )

        servicer = [
            "\n",
            "\n",
            f"class {service.name}Servicer(object):\n",
            f'    """Server-side base class for {full_name}."""\n',
        ]
        for method, _, _, _ in methods:
            argument = "request_iterator" if method.client_streaming else "request"
            servicer.extend(
                [
                    "\n",
                    f"    def {method.name}(self, {argument}, context):\n",
                    "        context.set_code(grpc.StatusCode.UNIMPLEMENTED)\n",
                    "        context.set_details('Method not implemented!')\n",
                    "        raise NotImplementedError('Method not implemented!')\n",
                ]
            )

        registration = [
            "\n",
            "\n",
            f"def add_{service.name}Servicer_to_server(servicer, server):\n",
            "    rpc_method_handlers = {\n",
        ]
        for method, kind, request, response in methods:
            registration.extend(
                [
                    f"            '{method.name}': grpc.{kind}_rpc_method_handler(\n",
                    f"                    servicer.{method.name},\n",
                    f"                    request_deserializer={request}.FromString,\n",
                    f"                    response_serializer={response}.SerializeToString,\n",
                    "            ),\n",
                ]
            )
        registration.extend(
            [
                "    }\n",
                "    generic_handler = grpc.method_handlers_generic_handler(\n",
                f"            '{full_name}', rpc_method_handlers)\n",
                "    server.add_generic_rpc_handlers((generic_handler,))\n",
            ]
        )
        return stub + servicer + registration

    def _type_ref(
        self,
        tree: DescriptorTree,
        type_name: str,
        options: GenerationOptions,
        imports: set[str],
    ) -> str:
        qualified = type_name if type_name.startswith(".") else f".{type_name}"
        owner = tree.file_for_symbol(qualified)
        dotted = module_name(owner.name, options.module_suffix, import_prefix=options.import_prefix)
        imports.add(dotted)
        prefix = f".{owner.package}." if owner.package else "."
        return f"{module_alias(dotted)}.{qualified[len(prefix):]}"
