"""Code-generation back-ends."""

from __future__ import annotations

from .base import CodeGenerator, module_alias, module_name, proto_stem
from .messages import MessageGenerator
from .services import ServiceGenerator


def default_generators() -> tuple[CodeGenerator, ...]:
    """Service stubs first, then data structures."""
    return (ServiceGenerator(), MessageGenerator())


__all__ = [
    "CodeGenerator",
    "MessageGenerator",
    "ServiceGenerator",
    "default_generators",
    "module_alias",
    "module_name",
    "proto_stem",
]
