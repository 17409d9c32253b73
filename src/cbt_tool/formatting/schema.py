"""Protocol-buffer schema loading.

Definition files are compiled with the protoc bundled in grpcio-tools into a
FileDescriptorSet, which is loaded into a private descriptor pool. Message
types declared at the top level of the listed files are then registered by
lower-cased name, and also by lower-cased ``package.Name`` when the file has
a package.
"""

from __future__ import annotations

import os
import subprocess
import sys
import tempfile
from importlib import resources
from pathlib import Path
from typing import TYPE_CHECKING

from google.protobuf import descriptor_pb2, descriptor_pool

from cbt_tool.core.exceptions import SchemaParseError
from cbt_tool.core.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from google.protobuf.descriptor import Descriptor


class MessageTypeRegistry:
    """Case-insensitive mapping of message names to descriptors."""

    def __init__(self) -> None:
        self._types: dict[str, Descriptor] = {}

    def register(self, descriptor: Descriptor, package: str = "") -> None:
        self._types[descriptor.name.lower()] = descriptor
        if package:
            self._types[f"{package}.{descriptor.name}".lower()] = descriptor

    def get(self, name: str) -> Descriptor | None:
        return self._types.get(name.lower())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._types

    def __len__(self) -> int:
        return len(self._types)

    def keys(self) -> list[str]:
        return sorted(self._types)


def _well_known_include() -> str:
    """Directory holding google/protobuf/*.proto shipped with grpcio-tools."""
    return str(resources.files("grpc_tools") / "_proto")


def _virtual_name(definition: str, search_paths: Sequence[str]) -> str:
    """Name protoc gives ``definition`` inside the descriptor set.

    Files given by a real path are named relative to the first search path
    containing them; anything else is already relative to a search path.
    """
    path = Path(definition)
    if path.exists():
        resolved = path.resolve()
        for search_path in search_paths:
            root = Path(search_path).resolve()
            if resolved.is_relative_to(root):
                return resolved.relative_to(root).as_posix()
    return path.as_posix()


def _compile(definitions: Sequence[str], search_paths: Sequence[str]) -> bytes:
    """Run protoc over the definitions and return the serialized FileDescriptorSet.

    Raises SchemaParseError with protoc's diagnostics when it fails.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        out = os.path.join(tmpdir, "descriptors.pb")
        args = [
            sys.executable,
            "-m",
            "grpc_tools.protoc",
            "--include_imports",
            f"--descriptor_set_out={out}",
            *(f"--proto_path={p}" for p in search_paths),
            f"--proto_path={_well_known_include()}",
            *definitions,
        ]
        result = subprocess.run(args, capture_output=True, text=True, check=False)
        if result.returncode != 0:
            msg = (
                f"couldn't parse protocol-buffer definitions {', '.join(definitions)}:\n"
                f"{result.stderr.strip()}"
            )
            raise SchemaParseError(msg)
        return Path(out).read_bytes()


def load_message_types(
    definitions: Sequence[str],
    search_paths: Sequence[str] = (),
) -> MessageTypeRegistry:
    """Parse definition files and register their message types.

    An empty definition list produces an empty registry. Without search
    paths the current working directory is searched.
    Raises SchemaParseError when a file or one of its imports can't be
    parsed or found.
    """
    log = get_logger(__name__)
    registry = MessageTypeRegistry()
    if not definitions:
        return registry

    paths = list(search_paths) or ["."]
    data = _compile(definitions, paths)

    try:
        descriptor_set = descriptor_pb2.FileDescriptorSet.FromString(data)
        pool = descriptor_pool.DescriptorPool()
        for file_proto in descriptor_set.file:
            pool.AddSerializedFile(file_proto.SerializeToString())
    except Exception as e:
        msg = f"couldn't load protocol-buffer descriptors: {e}"
        raise SchemaParseError(msg) from e

    for definition in definitions:
        name = _virtual_name(definition, paths)
        try:
            file_descriptor = pool.FindFileByName(name)
        except KeyError as e:
            msg = f"protocol-buffer definition {definition} not found after parsing"
            raise SchemaParseError(msg) from e
        for message in file_descriptor.message_types_by_name.values():
            registry.register(message, file_descriptor.package)

    log.debug(
        "Loaded protocol-buffer message types",
        files=len(definitions),
        types=len(registry),
    )
    return registry
