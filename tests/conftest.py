"""Shared test fixtures for cbt."""

from pathlib import Path
from tempfile import TemporaryDirectory

import pytest
from google.protobuf import descriptor_pb2, descriptor_pool
from typer.testing import CliRunner

from cbt_tool.cli.main import app

TESTDATA = Path(__file__).parent / "testdata"

# Serialized tutorial.Person: Jim, id 42, one HOME phone.
PERSON_BIN = (
    b'\n\x03Jim\x10*\x1a\x0fjim@example.com"\x0c\n\x08555-1212\x10\x01'
)


@pytest.fixture
def runner():
    """Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def cli_runner(runner):
    """Invoke the CLI app with the given arguments."""

    def invoke(*args: str, **kwargs):
        return runner.invoke(app, list(args), **kwargs)

    return invoke


@pytest.fixture
def temp_dir():
    """Temporary directory for test files."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def testdata():
    return TESTDATA


@pytest.fixture
def make_descriptor():
    """Build a bare message descriptor without going through protoc."""

    def make(name: str, package: str = ""):
        file_proto = descriptor_pb2.FileDescriptorProto(
            name=f"{package or 'default'}/{name}.proto",
            package=package,
            syntax="proto3",
        )
        file_proto.message_type.add(name=name)
        pool = descriptor_pool.DescriptorPool()
        pool.AddSerializedFile(file_proto.SerializeToString())
        full_name = f"{package}.{name}" if package else name
        return pool.FindMessageTypeByName(full_name)

    return make
