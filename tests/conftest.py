"""Test configuration putting the repository root on ``sys.path``."""

import os
import sys
import zipfile

import pytest

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from assemblies import Assembly  # noqa: E402
from decompiler import Decompiler  # noqa: E402
from unity_assets import MonoScript  # noqa: E402
from workspace import Workspace  # noqa: E402


class FakeDecompiler(Decompiler):
    """Records calls and writes the given sources into the output directory."""

    def __init__(self, sources=None):
        self.sources = sources or {}
        self.calls = []

    def decompile_project(self, assembly_path, output_directory, language_version, content_level):
        self.calls.append((assembly_path, output_directory, language_version, content_level))
        for relative_path, text in self.sources.get(os.path.basename(assembly_path), {}).items():
            dest = os.path.join(output_directory, relative_path)
            os.makedirs(os.path.dirname(dest), exist_ok=True)
            with open(dest, "w", encoding="utf-8") as f:
                f.write(text)


def make_zip(path, entries):
    with zipfile.ZipFile(path, "w") as zf:
        for name, data in entries.items():
            zf.writestr(name, data)
    return str(path)


def make_script(class_name, namespace="", assembly_name="Assembly-CSharp.dll"):
    return MonoScript(class_name=class_name, namespace=namespace, assembly_name=assembly_name)


def make_assembly(tmp_path, name):
    path = tmp_path / "Managed" / f"{name}.dll"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"MZ")
    return Assembly(name, str(path))


@pytest.fixture
def workspace(tmp_path):
    ws = Workspace(tmp_path / "temp")
    ws.initialize()
    yield ws
    ws.dispose()


@pytest.fixture
def fake_decompiler():
    return FakeDecompiler()
