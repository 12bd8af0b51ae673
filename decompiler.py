import abc
import logging
import shutil
import subprocess
from enum import IntEnum

import chardet

from errors import DecompilationError

logger = logging.getLogger(__name__)

DEFAULT_DECOMPILER = "ilspycmd"


class ScriptContentLevel(IntEnum):
    LEVEL0 = 0  # no decompilation, placeholder scripts only
    LEVEL1 = 1  # decompiled, method bodies may be stubbed
    LEVEL2 = 2  # full decompilation


class Decompiler(abc.ABC):
    """Writes a compilable source tree for one assembly into ``output_directory``."""

    @abc.abstractmethod
    def decompile_project(self, assembly_path, output_directory, language_version, content_level):
        raise NotImplementedError


def decode_output(data):
    if not data:
        return ""
    if isinstance(data, str):
        return data
    encoding = chardet.detect(data).get('encoding') or 'utf-8'
    return data.decode(encoding, errors='replace')


class IlSpyDecompiler(Decompiler):
    def __init__(self, executable=DEFAULT_DECOMPILER):
        self.executable = executable
        self.warned_about_level = False

    def is_available(self):
        return shutil.which(self.executable) is not None

    def build_command(self, assembly_path, output_directory, language_version):
        return [
            self.executable,
            "-p",
            "--nested-directories",
            "-lv", language_version,
            "-o", output_directory,
            assembly_path,
        ]

    def decompile_project(self, assembly_path, output_directory, language_version, content_level):
        if content_level == ScriptContentLevel.LEVEL0:
            return
        if content_level < ScriptContentLevel.LEVEL2 and not self.warned_about_level:
            logger.warning(f"{self.executable} cannot stub method bodies, decompiling them in full")
            self.warned_about_level = True

        if not self.is_available():
            raise DecompilationError(f"'{self.executable}' binary not found. Install it with: dotnet tool install -g ilspycmd")

        cmd = self.build_command(assembly_path, output_directory, language_version)
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            subprocess.run(cmd, check=True, capture_output=True, stdin=subprocess.DEVNULL)
        except subprocess.CalledProcessError as e:
            details = decode_output(e.stderr) or decode_output(e.stdout)
            raise DecompilationError(f"Failed to decompile {assembly_path}: {details.strip()}") from e
        except OSError as e:
            raise DecompilationError(f"Could not run {self.executable}: {e}") from e
