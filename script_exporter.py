import logging
import os
import re
from dataclasses import dataclass
from typing import Optional

from assemblies import get_scripts_folder_name, is_reference_assembly, to_assembly_name
from assembly_definitions import AssemblyDefinitionDetails, add_details, emit_assembly_definitions
from decompiler import ScriptContentLevel
from meta_files import meta_path_for
from unity_version import UnityVersion, supports_assembly_definitions

logger = logging.getLogger(__name__)

SCRIPT_EXTENSION = ".cs"
INVALID_PATH_CHARACTERS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
SINGLE_ASSET_EXPORT_ERROR = "Need to export all scripts at once"
DEFAULT_ASSEMBLY_NAME = "Assembly-CSharp"


@dataclass(frozen=True)
class ExportSettings:
    language_version: str = "CSharp7_3"
    content_level: ScriptContentLevel = ScriptContentLevel.LEVEL2


@dataclass(frozen=True)
class ExportContainer:
    export_version: Optional[UnityVersion] = None


@dataclass(frozen=True)
class ScriptExportTarget:
    folder_path: str
    file_name: str

    @property
    def relative_path(self):
        return os.path.join(self.folder_path, self.file_name)


@dataclass(frozen=True)
class ScriptHandoff:
    script: object
    file_path: str


@dataclass(frozen=True)
class ExportResult:
    ok: bool
    error: Optional[str] = None


def sanitize_path_segment(name):
    name = INVALID_PATH_CHARACTERS.sub('_', str(name))
    if name in ("", ".", ".."):
        return "_"
    return name


def resolve_export_path(assembly, namespace, class_name):
    assembly_folder = to_assembly_name(assembly)
    segments = [get_scripts_folder_name(assembly_folder), assembly_folder]
    segments.extend(part for part in (namespace or "").split('.') if part)
    folder_path = os.path.join(*[sanitize_path_segment(segment) for segment in segments])
    file_name = f"{sanitize_path_segment(class_name)}{SCRIPT_EXTENSION}"
    return ScriptExportTarget(folder_path, file_name)


def get_assembly_name_fixed(script):
    # Scripts from old players carry no assembly name; they were compiled into Assembly-CSharp.
    return to_assembly_name(script.assembly_name) or DEFAULT_ASSEMBLY_NAME


def is_engine_script(script):
    assembly_name = to_assembly_name(script.assembly_name)
    if not assembly_name:
        return (script.namespace or "").split('.')[0] == "UnityEngine"
    # Engine modules, the BCL and Unity packages.
    return is_reference_assembly(assembly_name)


def get_empty_script_content(namespace, class_name):
    comment = "// Placeholder generated because the original source could not be decompiled."
    if not namespace:
        return (
            "using UnityEngine;\n"
            "\n"
            f"public class {class_name} : MonoBehaviour\n"
            "{\n"
            f"\t{comment}\n"
            "}\n"
        )
    return (
        "using UnityEngine;\n"
        "\n"
        f"namespace {namespace}\n"
        "{\n"
        f"\tpublic class {class_name} : MonoBehaviour\n"
        "\t{\n"
        f"\t\t{comment}\n"
        "\t}\n"
        "}\n"
    )


class ScriptExporter:
    """Turns managed assemblies and MonoScript assets into a Unity scripts tree.

    Assemblies are decompiled into ``<assets>/<Scripts|Plugins>/<assembly>``.
    Every script the decompiler did not cover gets a placeholder class, and
    scripts are handed to the metadata writer once their file is in place.
    Exporting is batch only; see :meth:`export_asset`.
    """

    def __init__(self, decompiler, settings=None):
        self.decompiler = decompiler
        self.settings = settings or ExportSettings()

    def export_asset(self, container, script, path):
        return ExportResult(False, SINGLE_ASSET_EXPORT_ERROR)

    def export(self, container, scripts, assets_directory, assemblies=(), callback=None):
        if not assets_directory:
            raise ValueError("assets_directory must not be empty")
        logger.info("Exporting scripts...")

        details = self.decompile_assemblies(assemblies, assets_directory)
        handoffs = self.materialize_scripts(scripts, assets_directory, details, collect_handoffs=callback is not None)

        for handoff in handoffs:
            callback(container, handoff.script, handoff.file_path)

        emit_assembly_definitions(details, supports_assembly_definitions(container.export_version))
        return details

    def decompile_assemblies(self, assemblies, assets_directory):
        details = {}
        if self.settings.content_level == ScriptContentLevel.LEVEL0:
            return details

        for assembly in assemblies:
            if is_reference_assembly(assembly.name):
                continue

            logger.info(f"Decompiling {assembly.name}")
            output_directory = os.path.join(assets_directory, get_scripts_folder_name(assembly.name), assembly.name)
            os.makedirs(output_directory, exist_ok=True)
            self.decompiler.decompile_project(
                assembly.path,
                output_directory,
                self.settings.language_version,
                self.settings.content_level,
            )
            add_details(details, AssemblyDefinitionDetails(assembly.name, output_directory, assembly))
        return details

    def materialize_scripts(self, scripts, assets_directory, details, collect_handoffs=True):
        handoffs = []
        handed_off = set()

        for script in scripts:
            if is_engine_script(script):
                logger.debug(f"Skipping engine script {script.namespace}.{script.class_name}")
                continue

            assembly_name = get_assembly_name_fixed(script)
            target = resolve_export_path(assembly_name, script.namespace, script.class_name)
            folder_path = os.path.join(assets_directory, target.folder_path)
            file_path = os.path.join(folder_path, target.file_name)

            if not os.path.exists(file_path):
                os.makedirs(folder_path, exist_ok=True)
                with open(file_path, "w", encoding='utf-8') as f:
                    f.write(get_empty_script_content(script.namespace, script.class_name))
                logger.debug(f"Wrote placeholder {file_path}")

                if assembly_name not in details:
                    assembly_directory = os.path.join(assets_directory, "Scripts", assembly_name)
                    add_details(details, AssemblyDefinitionDetails(assembly_name, assembly_directory))

            if not collect_handoffs:
                continue
            if os.path.exists(meta_path_for(file_path)) or file_path in handed_off:
                logger.error(f"Metafile already exists at {meta_path_for(file_path)}")
                continue
            handed_off.add(file_path)
            handoffs.append(ScriptHandoff(script, file_path))

        return handoffs
