import logging
import os
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

FIRSTPASS_ASSEMBLY_NAMES = ("Assembly-CSharp-firstpass", "Assembly - CSharp - firstpass")

PREDEFINED_ASSEMBLY_NAMES = frozenset([
    "Assembly-CSharp",
    "Assembly-CSharp-firstpass",
    "Assembly-CSharp-Editor",
    "Assembly-CSharp-Editor-firstpass",
    "Assembly-UnityScript",
    "Assembly-UnityScript-firstpass",
    "Assembly-Boo",
    "Assembly-Boo-firstpass",
])

REFERENCE_ASSEMBLY_PATTERN = re.compile(
    r'^(mscorlib|netstandard|System|Mono|Microsoft|UnityEngine|UnityEditor|Unity)(\..+)?$'
)

MANAGED_FOLDER_NAME = "Managed"


@dataclass(frozen=True)
class Assembly:
    name: str
    path: str


def to_assembly_name(name):
    name = (name or "").strip()
    if name.lower().endswith(".dll"):
        name = name[:-4]
    return name


def is_reference_assembly(name):
    return bool(REFERENCE_ASSEMBLY_PATTERN.match(to_assembly_name(name)))


def is_predefined_assembly(name):
    return to_assembly_name(name) in PREDEFINED_ASSEMBLY_NAMES


def get_scripts_folder_name(assembly_name):
    return "Plugins" if assembly_name in FIRSTPASS_ASSEMBLY_NAMES else "Scripts"


def discover_assemblies(paths):
    """Collect managed assemblies from every ``Managed`` folder under ``paths``.

    Standalone players keep them in ``<Game>_Data/Managed`` and Android
    packages in ``assets/bin/Data/Managed``. When two folders ship the same
    assembly name the first one found is kept.
    """
    found = {}
    for path in paths:
        if os.path.isfile(path) and path.lower().endswith(".dll"):
            add_assembly(found, path)
            continue
        if not os.path.isdir(path):
            continue
        for root, dirs, files in os.walk(path):
            dirs.sort()
            if os.path.basename(root) != MANAGED_FOLDER_NAME:
                continue
            for file in sorted(files):
                if file.lower().endswith(".dll"):
                    add_assembly(found, os.path.join(root, file))

    if found:
        logger.info(f"Found {len(found)} managed assembly file(s)")
    return list(found.values())


def add_assembly(found, file_path):
    name = to_assembly_name(os.path.basename(file_path))
    if name in found:
        logger.debug(f"Ignoring duplicate assembly {file_path}")
        return
    found[name] = Assembly(name, file_path)
