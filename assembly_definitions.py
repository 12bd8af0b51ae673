import json
import logging
import os
from dataclasses import dataclass
from typing import Optional

from assemblies import Assembly, is_predefined_assembly

logger = logging.getLogger(__name__)

ASSEMBLY_DEFINITION_EXTENSION = ".asmdef"


@dataclass(frozen=True)
class AssemblyDefinitionDetails:
    assembly_name: str
    output_directory: str
    assembly: Optional[Assembly] = None


def add_details(details_by_name, details):
    """Register ``details`` unless its assembly already has an entry."""
    if details.assembly_name in details_by_name:
        return False
    details_by_name[details.assembly_name] = details
    return True


def build_assembly_definition(details):
    return {
        "name": details.assembly_name,
        "references": [],
        "includePlatforms": [],
        "excludePlatforms": [],
        "allowUnsafeCode": True,
        "overrideReferences": False,
        "precompiledReferences": [],
        "autoReferenced": True,
        "defineConstraints": [],
        "versionDefines": [],
        "noEngineReferences": False,
    }


def export_assembly_definition(details):
    dest = os.path.join(details.output_directory, f"{details.assembly_name}{ASSEMBLY_DEFINITION_EXTENSION}")
    os.makedirs(details.output_directory, exist_ok=True)
    with open(dest, "w", encoding='utf-8') as f:
        json.dump(build_assembly_definition(details), f, indent=4)
    logger.debug(f"Wrote {dest}")
    return dest


def emit_assembly_definitions(details_by_name, supports_feature):
    if not supports_feature or not details_by_name:
        return []

    written = []
    for details in details_by_name.values():
        # Assembly-CSharp and friends are implicit in every project.
        if is_predefined_assembly(details.assembly_name):
            continue
        written.append(export_assembly_definition(details))

    if written:
        logger.info(f"Wrote {len(written)} assembly definition file(s)")
    return written
