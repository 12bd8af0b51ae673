import logging
import os
from dataclasses import dataclass

import UnityPy

from unity_version import UnityVersion

logger = logging.getLogger(__name__)

SCRIPT_TYPE_NAME = "MonoScript"


@dataclass(frozen=True)
class MonoScript:
    class_name: str
    namespace: str
    assembly_name: str
    path_id: int = 0


@dataclass
class LoadedScripts:
    scripts: list
    unity_version: object = None


def read_field(data, *names):
    for name in names:
        if hasattr(data, name):
            value = getattr(data, name)
            return "" if value is None else str(value)
    return ""


def to_mono_script(obj):
    data = obj.read()
    return MonoScript(
        class_name=read_field(data, 'm_ClassName', 'class_name'),
        namespace=read_field(data, 'm_Namespace', 'namespace'),
        assembly_name=read_field(data, 'm_AssemblyName', 'assembly_name'),
        path_id=obj.path_id,
    )


def read_unity_version(obj):
    assets_file = getattr(obj, 'assets_file', None)
    text = getattr(assets_file, 'unity_version', None)
    if not text:
        return None
    try:
        version = UnityVersion.parse(text)
    except ValueError:
        return None
    # Stripped builds report 0.0.0.
    if version.major == 0:
        return None
    return version


def load_scripts(paths):
    existing = [path for path in paths if os.path.exists(path)]
    if not existing:
        return LoadedScripts([])

    env = UnityPy.load(*existing)
    scripts = []
    unity_version = None
    for obj in env.objects:
        if obj.type.name != SCRIPT_TYPE_NAME:
            continue
        if unity_version is None:
            unity_version = read_unity_version(obj)
        scripts.append(to_mono_script(obj))

    logger.info(f"Found {len(scripts)} script asset(s)")
    return LoadedScripts(scripts, unity_version)
