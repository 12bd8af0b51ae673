import argparse
import logging
import os
import shutil
import sys
import tempfile

from assemblies import discover_assemblies
from decompiler import DEFAULT_DECOMPILER, IlSpyDecompiler, ScriptContentLevel
from errors import ExportError, WorkspaceError
from meta_files import write_script_meta
from preprocessor import stage
from script_exporter import ExportContainer, ExportSettings, ScriptExporter
from unity_assets import load_scripts
from unity_version import LANGUAGE_VERSION_CHOICES, UnityVersion, language_version_for, supports_assembly_definitions
from workspace import Workspace

logger = logging.getLogger(__name__)

DEFAULT_TEMP_FOLDER = os.path.join(tempfile.gettempdir(), "unity-script-exporter")


def configure_logging(debug_mode):
    logging.basicConfig(
        level=logging.DEBUG if debug_mode else logging.INFO,
        format="%(message)s",
        force=True,
    )


def check_dependencies(args):
    if args.content_level == ScriptContentLevel.LEVEL0:
        return True
    if shutil.which(args.decompiler) is None:
        print(f"Error: '{args.decompiler}' binary not found. Please install it and add to your PATH.")
        print("Install with: dotnet tool install -g ilspycmd")
        print("Or pass --content-level 0 to export placeholder scripts only.")
        return False
    logger.debug(f"Decompiler found: {shutil.which(args.decompiler)}")
    return True


def resolve_export_version(args, detected):
    if args.unity_version:
        return UnityVersion.parse(args.unity_version)
    return detected


def check_temp_dir(temp_dir, paths):
    temp_dir = os.path.abspath(temp_dir)
    for path in paths:
        path = os.path.abspath(path)
        if os.path.commonpath([temp_dir, path]) == temp_dir:
            raise WorkspaceError(f"Temp folder {temp_dir} would delete {path}; choose another --temp-dir")


def run_export(args):
    assets_directory = os.path.join(args.output, "Assets")
    check_temp_dir(args.temp_dir, [args.output] + args.inputs)

    with Workspace(args.temp_dir) as workspace:
        staged = stage(args.inputs, workspace)
        for source, staged_path in zip(args.inputs, staged):
            if staged_path != source:
                logger.debug(f"{source} -> {staged_path}")

        assemblies = discover_assemblies(staged)
        loaded = load_scripts(staged)
        export_version = resolve_export_version(args, loaded.unity_version)
        language_version = language_version_for(export_version, args.language_version)

        print(f"Unity version: {export_version or 'unknown'}")
        print(f"Language version: {language_version}")
        if not supports_assembly_definitions(export_version):
            print("Assembly definitions: not supported by this version, skipping")
        print()

        settings = ExportSettings(language_version=language_version, content_level=args.content_level)
        exporter = ScriptExporter(IlSpyDecompiler(args.decompiler), settings)
        container = ExportContainer(export_version)
        callback = None if args.no_meta else write_script_meta

        details = exporter.export(container, loaded.scripts, assets_directory, assemblies, callback)

    print(f"\n✓ Exported scripts for {len(details)} assembly(ies) to:")
    print(f"   {assets_directory}")
    return details


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description='Rebuild a Unity scripts project from game packages.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Inputs may be game folders, single asset files, or .zip/.apk packages.
Packages are unpacked into a temporary folder that is removed afterwards.

Content levels:
  0  - placeholder scripts only, no decompilation
  1  - decompile, method bodies may be stubbed
  2  - full decompilation (default)

Examples:
  %(prog)s /path/to/Game -o exported
  %(prog)s game.apk -o exported --unity-version 2019.4.31f1
  %(prog)s /path/to/Game -o exported --content-level 0 --no-meta
        """
    )

    parser.add_argument('inputs', nargs='+', help='Game folders, asset files or packages')
    parser.add_argument('-o', '--output', type=str, required=True,
                       help='Directory the Unity project is written to')
    parser.add_argument('--unity-version', type=str, default=None,
                       help='Unity version to export for (default: detected from the assets)')
    parser.add_argument('--language-version', type=str, default='auto',
                       choices=['auto'] + LANGUAGE_VERSION_CHOICES,
                       help='C# language version for decompiled code (default: auto)')
    parser.add_argument('--content-level', type=int, default=int(ScriptContentLevel.LEVEL2),
                       choices=[int(level) for level in ScriptContentLevel],
                       help='How much of each script to recover (default: 2)')
    parser.add_argument('--decompiler', type=str, default=DEFAULT_DECOMPILER,
                       help='Decompiler executable (default: ilspycmd)')
    parser.add_argument('--temp-dir', type=str, default=DEFAULT_TEMP_FOLDER,
                       help='Scratch folder, wiped on every run')
    parser.add_argument('--no-meta', help='Do not write .meta files next to scripts', action='store_true')
    parser.add_argument('--debug', help='Enable debug output', action='store_true')

    args = parser.parse_args(argv)
    args.content_level = ScriptContentLevel(args.content_level)
    return args


def main(argv=None):
    args = parse_args(argv)
    debug_mode = args.debug
    configure_logging(debug_mode)

    print(f"Unity Script Exporter v1.0")
    print(f"==========================")
    print(f"Inputs: {', '.join(args.inputs)}")
    print(f"Output: {args.output}")
    print(f"Content level: {int(args.content_level)}")
    if debug_mode:
        print(f"Debug: ENABLED")
    print()

    if not check_dependencies(args):
        return 1

    try:
        run_export(args)
    except KeyboardInterrupt:
        print("\n\nOperation cancelled by user.")
        return 0
    except ExportError as e:
        logger.error(f"\nError: {e}")
        return 1
    except Exception as e:
        print(f"\nError: {e}")
        if debug_mode:
            import traceback
            traceback.print_exc()
        return 1

    print("\nDone!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
