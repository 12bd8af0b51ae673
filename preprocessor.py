import logging
import os
import shutil
import zipfile
import zlib

from errors import ExtractionError

logger = logging.getLogger(__name__)

ZIP_EXTENSION = ".zip"
APK_EXTENSION = ".apk"
# Split APK bundles nest several archives; they are left for the caller to unpack.
XAPK_EXTENSION = ".xapk"

ARCHIVE_EXTENSIONS = (ZIP_EXTENSION, APK_EXTENSION)


def get_file_extension(path):
    if os.path.isfile(path):
        return os.path.splitext(path)[1]
    return None


def stage(paths, workspace):
    result = []
    for path in paths:
        if get_file_extension(path) in ARCHIVE_EXTENSIONS:
            result.append(extract_to_random_temp_folder(path, workspace))
        else:
            result.append(path)
    return result


def extract_to_random_temp_folder(archive_path, workspace):
    output_directory = workspace.allocate_subfolder()
    logger.info(f"Uncompressing files...\n\tFrom: {archive_path}\n\tTo: {output_directory}")

    try:
        os.makedirs(output_directory, exist_ok=True)
        with zipfile.ZipFile(archive_path, 'r') as zip_ref:
            for entry in zip_ref.infolist():
                full_path = resolve_entry_path(output_directory, entry.filename)
                if entry.is_dir():
                    os.makedirs(full_path, exist_ok=True)
                    continue

                os.makedirs(os.path.dirname(full_path), exist_ok=True)
                with zip_ref.open(entry) as source, open(full_path, 'wb') as dest:
                    shutil.copyfileobj(source, dest)
                logger.debug(f"  {entry.filename}")
    except (zipfile.BadZipFile, zipfile.LargeZipFile, zlib.error, EOFError,
            RuntimeError, NotImplementedError, OSError) as e:
        raise ExtractionError(f"Failed to extract {archive_path}: {e}") from e

    return output_directory


def resolve_entry_path(output_directory, internal_path):
    full_path = os.path.normpath(os.path.join(output_directory, internal_path))
    if os.path.commonpath([output_directory, full_path]) != output_directory:
        raise ExtractionError(f"Archive entry escapes the extraction folder: {internal_path}")
    return full_path
