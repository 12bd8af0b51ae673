import hashlib
import logging

logger = logging.getLogger(__name__)

META_EXTENSION = ".meta"

MONO_IMPORTER_TEMPLATE = """fileFormatVersion: 2
guid: {guid}
MonoImporter:
  externalObjects: {{}}
  serializedVersion: 2
  defaultReferences: []
  executionOrder: 0
  icon: {{instanceID: 0}}
  userData: 
  assetBundleName: 
  assetBundleVariant: 
"""


def meta_path_for(file_path):
    return f"{file_path}{META_EXTENSION}"


def script_guid(script):
    key = f"{script.assembly_name}|{script.namespace}|{script.class_name}"
    return hashlib.md5(key.encode('utf-8')).hexdigest()


def write_script_meta(container, script, file_path):
    dest = meta_path_for(file_path)
    with open(dest, "w", encoding='utf-8', newline='\n') as f:
        f.write(MONO_IMPORTER_TEMPLATE.format(guid=script_guid(script)))
    logger.debug(f"Wrote {dest}")
