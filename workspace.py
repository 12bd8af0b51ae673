import logging
import os
import secrets
import shutil

from errors import WorkspaceError

logger = logging.getLogger(__name__)

NUMBER_OF_RANDOM_CHARACTERS = 10
RANDOM_ALPHABET = "abcdefghijkmnpqrstuvwxyzABCDEFGHJKLMNPQRSTUVWXYZ23456789"


def random_name(length=NUMBER_OF_RANDOM_CHARACTERS):
    return ''.join(secrets.choice(RANDOM_ALPHABET) for _ in range(length))


class Workspace:
    """Scratch directory owned by a single export run.

    ``initialize`` wipes whatever a previous run left behind and recreates the
    root empty. Subfolders handed out by ``allocate_subfolder`` are not created
    until something is written into them.
    """

    def __init__(self, root):
        self.root = os.path.abspath(root)
        self.initialized = False

    def initialize(self):
        try:
            if os.path.isfile(self.root) or os.path.islink(self.root):
                os.remove(self.root)
            elif os.path.exists(self.root):
                shutil.rmtree(self.root)
            os.makedirs(self.root)
        except OSError as e:
            raise WorkspaceError(f"Could not prepare temp folder {self.root}: {e}") from e
        self.initialized = True
        logger.debug(f"Temp folder ready at {self.root}")

    def allocate_subfolder(self):
        if not self.initialized:
            raise WorkspaceError("Workspace has not been initialized")
        return os.path.join(self.root, random_name())

    def dispose(self):
        if os.path.exists(self.root):
            try:
                shutil.rmtree(self.root)
            except OSError as e:
                raise WorkspaceError(f"Could not remove temp folder {self.root}: {e}") from e
        self.initialized = False

    def __enter__(self):
        self.initialize()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.dispose()
        return False
