class ExportError(Exception):
    pass


class WorkspaceError(ExportError):
    pass


class ExtractionError(ExportError):
    pass


class DecompilationError(ExportError):
    pass
