class AssemblerError(RuntimeError):
    """Base class for every error raised while assembling a shader."""


class ConfigurationError(AssemblerError):
    """The module graph is missing a loader or was given a bad setting."""


class PathError(AssemblerError):
    """A path could not be resolved (e.g. `..` escapes above the root)."""


class MalformedDirective(AssemblerError):
    """An include directive matched the syntax but carried an empty path."""
    def __init__(self, module_id: str, line: int):
        self.module_id = module_id
        self.line = line
        super().__init__(f"Error '{module_id}'({line + 1}): invalid #include syntax.")


class LoadError(AssemblerError):
    """
    The loader failed to fetch a module.

    For the root module `owner_id` and `include_line` are None. The
    loader's own exception is kept as `__cause__`.
    """
    def __init__(self, module_id: str, cause: Exception, owner_id: str = None, include_line: int = None):
        self.module_id = module_id
        self.cause = cause
        self.owner_id = owner_id
        self.include_line = include_line
        message = f"Could not load module {module_id}: {cause}"
        if owner_id is not None:
            message = f"{owner_id} line {include_line + 1}: {message}"
        super().__init__(message)


class CycleError(AssemblerError):
    """A dependency cycle was found; `chain` starts and ends on the same id."""
    def __init__(self, chain):
        self.chain = list(chain)
        super().__init__("Dependency cycle: " + " --> ".join(self.chain))


class ShaderCompileError(AssemblerError):
    """The GL driver rejected an assembled shader. The log points at module lines."""
