import os
from abc import ABC, abstractmethod
from pathlib import Path
from .errors import PathError


def normalize_newlines(text: str) -> str:
    """Converts '\\r\\n' and '\\r' line endings to '\\n'."""
    return text.replace('\r\n', '\n').replace('\r', '\n')


class ModuleLoader(ABC):
    """
    Resolves paths and fetches module sources for a `ModuleGraph`.

    Implementations decide where modules come from (disk, memory, an
    archive...). The graph only ever talks to these four methods.
    """

    @abstractmethod
    def load(self, path: str) -> str:
        """
        Returns the contents of the module located at `path`.
        The text MUST use '\\n' as its only line terminator.
        Raises an exception if the module cannot be loaded.
        """

    @abstractmethod
    def is_bare_path(self, path: str) -> bool:
        """Returns True if `path` is a directory path without a filename."""

    @abstractmethod
    def extract_directory(self, path_name: str) -> str:
        """Strips the filename from `path_name` (e.g. 'my/path/file.glsl' -> 'my/path')."""

    @abstractmethod
    def join(self, path: str, path_name: str) -> str:
        """
        Joins a base directory with a path name which may use '.' and '..'
        (e.g. '../../common/noise.glsl'). Raises PathError if '..' climbs
        above the root of `path`.
        """


class SimpleModuleLoader(ModuleLoader):
    """
    Path handling on plain '/'-separated strings, with no I/O.
    Subclasses only need to implement `load`.
    """

    def is_bare_path(self, path: str) -> bool:
        last = path.rstrip('/').rsplit('/', 1)[-1]
        return last in ('', '.', '..') or '.' not in last

    def extract_directory(self, path_name: str) -> str:
        index = path_name.rfind('/')
        if index == -1:
            return ""
        return path_name[:index] or '/'

    def join(self, path: str, path_name: str) -> str:
        segments = [s for s in path.split('/') if s not in ('', '.')]
        for segment in path_name.split('/'):
            if segment in ('', '.'):
                continue
            if segment == '..':
                # A leading '..' of the base cannot be cancelled
                if not segments or segments[-1] == '..':
                    raise PathError(f"Path '{path_name}' escapes above '{path}'")
                segments.pop()
            else:
                segments.append(segment)

        prefix = '/' if path.startswith('/') else ''
        return prefix + '/'.join(segments)


class FileModuleLoader(SimpleModuleLoader):
    """Loads modules from disk."""

    def __init__(self, encoding: str = 'utf-8'):
        self.encoding = encoding

    def load(self, path: str) -> str:
        return normalize_newlines(Path(path).read_text(encoding=self.encoding))

    def is_bare_path(self, path: str) -> bool:
        # Existing directories may well have a dot in their name.
        return Path(path).is_dir() or super().is_bare_path(path)

    def join(self, path: str, path_name: str) -> str:
        # Absolute bases must stay below '/'; relative ones may climb above the working directory.
        if os.path.isabs(path):
            return super().join(path, path_name)
        return os.path.normpath(os.path.join(path or '.', path_name.lstrip('/')))


class MemoryModuleLoader(SimpleModuleLoader):
    """
    Serves modules from a dictionary mapping ids to sources.
    Handy for tests and for shader libraries embedded in Python code.
    """

    def __init__(self, sources: dict = None):
        self.sources = dict(sources or {})

    def add(self, path: str, source: str):
        self.sources[path] = source

    def load(self, path: str) -> str:
        # KeyError for unknown modules
        return normalize_newlines(self.sources[path])
