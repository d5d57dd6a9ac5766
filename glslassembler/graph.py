from collections import deque
from .errors import ConfigurationError, CycleError, LoadError, PathError
from .loader import ModuleLoader
from .module import DependencyKind, Module

# Sort marks, local to a single sort run
_IN_PROGRESS = 1
_DONE = 2


class LineRange:
    """A closed, zero-based range of line indices."""
    def __init__(self, begin: int, end: int):
        self.begin = begin
        self.end = end

    def contains(self, line: int) -> bool:
        return self.begin <= line <= self.end

    def __eq__(self, other):
        return isinstance(other, LineRange) and (self.begin, self.end) == (other.begin, other.end)

    def __repr__(self):
        return f"LineRange({self.begin}, {self.end})"


class SourceBlock:
    """Maps a range of assembled lines onto a range of lines in one module."""
    def __init__(self, module_id: str, assembled_range: LineRange, module_range: LineRange):
        self.module_id = module_id
        self.assembled_range = assembled_range
        self.module_range = module_range

    def contains(self, assembled_line: int) -> bool:
        return self.assembled_range.contains(assembled_line)

    def map_line(self, assembled_line: int) -> int:
        """Maps an assembled line (which must be inside the block) to a module line."""
        return assembled_line - self.assembled_range.begin + self.module_range.begin

    def __eq__(self, other):
        return (isinstance(other, SourceBlock)
                and self.module_id == other.module_id
                and self.assembled_range == other.assembled_range
                and self.module_range == other.module_range)

    def __repr__(self):
        return f"SourceBlock({self.module_id!r}, {self.assembled_range!r} -> {self.module_range!r})"


class AssembledShader:
    """
    The result of assembling a root module and everything it includes.

    Attributes:
        root_id (str): The id the assembly started from.
        source (str): The assembled GLSL source.
        modules (dict): Modules keyed by canonical id, in discovery order.
        sorted_modules (tuple): Modules in dependency order.
        source_blocks (tuple): Line mapping blocks, in assembled order.
    """
    def __init__(self, root_id: str, source: str, modules: dict, sorted_modules, source_blocks):
        self.root_id = root_id
        self.source = source
        self.modules = modules
        self.sorted_modules = tuple(sorted_modules)
        self.source_blocks = tuple(source_blocks)

    def find_module(self, id: str):
        return self.modules.get(id)

    def resolve(self, dependency):
        """Returns the Module a dependency points to."""
        return self.modules.get(dependency.resolved_id)

    def map_line(self, assembled_line: int):
        """
        Maps a zero-based line of the assembled source back to its origin.

        Returns:
            A (Module, line) tuple, or None for module marker lines,
            separators and out-of-range lines.
        """
        for block in self.source_blocks:
            if block.contains(assembled_line):
                return self.modules[block.module_id], block.map_line(assembled_line)
        return None

    @property
    def line_count(self) -> int:
        return self.source.count("\n") + 1 if self.source else 0


def _load(loader: ModuleLoader, module_id: str, owner: Module = None, include_line: int = None) -> Module:
    try:
        source = loader.load(module_id)
    except Exception as e:
        owner_id = owner.id if owner is not None else None
        raise LoadError(module_id, e, owner_id=owner_id, include_line=include_line) from e
    return Module(module_id, source)


def _expand(loader: ModuleLoader, root_id: str, include_root: str) -> dict:
    """Breadth-first discovery of every module reachable from the root."""
    root = _load(loader, root_id)
    modules = {root.id: root}

    queue = deque([root])
    while queue:
        module = queue.popleft()
        for dependency in module.dependencies:
            if dependency.kind == DependencyKind.ABSOLUTE:
                base = include_root
            else:
                base = loader.extract_directory(module.id)
            dependency.resolved_id = loader.join(base, dependency.target_id)

            if dependency.resolved_id not in modules:
                target = _load(loader, dependency.resolved_id, owner=module, include_line=dependency.include_line)
                modules[target.id] = target
                queue.append(target)
    return modules


def topological_sort(modules: dict) -> list:
    """
    Orders modules so that each one comes after all of its dependencies.

    Modules are visited in dictionary order and dependencies in source
    order, so the result is deterministic.

    Raises:
        CycleError: If the modules include each other in a loop.
    """
    marks = {}
    order = []

    for root in modules.values():
        if marks.get(root.id) == _DONE:
            continue

        # Explicit stack of (module, remaining dependencies); include
        # chains may be deeper than the interpreter's recursion limit.
        marks[root.id] = _IN_PROGRESS
        stack = [(root, iter(root.dependencies))]
        path = [root.id]
        while stack:
            module, dependencies = stack[-1]
            for dependency in dependencies:
                target = modules[dependency.resolved_id]
                mark = marks.get(target.id)
                if mark == _DONE:
                    continue
                if mark == _IN_PROGRESS:
                    start = path.index(target.id)
                    raise CycleError(path[start:] + [target.id])
                marks[target.id] = _IN_PROGRESS
                stack.append((target, iter(target.dependencies)))
                path.append(target.id)
                break
            else:
                stack.pop()
                path.pop()
                marks[module.id] = _DONE
                order.append(module)
    return order


def _assemble_source(sorted_modules):
    lines = []
    blocks = []

    # Hoisted lines go first
    for module in sorted_modules:
        for hoisted in module.hoisted_lines:
            lines.append(hoisted.text)
            index = len(lines) - 1
            blocks.append(SourceBlock(module.id, LineRange(index, index), LineRange(hoisted.index, hoisted.index)))

    for module in sorted_modules:
        if module.is_empty():
            continue
        begin = len(lines)
        module.inject(lines)
        end = len(lines) - 1
        # Skip the marker comment and the trailing separator
        blocks.append(SourceBlock(module.id, LineRange(begin + 1, end - 1), LineRange(0, len(module.source_lines) - 1)))

    return "\n".join(lines), blocks


def assemble(loader: ModuleLoader, root_id: str, include_root: str = "", verbose: bool = False) -> AssembledShader:
    """
    Loads a module with all of its includes and assembles them into one source.

    Args:
        loader (ModuleLoader): Fetches module sources and resolves paths.
        root_id (str): The id of the module to start from.
        include_root (str, optional): Base directory for `#include <...>`.
        verbose (bool, optional): Print progress information.

    Returns:
        AssembledShader: A fresh result, independent from previous calls.

    Raises:
        LoadError, MalformedDirective, PathError, CycleError
    """
    if loader is None:
        raise ConfigurationError("No module loader specified!")

    modules = _expand(loader, root_id, include_root)
    if verbose:
        print(f"INFO: Loaded {len(modules)} module(s) from '{root_id}'.")

    sorted_modules = topological_sort(modules)
    source, blocks = _assemble_source(sorted_modules)
    shader = AssembledShader(root_id, source, modules, sorted_modules, blocks)
    if verbose:
        print(f"INFO: Assembled {shader.line_count} line(s) in {len(blocks)} source block(s).")
    return shader


class ModuleGraph:
    """
    Reusable holder around `assemble`.

    Usage:
        1. Set the loader with `set_loader()`.
        2. Optionally set the include root with `set_include_root()`.
        3. Call `load_module()`.

    The same instance can load several unrelated modules in turn; every
    call replaces the previous result. A failed call leaves the graph
    empty. Not thread-safe.
    """
    def __init__(self, loader: ModuleLoader = None, include_root: str = "", verbose: bool = False):
        self.loader = None
        self.include_root = ""
        self.verbose = verbose
        self._shader = None
        if loader is not None:
            self.set_loader(loader)
        if include_root:
            self.set_include_root(include_root)

    def set_loader(self, loader: ModuleLoader):
        if loader is None:
            raise ConfigurationError("Module loader cannot be None.")
        self.loader = loader

    def set_include_root(self, include_root: str):
        """Sets the base directory used to resolve `#include <...>` directives."""
        if self.loader is None:
            raise ConfigurationError("No module loader specified!")
        if not self.loader.is_bare_path(include_root):
            raise PathError(f"Include root '{include_root}' is not a path!")
        self.include_root = include_root

    def load_module(self, root_id: str) -> str:
        """Builds the graph starting from `root_id` and returns the assembled source."""
        if self.loader is None:
            raise ConfigurationError("No module loader specified!")
        self._shader = None
        self._shader = assemble(self.loader, root_id, self.include_root, verbose=self.verbose)
        return self._shader.source

    @property
    def shader(self):
        """The last successful AssembledShader, or None."""
        return self._shader

    @property
    def assembled_source(self) -> str:
        return self._shader.source if self._shader else ""

    @property
    def sorted_modules(self) -> tuple:
        return self._shader.sorted_modules if self._shader else ()

    @property
    def source_blocks(self) -> tuple:
        return self._shader.source_blocks if self._shader else ()

    @property
    def module_count(self) -> int:
        return len(self._shader.modules) if self._shader else 0

    def find_module(self, id: str):
        return self._shader.find_module(id) if self._shader else None

    def resolve(self, dependency):
        return self._shader.resolve(dependency) if self._shader else None

    def map_line(self, assembled_line: int):
        return self._shader.map_line(assembled_line) if self._shader else None

    def __iter__(self):
        return iter(self.sorted_modules)
