from .errors import (
    AssemblerError, ConfigurationError, CycleError, LoadError,
    MalformedDirective, PathError, ShaderCompileError
)
from .module import Module, Dependency, DependencyKind, HoistedLine
from .loader import ModuleLoader, SimpleModuleLoader, FileModuleLoader, MemoryModuleLoader
from .graph import ModuleGraph, AssembledShader, SourceBlock, LineRange, assemble, topological_sort
from .diagnostics import Diagnostic, parse_log, remap_log, compile_program
from .watch import ShaderWatcher

__version__ = '0.1.0'
