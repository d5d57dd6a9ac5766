import re
from enum import Enum
from .errors import MalformedDirective

COMMENT_MARKER = "//"
MODULE_MARKER = "// MODULE BEGIN: "

# Directives which must appear before anything else in a GLSL source.
HOIST_PREFIXES = ('#version', 'precision')

_RELATIVE_INCLUDE = re.compile(r'^#include\s+"((?:\\.|[^"])*)"$')
_ABSOLUTE_INCLUDE = re.compile(r'^#include\s+<((?:\\.|[^"])*)>$')


def split_lines(text: str) -> list:
    """
    Splits text on '\\n'. A single trailing terminator does not produce an
    extra empty line, so "a\\n\\n" gives ["a", ""] and "" gives [].
    """
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return lines


class DependencyKind(Enum):
    # <path>: resolved against the graph's include root
    ABSOLUTE = 'absolute'
    # "path": resolved against the including module's directory
    RELATIVE = 'relative'


class Dependency:
    """An include directive found in a module."""
    def __init__(self, target_id: str, include_line: int, kind: DependencyKind):
        self.target_id = target_id
        self.include_line = include_line
        self.kind = kind
        # Canonical id of the included module, filled in by the graph.
        self.resolved_id = None

    @classmethod
    def absolute(cls, target_id: str, include_line: int) -> 'Dependency':
        return cls(target_id, include_line, DependencyKind.ABSOLUTE)

    @classmethod
    def relative(cls, target_id: str, include_line: int) -> 'Dependency':
        return cls(target_id, include_line, DependencyKind.RELATIVE)

    def __repr__(self):
        return f"Dependency({self.target_id!r}, line={self.include_line}, kind={self.kind.value})"


class HoistedLine:
    """A directive moved to the top of the assembled source."""
    def __init__(self, text: str, index: int):
        self.text = text
        self.index = index

    def __repr__(self):
        return f"HoistedLine({self.text!r}, {self.index})"


class Module:
    """
    A single GLSL source file.

    Include and hoisted directives are commented out rather than removed,
    so line indices stay valid for mapping the assembled source back to
    the module. The original text survives in the `Dependency` and
    `HoistedLine` records.
    """
    def __init__(self, id: str, source: str):
        """
        Parses a module from its source.

        Args:
            id (str): The canonical id of the module, usually its full path.
            source (str): The module text, with '\\n' line endings.

        Raises:
            MalformedDirective: If an include directive has an empty path.
        """
        self.id = id
        self.source_lines = split_lines(source)
        self.dependencies = []
        self.hoisted_lines = []
        self._analyze()

    def _comment_line(self, index: int):
        self.source_lines[index] = f"{COMMENT_MARKER} {self.source_lines[index]}"

    def _hoist_line(self, index: int):
        self.hoisted_lines.append(HoistedLine(self.source_lines[index], index))
        self._comment_line(index)

    def _analyze(self):
        for i, raw_line in enumerate(self.source_lines):
            line = raw_line.strip()

            # Block comments are not supported
            if line.startswith(COMMENT_MARKER):
                continue

            dependency = self._match_include(line, i)
            if dependency is not None:
                self.dependencies.append(dependency)
                self._comment_line(i)
            elif line.startswith(HOIST_PREFIXES):
                self._hoist_line(i)

    def _match_include(self, line: str, index: int):
        for pattern, factory in ((_RELATIVE_INCLUDE, Dependency.relative),
                                 (_ABSOLUTE_INCLUDE, Dependency.absolute)):
            match = pattern.match(line)
            if match:
                if not match.group(1):
                    raise MalformedDirective(self.id, index)
                return factory(match.group(1), index)
        return None

    def is_empty(self) -> bool:
        return not self.source_lines

    def inject(self, lines: list):
        """Appends a marker comment, the module source and an empty separator line."""
        lines.append(MODULE_MARKER + self.id)
        lines.extend(self.source_lines)
        lines.append("")

    def __repr__(self):
        return f"Module({self.id!r}, lines={len(self.source_lines)}, dependencies={len(self.dependencies)})"
