"""
Maps GLSL compiler messages back to the module lines they came from.

Compilers report errors against the assembled source. The patterns below
cover the common log shapes (1-based line numbers):

    ERROR: 0:12: 'foo' : undeclared identifier      (glslang, AMD)
    0:12(5): error: `foo' undeclared                 (Mesa)
    0(12) : error C1008: undefined variable "foo"   (NVIDIA)
"""
import re
from .errors import ShaderCompileError

_LOG_PATTERNS = (
    re.compile(r'^(?P<severity>ERROR|WARNING):\s*(?P<file>\d+):(?P<line>\d+):\s*(?P<message>.*)$'),
    re.compile(r'^(?P<file>\d+):(?P<line>\d+)\((?P<column>\d+)\):\s*(?P<severity>error|warning):\s*(?P<message>.*)$'),
    re.compile(r'^(?P<file>\d+)\((?P<line>\d+)\)\s*:\s*(?P<severity>error|warning)(?:\s+(?P<code>[A-Z]\d+))?:\s*(?P<message>.*)$'),
)

# Section titles moderngl uses when a program fails to compile
SHADER_STAGES = (
    'vertex_shader', 'fragment_shader', 'geometry_shader',
    'tess_control_shader', 'tess_evaluation_shader',
)


class Diagnostic:
    """A single compiler message, located in its original module."""
    def __init__(self, severity: str, assembled_line: int, message: str, module_id: str = None, line: int = None):
        self.severity = severity
        self.assembled_line = assembled_line
        self.message = message
        self.module_id = module_id
        # Zero-based line inside the module
        self.line = line

    def __str__(self):
        if self.module_id is None:
            return f"<assembled>:{self.assembled_line + 1}: {self.severity}: {self.message}"
        return f"{self.module_id}:{self.line + 1}: {self.severity}: {self.message}"

    def __repr__(self):
        return f"Diagnostic({str(self)!r})"


def parse_log_line(shader, log_line: str):
    """Returns a Diagnostic for a recognised log line, or None."""
    text = log_line.strip()
    for pattern in _LOG_PATTERNS:
        match = pattern.match(text)
        if not match:
            continue
        assembled_line = int(match.group('line')) - 1
        diagnostic = Diagnostic(match.group('severity').lower(), assembled_line, match.group('message').strip())
        mapped = shader.map_line(assembled_line)
        if mapped is not None:
            module, line = mapped
            diagnostic.module_id = module.id
            diagnostic.line = line
        return diagnostic
    return None


def parse_log(shader, log: str) -> list:
    """Parses every recognised line of a compiler log."""
    diagnostics = []
    for log_line in log.splitlines():
        diagnostic = parse_log_line(shader, log_line)
        if diagnostic is not None:
            diagnostics.append(diagnostic)
    return diagnostics


def _remap_line(shader, log_line: str) -> str:
    diagnostic = parse_log_line(shader, log_line)
    if diagnostic is None or diagnostic.module_id is None:
        return log_line
    return str(diagnostic)


def remap_log(shader, log: str) -> str:
    """Rewrites a compiler log so that each message points at `module:line`."""
    return "\n".join(_remap_line(shader, log_line) for log_line in log.splitlines())


def remap_compile_error(message: str, stages: dict) -> str:
    """
    Remaps a moderngl compile error, which lists the log under a title
    per stage (e.g. 'fragment_shader').
    """
    current = next(iter(stages.values())) if len(stages) == 1 else None
    lines = []
    for log_line in message.splitlines():
        title = log_line.strip()
        if title in SHADER_STAGES:
            current = stages.get(title)
        elif current is not None:
            log_line = _remap_line(current, log_line)
        lines.append(log_line)
    return "\n".join(lines)


def compile_program(ctx, vertex_shader, fragment_shader=None, geometry_shader=None, verbose: bool = False, **kwargs):
    """
    Builds a moderngl program from assembled shaders.

    Args:
        ctx (moderngl.Context): The context to compile with.
        vertex_shader (AssembledShader): The assembled vertex stage.
        fragment_shader (AssembledShader, optional): The assembled fragment stage.
        geometry_shader (AssembledShader, optional): The assembled geometry stage.
        verbose (bool, optional): Print a message once compiled.
        **kwargs: Passed through to `ctx.program` (e.g. `varyings`).

    Raises:
        ShaderCompileError: With the compiler log pointing at module lines.
    """
    import moderngl

    stages = {'vertex_shader': vertex_shader}
    if fragment_shader is not None:
        stages['fragment_shader'] = fragment_shader
    if geometry_shader is not None:
        stages['geometry_shader'] = geometry_shader

    sources = {name: shader.source for name, shader in stages.items()}
    try:
        program = ctx.program(**sources, **kwargs)
    except moderngl.Error as e:
        raise ShaderCompileError(remap_compile_error(str(e), stages)) from e

    if verbose:
        print("INFO: Shader compiled successfully.")
    return program
