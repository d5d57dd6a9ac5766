import pytest
import os
import shutil
import subprocess
import tempfile
from glslassembler import MemoryModuleLoader, ModuleGraph

GLSL_VALIDATOR = shutil.which("glslangValidator")
SKIP_GLSL = os.environ.get("SKIP_GLSL", "") == "1"

requires_glsl_validator = pytest.mark.skipif(
    not GLSL_VALIDATOR or SKIP_GLSL,
    reason="Requires glslangValidator."
)

@pytest.fixture
def make_graph():
    """Builds a ModuleGraph over an in-memory set of modules."""
    def _factory(sources, include_root=""):
        loader = MemoryModuleLoader(sources)
        return ModuleGraph(loader, include_root=include_root)
    return _factory

@pytest.fixture
def write_shaders(tmp_path):
    """Writes {relative_path: source} to tmp_path and returns the directory."""
    def _writer(files):
        for rel_path, source in files.items():
            path = tmp_path / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(source)
        return tmp_path
    return _writer

@pytest.fixture(scope="session")
def validate_glsl():
    def _validator(source: str, stage: str = "frag"):
        with tempfile.NamedTemporaryFile(suffix=f".{stage}", mode="w", delete=True) as f:
            f.write(source)
            f.flush()
            result = subprocess.run([GLSL_VALIDATOR, "-S", stage, f.name], capture_output=True, text=True)
        if result.returncode != 0:
            raise AssertionError(f"GLSL Validation Failed:\n{result.stdout}{result.stderr}\nSOURCE:\n{source}")
    return _validator
