import pytest
from glslassembler import SimpleModuleLoader, FileModuleLoader, MemoryModuleLoader, ModuleLoader, PathError
from glslassembler.loader import normalize_newlines

class PathOnlyLoader(SimpleModuleLoader):
    def load(self, path):
        # Not used in these tests
        return ""

def test_module_loader_is_abstract():
    with pytest.raises(TypeError):
        ModuleLoader()
    with pytest.raises(TypeError):
        SimpleModuleLoader()

def test_is_bare_path():
    loader = PathOnlyLoader()
    assert loader.is_bare_path("")
    assert loader.is_bare_path("my_path")
    assert loader.is_bare_path("my_path/nested/")
    assert loader.is_bare_path("../shaders")
    assert not loader.is_bare_path("my_path/file.txt")

def test_extract_directory():
    loader = PathOnlyLoader()
    assert loader.extract_directory("my_path/file.txt") == "my_path"
    assert loader.extract_directory("file.txt") == ""
    assert loader.extract_directory("/file.txt") == "/"

def test_join():
    loader = PathOnlyLoader()
    assert loader.join("my_path", "/file.txt") == "my_path/file.txt"
    assert loader.join("my_path", "file.txt") == "my_path/file.txt"
    assert loader.join("my_path/nested", "../file.txt") == "my_path/file.txt"
    assert loader.join("my_path", "../file.txt") == "file.txt"
    assert loader.join("my_path", "./a/./b.glsl") == "my_path/a/b.glsl"
    assert loader.join("", "file.txt") == "file.txt"
    assert loader.join("/abs/dir", "../file.txt") == "/abs/file.txt"
    assert loader.join("/", "file.txt") == "/file.txt"

def test_join_escaping_root_raises():
    loader = PathOnlyLoader()
    with pytest.raises(PathError):
        loader.join("my_path", "../../file.txt")
    with pytest.raises(PathError):
        loader.join("", "../file.txt")
    # A leading ".." in the base is never cancelled by another ".."
    with pytest.raises(PathError):
        loader.join("..", "../x.glsl")
    with pytest.raises(PathError):
        loader.join("../p", "../../other.glsl")
    assert loader.join("../p", "../other.glsl") == "../other.glsl"

def test_normalize_newlines():
    assert normalize_newlines("a\r\nb\rc\n") == "a\nb\nc\n"

def test_memory_loader():
    loader = MemoryModuleLoader({"a.glsl": "float a;\r\n"})
    loader.add("b.glsl", "float b;")
    assert loader.load("a.glsl") == "float a;\n"
    assert loader.load("b.glsl") == "float b;"
    with pytest.raises(KeyError):
        loader.load("missing.glsl")

def test_file_loader(tmp_path):
    path = tmp_path / "a.glsl"
    path.write_bytes(b"float a;\r\nfloat b;\r\n")
    loader = FileModuleLoader()
    assert loader.load(str(path)) == "float a;\nfloat b;\n"
    with pytest.raises(FileNotFoundError):
        loader.load(str(tmp_path / "missing.glsl"))

def test_file_loader_bare_path_accepts_dotted_directories(tmp_path):
    shader_dir = tmp_path / "shaders.v2"
    shader_dir.mkdir()
    loader = FileModuleLoader()
    assert loader.is_bare_path(str(shader_dir))
    assert not loader.is_bare_path(str(tmp_path / "main.frag"))

def test_file_loader_join():
    loader = FileModuleLoader()
    assert loader.join("..", "../x.glsl") == "../../x.glsl"
    assert loader.join("../p", "../../other.glsl") == "../../other.glsl"
    assert loader.join("", "../lib/a.glsl") == "../lib/a.glsl"
    assert loader.join("app", "./a.glsl") == "app/a.glsl"
    assert loader.join("/abs/dir", "../file.txt") == "/abs/file.txt"
    with pytest.raises(PathError):
        loader.join("/abs", "../../file.txt")

def test_file_loader_climbs_above_working_directory(tmp_path, monkeypatch):
    from glslassembler import ModuleGraph
    (tmp_path / "app").mkdir()
    (tmp_path / "lib").mkdir()
    (tmp_path / "app" / "main.frag").write_text('#include "../lib/a.glsl"\nvoid main() {}\n')
    (tmp_path / "lib" / "a.glsl").write_text('float a() { return 1.0; }\n')
    monkeypatch.chdir(tmp_path / "app")

    graph = ModuleGraph(FileModuleLoader())
    source = graph.load_module("main.frag")
    assert graph.module_count == 2
    assert graph.find_module("../lib/a.glsl") is not None
    assert "float a() { return 1.0; }" in source
