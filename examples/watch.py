import time
from pathlib import Path
from glslassembler import ModuleGraph, FileModuleLoader, ShaderWatcher

SHADERS = Path(__file__).parent / 'shaders'

def main():
    """
    Reassembles the example shader every time one of its modules is saved.
    Edit any file under examples/shaders/ while this runs; Ctrl+C to quit.
    """
    output = Path("assembled.frag")
    graph = ModuleGraph(FileModuleLoader(), include_root=str(SHADERS / 'lib'))
    watcher = ShaderWatcher(graph, str(SHADERS / 'app' / 'main.frag'), on_reload=output.write_text)

    watcher.start()
    output.write_text(watcher.source)
    print(f"INFO: Wrote '{output}'.")
    try:
        while True:
            watcher.poll()
            time.sleep(0.25)
    except KeyboardInterrupt:
        pass
    finally:
        watcher.stop()

if __name__ == "__main__":
    main()
