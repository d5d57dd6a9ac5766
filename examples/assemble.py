from pathlib import Path
from glslassembler import ModuleGraph, FileModuleLoader, remap_log

SHADERS = Path(__file__).parent / 'shaders'

def main():
    """
    Assembles examples/shaders/app/main.frag and shows the line mapping.

    This example shows how to:
    - Resolve `#include "..."` relative to the including file.
    - Resolve `#include <...>` against an include root.
    - Map a line of the assembled source back to its module.
    - Rewrite a compiler log so it points at the original files.
    """
    graph = ModuleGraph(FileModuleLoader(), include_root=str(SHADERS / 'lib'))
    source = graph.load_module(str(SHADERS / 'app' / 'main.frag'))
    print(source)

    print("Modules, in dependency order:")
    for module in graph.sorted_modules:
        print(f"  - {module.id} ({len(module.source_lines)} lines)")

    module, line = graph.map_line(5)
    print(f"\nAssembled line 6 comes from {module.id}:{line + 1}")

    # A log as a driver would print it for the assembled source
    log = "ERROR: 0:6: 'hash' : no matching overloaded function found"
    print(remap_log(graph.shader, log))
    return graph

if __name__ == "__main__":
    main()
