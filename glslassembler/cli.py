"""
glslassembler.cli - Command-line interface.

Assembles a GLSL module and its includes from disk.
"""

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional

from .errors import AssemblerError
from .graph import ModuleGraph
from .loader import FileModuleLoader
from .watch import ShaderWatcher

WATCH_INTERVAL = 0.25


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="glslassembler",
        description="Resolve #include directives and assemble a single GLSL source",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  glslassembler shaders/main.frag                      # Print the assembled source
  glslassembler shaders/main.frag -I shaders/lib       # Resolve #include <...> in shaders/lib
  glslassembler shaders/main.frag -o build/main.frag   # Write to a file
  glslassembler shaders/main.frag --map 42             # Where does assembled line 42 come from?
  glslassembler shaders/main.frag -o out.frag --watch  # Reassemble on every change
        """,
    )
    parser.add_argument("root", help="Path of the root module")
    parser.add_argument("-I", "--include-root", default="", help="Base directory for #include <...> directives")
    parser.add_argument("-o", "--output", help="Write the assembled source to this file instead of stdout")
    parser.add_argument("--encoding", default="utf-8", help="Encoding of the module files (default: utf-8)")
    parser.add_argument("--map", type=int, metavar="LINE", help="Print the module and line an assembled line (1-based) comes from")
    parser.add_argument("--blocks", action="store_true", help="Print the source block table")
    parser.add_argument("--watch", action="store_true", help="Keep running and reassemble when a module changes (requires --output)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print progress information")
    return parser


def _write(source: str, output: Optional[str], verbose: bool = False):
    if output:
        Path(output).write_text(source, encoding="utf-8")
        if verbose:
            print(f"INFO: Wrote '{output}'.")
    else:
        sys.stdout.write(source if source.endswith("\n") else source + "\n")


def _print_blocks(graph: ModuleGraph):
    for block in graph.source_blocks:
        a, m = block.assembled_range, block.module_range
        print(f"{a.begin + 1}-{a.end + 1} -> {block.module_id}:{m.begin + 1}-{m.end + 1}")


def _print_mapping(graph: ModuleGraph, line: int) -> int:
    mapped = graph.map_line(line - 1)
    if mapped is None:
        print(f"WARNING: Assembled line {line} does not map to a module line.", file=sys.stderr)
        return 1
    module, module_line = mapped
    print(f"{module.id}:{module_line + 1}")
    return 0


def _watch(graph: ModuleGraph, args) -> int:
    watcher = ShaderWatcher(graph, args.root, on_reload=lambda source: _write(source, args.output, args.verbose))
    if not watcher.start():
        return 1
    try:
        while True:
            watcher.poll()
            time.sleep(WATCH_INTERVAL)
    except KeyboardInterrupt:
        pass
    finally:
        watcher.stop()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    args = create_parser().parse_args(argv)

    if args.watch and not args.output:
        print("ERROR: --watch requires --output.", file=sys.stderr)
        return 2

    graph = ModuleGraph(FileModuleLoader(encoding=args.encoding), verbose=args.verbose)
    try:
        if args.include_root:
            graph.set_include_root(args.include_root)
        source = graph.load_module(args.root)
    except AssemblerError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    # --map and --blocks replace the source on stdout, not the output file
    if args.output or (args.map is None and not args.blocks):
        _write(source, args.output, args.verbose)

    code = 0
    if args.map is not None:
        code = _print_mapping(graph, args.map)
    if args.blocks:
        _print_blocks(graph)
    if args.watch:
        return _watch(graph, args)
    return code
