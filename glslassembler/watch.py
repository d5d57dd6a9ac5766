import os
import sys
from .errors import AssemblerError

try:
    from watchdog.observers import Observer
    from watchdog.events import FileSystemEventHandler
    WATCHDOG_AVAILABLE = True
except ImportError:
    WATCHDOG_AVAILABLE = False


class ShaderWatcher:
    """
    Re-assembles a shader whenever one of its modules changes on disk.

    The watchdog observer runs on its own thread and only flags that a
    reload is pending; the reload itself happens in `poll()`, on the
    caller's thread, since a ModuleGraph is not thread-safe.
    """
    def __init__(self, graph, root_id: str, on_reload=None, verbose: bool = True):
        """
        Args:
            graph (ModuleGraph): A graph with a file based loader set.
            root_id (str): The module to assemble.
            on_reload (callable, optional): Called with the new source after each successful reload.
            verbose (bool, optional): Print reload information.
        """
        self.graph = graph
        self.root_id = root_id
        self.on_reload = on_reload
        self.verbose = verbose
        self.source = None
        self.reload_pending = False
        self.observer = None
        self._handler = None
        self._watched = set()

    def load(self) -> str:
        """Assembles the root module and updates the set of watched files."""
        source = self.graph.load_module(self.root_id)
        self.source = source
        self._watched = {os.path.abspath(module.id) for module in self.graph.sorted_modules}
        return source

    def is_watched(self, path) -> bool:
        return os.path.abspath(os.fsdecode(path)) in self._watched

    def _schedule(self):
        self.observer.unschedule_all()
        for directory in sorted({os.path.dirname(path) for path in self._watched}):
            self.observer.schedule(self._handler, directory, recursive=False)

    def start(self) -> bool:
        """Starts the watchdog observer. Returns False if watching is unavailable."""
        if self.source is None:
            self.load()

        if not WATCHDOG_AVAILABLE:
            print("INFO: Hot-reloading disabled. `watchdog` not installed. Run 'pip install watchdog'.")
            return False

        class ChangeHandler(FileSystemEventHandler):
            def __init__(self, watcher):
                self.watcher = watcher
            def on_modified(self, event):
                if self.watcher.is_watched(event.src_path):
                    self.watcher.reload_pending = True
            def on_created(self, event):
                self.on_modified(event)
            def on_moved(self, event):
                if self.watcher.is_watched(event.dest_path):
                    self.watcher.reload_pending = True

        self._handler = ChangeHandler(self)
        self.observer = Observer()
        self._schedule()
        self.observer.daemon = True
        self.observer.start()
        if self.verbose:
            print(f"INFO: Watching {len(self._watched)} module(s) of '{self.root_id}' for changes...")
        return True

    def poll(self) -> bool:
        """Reloads if a change was detected. Returns True if a new source was assembled."""
        if not self.reload_pending:
            return False
        self.reload_pending = False

        if self.verbose:
            print(f"INFO: Change detected in '{self.root_id}' modules. Reloading...")
        try:
            source = self.load()
        except AssemblerError as e:
            print(f"ERROR: Failed to reassemble shader. Keeping previous source. Details:\n{e}", file=sys.stderr)
            return False

        if self.observer is not None:
            self._schedule()
        if self.on_reload is not None:
            self.on_reload(source)
        return True

    def stop(self):
        if self.observer is not None:
            self.observer.stop()
            self.observer.join()
            self.observer = None
