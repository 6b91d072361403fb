from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from pathlib import Path

from mcglsl.core.directives import find_includes
from mcglsl.core.paths import resolve_include
from mcglsl.errors import ConfigurationError
from mcglsl.models import IncludeLink, Range

logger = logging.getLogger(__name__)

SHADER_EXTENSIONS: frozenset[str] = frozenset({".vsh", ".fsh", ".gsh", ".csh", ".glsl", ".inc"})


class WorkspaceIndex:
    """Cross-document knowledge about which files include which.

    The include graph maps a resolved include path to every file seen including
    it. It only grows during a session; ``reset`` starts over. Include links,
    the position of each include's path literal, are replaced per file whenever
    that file is indexed again. All mutation goes through one lock since
    discovery is read-modify-write.
    """

    def __init__(self) -> None:
        self.include_graph: dict[str, set[str]] = {}
        self.all_files: set[str] = set()
        self.files_by_root: dict[str, set[str]] = {}
        self.links_by_file: dict[str, list[IncludeLink]] = {}
        self._lock = threading.Lock()

    def add_include(self, path: str, parent: str) -> None:
        with self._lock:
            self.include_graph.setdefault(path, set()).add(parent)
            self.all_files.add(path)

    def parents_of(self, path: str) -> set[str]:
        with self._lock:
            return set(self.include_graph.get(path, ()))

    def links(self, path: str) -> list[IncludeLink]:
        """Return the include links of ``path`` as last recorded, in line order."""
        with self._lock:
            return list(self.links_by_file.get(path, ()))

    def root_ancestors(self, path: str) -> list[str]:
        """Return the top-level files that include ``path``, directly or not."""
        with self._lock:
            roots: set[str] = set()
            seen = {path}
            pending = list(self.include_graph.get(path, ()))
            while pending:
                current = pending.pop()
                if current in seen:
                    continue
                seen.add(current)
                parents = self.include_graph.get(current)
                if parents:
                    pending.extend(parents)
                else:
                    roots.add(current)
            return sorted(roots)

    def record_pass(self, root: str, files: Iterable[str]) -> set[str]:
        """Remember the files a pass of ``root`` touched; return the previous set."""
        current = set(files)
        with self._lock:
            self.all_files.update(f for f in current if f != root)
            previous = self.files_by_root.get(root, set())
            self.files_by_root[root] = current
        return previous

    def reset(self) -> None:
        with self._lock:
            self.include_graph.clear()
            self.all_files.clear()
            self.files_by_root.clear()
            self.links_by_file.clear()

    def merge(self, other: WorkspaceIndex) -> None:
        with other._lock:
            graph = {path: set(parents) for path, parents in other.include_graph.items()}
            files = set(other.all_files)
            links = {path: list(entries) for path, entries in other.links_by_file.items()}
        with self._lock:
            for path, parents in graph.items():
                self.include_graph.setdefault(path, set()).update(parents)
            self.all_files.update(files)
            self.links_by_file.update(links)

    def scan(self, root: str | Path, shaderpacks_path: str | Path) -> int:
        """Walk ``root`` and record the include edges of every shader file found."""
        count = 0
        for file_path in sorted(Path(root).rglob("*")):
            if not file_path.is_file() or file_path.suffix not in SHADER_EXTENSIONS:
                continue
            self.add_file(file_path, shaderpacks_path)
            count += 1
        logger.info("Indexed %d shader file(s) under %s", count, root)
        return count

    def add_file(self, file_path: Path, shaderpacks_path: str | Path) -> None:
        try:
            text = file_path.read_text(encoding="utf-8", errors="replace")
        except OSError:
            logger.warning("Could not read %s", file_path)
            return
        self.add_text(str(file_path), text, shaderpacks_path)

    def add_text(self, path: str, text: str, shaderpacks_path: str | Path) -> None:
        """Record the include edges and links of ``path`` given its current text."""
        links: list[IncludeLink] = []
        for found in find_includes(path, text.splitlines()):
            try:
                child = str(resolve_include(path, found.literal, shaderpacks_path))
            except ConfigurationError as exc:
                logger.warning("%s", exc)
                break
            self.add_include(child, path)
            links.append(IncludeLink(target=child, range=Range.on_line(found.line_in_file, found.start, found.end)))
        with self._lock:
            self.links_by_file[path] = links

    def to_dot(self) -> str:
        with self._lock:
            edges = sorted((parent, path) for path, parents in self.include_graph.items() for parent in parents)
        body = "".join(f'    "{parent}" -> "{child}";\n' for parent, child in edges)
        return "digraph {\n" + body + "}\n"
