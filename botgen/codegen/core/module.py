"""
Module tree for generated output.

A Module is one unit of generated output and/or an aggregation of other
units. Trees are built in two phases:

1. Building: ``push_dep`` attaches children, ``unshift`` moves a whole
   subtree under extra directory segments.
2. Flattened: ``flatten`` resolves every path relative to the module it
   was called on, renders computed re-export content and returns the file
   list. The subtree is frozen from then on and the result is cached, so
   repeated calls return identical output.

Paths are stored relative to the parent; a child's final path is the
concatenation of every ancestor's prefix, its own prefix and its own
relative path.
"""

import posixpath
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from ...logging_config import get_logger
from .errors import ModuleFrozenError, ModuleStateError, NameCollisionError, PathCollisionError

logger = get_logger(__name__)

INDEX_FILE = "index.ts"


class ModuleKind(Enum):
    """How a module's own file content is produced."""

    CONTENT = "content"  # supplied text
    REEXPORT = "reexport"  # computed from children
    MIXED = "mixed"  # supplied text followed by computed re-exports


@dataclass(frozen=True)
class File:
    """A generated artifact: relative path and text content."""

    path: str
    content: str


@dataclass(frozen=True)
class ImportSpec:
    """One named import used by an aggregate type."""

    name: str
    path: str


@dataclass(frozen=True)
class AggregateEntry:
    key: str
    type_name: str


@dataclass(frozen=True)
class IndexView:
    """Everything a renderer needs to produce a computed index file."""

    path: str
    export_name: str
    content: Optional[str]
    exports: Tuple[str, ...]
    imports: Tuple[ImportSpec, ...]
    aggregate: Optional[str]
    entries: Tuple[AggregateEntry, ...]
    doc: Tuple[str, ...]


class IndexRenderer(Protocol):
    def render_index(self, view: IndexView) -> str:
        ...


def normalize_path(path: str) -> str:
    """Normalize to a POSIX relative path with no leading separator."""
    normalized = posixpath.normpath(path.replace("\\", "/")).lstrip("/")
    if normalized == "..":
        raise ModuleStateError(f"Path '{path}' escapes the output root")
    if normalized.startswith("../"):
        raise ModuleStateError(f"Path '{path}' escapes the output root")
    return normalized


def relative_import(from_file: str, to_file: str) -> str:
    """Module specifier for ``to_file`` as seen from ``from_file``."""
    rel = posixpath.relpath(to_file, posixpath.dirname(from_file) or ".")
    stem, _ext = posixpath.splitext(rel)
    if not stem.startswith(("./", "../")):
        stem = f"./{stem}"
    return stem


class Module:
    """Node of the output tree: export name, optional path, optional content, children."""

    def __init__(
        self,
        export_name: str,
        path: Optional[str] = None,
        content: Optional[str] = None,
        kind: Optional[ModuleKind] = None,
        key: Optional[str] = None,
        aggregate: Optional[str] = None,
        doc: Sequence[str] = (),
        renderer: Optional[IndexRenderer] = None,
        names: Optional[Sequence[str]] = None,
    ):
        """
        Args:
            export_name: Name of the type this module exports
            path: File path relative to the parent module, if any
            content: Own source text (content and mixed modules)
            kind: Defaults to CONTENT when content is given, REEXPORT otherwise
            key: Definition entry name represented by this module
            aggregate: Name of the aggregate type declared by an index module
            doc: Documentation lines for the aggregate type
            renderer: Renders computed index content at flatten time
            names: Names declared by the own content, ``(export_name,)`` for content
                modules by default
        """
        if kind is None:
            kind = ModuleKind.CONTENT if content is not None else ModuleKind.REEXPORT

        if kind in (ModuleKind.CONTENT, ModuleKind.MIXED):
            if content is None:
                raise ModuleStateError(f"{kind.value} module '{export_name}' requires content")
            if path is None:
                raise ModuleStateError(f"{kind.value} module '{export_name}' requires a path")
        elif content is not None:
            raise ModuleStateError(f"Re-export module '{export_name}' cannot carry own content")

        if aggregate is not None and kind == ModuleKind.CONTENT:
            raise ModuleStateError(f"Content module '{export_name}' cannot declare an aggregate")

        self.export_name = export_name
        self.kind = kind
        self.key = key
        self.aggregate = aggregate
        self.doc = tuple(doc)
        self.renderer = renderer
        if names is None:
            names = (export_name,) if kind == ModuleKind.CONTENT else ()
        self.names = tuple(names)

        self._content = content
        self._path = normalize_path(path) if path is not None else None
        self._prefix: Tuple[str, ...] = ()
        self._deps: List["Module"] = []
        self._parent: Optional["Module"] = None
        self._frozen = False
        self._files: Optional[List[File]] = None
        self._flatten_renderer: Optional[IndexRenderer] = None

    @classmethod
    def reexport(
        cls,
        export_name: str,
        path: Optional[str] = INDEX_FILE,
        key: Optional[str] = None,
        aggregate: Optional[str] = None,
        doc: Sequence[str] = (),
        renderer: Optional[IndexRenderer] = None,
    ) -> "Module":
        """Create a re-export aggregator (``path=None`` emits no file of its own)."""
        return cls(
            export_name,
            path=path,
            kind=ModuleKind.REEXPORT,
            key=key,
            aggregate=aggregate,
            doc=doc,
            renderer=renderer,
        )

    def __repr__(self) -> str:
        return f"Module({self.export_name!r}, path={self.path!r}, kind={self.kind.value})"

    @property
    def path(self) -> Optional[str]:
        """Path relative to the parent, including own prefixes."""
        if self._path is None:
            return None
        return normalize_path(posixpath.join(*self._prefix, self._path))

    @property
    def prefix(self) -> Tuple[str, ...]:
        return self._prefix

    @property
    def content(self) -> Optional[str]:
        return self._content

    @property
    def deps(self) -> Tuple["Module", ...]:
        return tuple(self._deps)

    @property
    def parent(self) -> Optional["Module"]:
        return self._parent

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def iter_modules(self):
        """Yield this module and all descendants, pre-order."""
        yield self
        for dep in self._deps:
            yield from dep.iter_modules()

    # Building phase

    def push_dep(self, child: "Module") -> None:
        """Append ``child``; its path stays relative to this module."""
        if self._frozen:
            raise ModuleFrozenError(self.export_name, "push a dependency into")
        if child._frozen:
            raise ModuleFrozenError(child.export_name, "attach")
        if child._parent is not None:
            raise ModuleStateError(
                f"Module '{child.export_name}' is already owned by '{child._parent.export_name}'"
            )
        ancestor: Optional[Module] = self
        while ancestor is not None:
            if ancestor is child:
                raise ModuleStateError(
                    f"Attaching '{child.export_name}' under '{self.export_name}' would create a cycle"
                )
            ancestor = ancestor._parent

        child._parent = self
        self._deps.append(child)

    def unshift(self, *segments: str) -> None:
        """Prepend directory segments to this module and its entire subtree."""
        for module in self.iter_modules():
            if module._frozen:
                raise ModuleFrozenError(module.export_name, "unshift")

        cleaned = []
        for segment in segments:
            parts = [p for p in segment.replace("\\", "/").split("/") if p and p != "."]
            cleaned.extend(parts)

        self._prefix = tuple(cleaned) + self._prefix
        logger.debug("Unshifted %s by %s", self.export_name, "/".join(cleaned))

    # Flattened phase

    def flatten(self, renderer: Optional[IndexRenderer] = None) -> List[File]:
        """
        Resolve all paths and produce the ordered file list.

        Files come pre-order: the module's own file, then each child's
        files in push order. Freezes the subtree. Later calls return the
        cached files and accept no other renderer than the first one.

        Args:
            renderer: Index renderer for modules that have none

        Returns:
            Ordered list of File

        Raises:
            PathCollisionError: Two modules resolve to the same path
            NameCollisionError: Two names reach one index through its re-exports
            ModuleFrozenError: Called again with a different renderer
        """
        if self._files is not None:
            if renderer is not None and renderer is not self._flatten_renderer:
                raise ModuleFrozenError(self.export_name, "re-render")
            return list(self._files)

        resolved: Dict[int, Optional[str]] = {}
        self._resolve(("",), resolved)

        files: List[File] = []
        owners: Dict[str, Module] = {}
        for module in self.iter_modules():
            path = resolved[id(module)]
            if path is None:
                continue
            if path in owners:
                raise PathCollisionError(path, [owners[path].export_name, module.export_name])
            owners[path] = module
            files.append(File(path=path, content=module._render(path, resolved, renderer)))

        for module in self.iter_modules():
            module._frozen = True
        self._files = files
        self._flatten_renderer = renderer

        logger.debug("Flattened %s into %d file(s)", self.export_name, len(files))
        return list(files)

    def _resolve(self, base: Tuple[str, ...], resolved: Dict[int, Optional[str]]) -> None:
        directory = base + self._prefix
        if self._path is None:
            resolved[id(self)] = None
        else:
            resolved[id(self)] = normalize_path(posixpath.join(*directory, self._path))
        for dep in self._deps:
            dep._resolve(directory, resolved)

    def _exported_paths(self, resolved: Dict[int, Optional[str]]) -> List[str]:
        """Resolved paths re-exported on behalf of this module."""
        path = resolved[id(self)]
        if path is not None:
            return [path]
        paths = []
        for dep in self._deps:
            paths.extend(dep._exported_paths(resolved))
        return paths

    def _declared_names(self) -> List[str]:
        names = list(self.names)
        if self.aggregate is not None:
            names.append(self.aggregate)
        return names

    def _exported_names(self, resolved: Dict[int, Optional[str]]) -> List[Tuple[str, str]]:
        """``(name, source path)`` pairs reachable through this module's re-exports."""
        path = resolved[id(self)]
        names = [(name, path) for name in self._declared_names()] if path is not None else []
        if self.kind != ModuleKind.CONTENT:
            for dep in self._deps:
                names.extend(dep._exported_names(resolved))
        return names

    def _check_exported_names(self, path: str, resolved: Dict[int, Optional[str]]) -> None:
        owners = {name: path for name in self._declared_names()}
        for dep in self._deps:
            for name, source in dep._exported_names(resolved):
                if name in owners:
                    raise NameCollisionError(name, [owners[name], source])
                owners[name] = source

    def _render(
        self,
        path: str,
        resolved: Dict[int, Optional[str]],
        renderer: Optional[IndexRenderer],
    ) -> str:
        if self.kind == ModuleKind.CONTENT:
            return self._content

        self._check_exported_names(path, resolved)

        exports = []
        for dep in self._deps:
            exports.extend(relative_import(path, p) for p in dep._exported_paths(resolved))

        imports = []
        entries = []
        if self.aggregate is not None:
            seen_keys: Dict[str, str] = {}
            for dep in self._deps:
                if dep.key is None:
                    continue
                dep_path = resolved[id(dep)]
                if dep_path is None:
                    raise ModuleStateError(
                        f"Aggregated module '{dep.export_name}' of '{self.export_name}' has no path"
                    )
                if dep.key in seen_keys:
                    raise NameCollisionError(dep.key, [seen_keys[dep.key], dep.export_name])
                seen_keys[dep.key] = dep.export_name

                imports.append(ImportSpec(name=dep.export_name, path=relative_import(path, dep_path)))
                entries.append(AggregateEntry(key=dep.key, type_name=dep.export_name))

        view = IndexView(
            path=path,
            export_name=self.export_name,
            content=self._content,
            exports=tuple(exports),
            imports=tuple(imports),
            aggregate=self.aggregate,
            entries=tuple(entries),
            doc=self.doc,
        )
        return self._get_renderer(renderer).render_index(view)

    def _get_renderer(self, fallback: Optional[IndexRenderer]) -> IndexRenderer:
        if self.renderer is not None:
            return self.renderer
        if fallback is not None:
            return fallback
        # Lazy import: languages depend on core, not the reverse
        from ..languages.typescript import get_default_generator

        return get_default_generator()
