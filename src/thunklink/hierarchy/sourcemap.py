"""
Sourcemap Model

The Rojo sourcemap is an instance tree: every node has a name, a class name,
the files it was built from, and its children. Nodes live in one arena
(`Sourcemap.nodes`) and refer to their parent through a `NodeId` slot, never
through an object reference, so the tree has a single owner.

After `normalize_sourcemap` every file path is canonical and every non-root
node has its parent id set. The tree is read-only from then on.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from ..shared.errors import ConfigurationError
from ..utils.io_utils import read_source_file

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodeId:
    """Index of a node in its Sourcemap arena."""
    index: int

    def __str__(self) -> str:
        return f"#{self.index}"


@dataclass(eq=False)
class SourcemapNode:
    """
    One instance in the hierarchy.

    Children are name-unique in practice; `find_child` returns the first
    match when they are not.
    """
    name: str
    class_name: str
    file_paths: List[Path] = field(default_factory=list)
    children: List["SourcemapNode"] = field(default_factory=list)
    node_id: NodeId = NodeId(0)
    parent_id: Optional[NodeId] = None

    def find_child(self, name: str) -> Optional["SourcemapNode"]:
        for child in self.children:
            if child.name == name:
                return child
        return None

    def __repr__(self) -> str:
        return f"SourcemapNode({self.name!r} [{self.class_name}] {self.node_id})"


class Sourcemap:
    """Arena owning every node of one sourcemap tree."""

    def __init__(self, root: SourcemapNode, nodes: List[SourcemapNode]):
        self.root = root
        self.nodes = nodes

    def node(self, node_id: NodeId) -> SourcemapNode:
        return self.nodes[node_id.index]

    def parent_of(self, node: SourcemapNode) -> Optional[SourcemapNode]:
        if node.parent_id is None:
            return None
        return self.node(node.parent_id)

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self):
        return iter(self.nodes)

    @classmethod
    def from_dict(cls, data: Any) -> "Sourcemap":
        """
        Build the arena from decoded sourcemap JSON.

        Ids are assigned in discovery order (root is #0). File paths are kept as written; call
        `normalize_sourcemap` to canonicalize them.
        """
        nodes: List[SourcemapNode] = []
        root = cls._build_node(data, nodes, "root")
        pending: List[Tuple[SourcemapNode, Any, str]] = [(root, data, "root")]
        while pending:
            node, raw, where = pending.pop()
            raw_children = raw.get("children", [])
            if not isinstance(raw_children, list):
                raise ConfigurationError(f"sourcemap node at {where}: `children` must be a list")
            for position, raw_child in enumerate(raw_children):
                child_where = f"{where}.children[{position}]"
                child = cls._build_node(raw_child, nodes, child_where)
                node.children.append(child)
                pending.append((child, raw_child, child_where))
        return cls(root, nodes)

    @staticmethod
    def _build_node(raw: Any, nodes: List[SourcemapNode], where: str) -> SourcemapNode:
        if not isinstance(raw, dict):
            raise ConfigurationError(f"sourcemap node at {where} must be an object")
        name = raw.get("name")
        class_name = raw.get("className")
        if not isinstance(name, str):
            raise ConfigurationError(f"sourcemap node at {where} is missing a string `name`")
        if not isinstance(class_name, str):
            raise ConfigurationError(f"sourcemap node `{name}` is missing a string `className`")
        file_paths = raw.get("filePaths", [])
        if not isinstance(file_paths, list) or not all(isinstance(p, str) for p in file_paths):
            raise ConfigurationError(f"sourcemap node `{name}`: `filePaths` must be a list of strings")
        node = SourcemapNode(
            name=name,
            class_name=class_name,
            file_paths=[Path(p) for p in file_paths],
            node_id=NodeId(len(nodes)),
        )
        nodes.append(node)
        return node


def normalize_sourcemap(sourcemap: Sourcemap, project_dir: Optional[Path] = None) -> Sourcemap:
    """
    Canonicalize every file path and wire parent ids, in place.

    Relative paths are taken relative to `project_dir` (default: the current
    working directory). A path that does not exist raises ConfigurationError.
    """
    base = Path(project_dir) if project_dir is not None else Path.cwd()
    stack: List[SourcemapNode] = [sourcemap.root]
    visited = 0
    while stack:
        node = stack.pop()
        visited += 1
        canonical: List[Path] = []
        for file_path in node.file_paths:
            candidate = file_path if file_path.is_absolute() else base / file_path
            try:
                canonical.append(candidate.resolve(strict=True))
            except (OSError, RuntimeError) as e:
                raise ConfigurationError(
                    f"sourcemap path `{file_path}` of `{node.name}` could not be canonicalized: {e}",
                    help="regenerate the sourcemap or pass the directory it was generated in with --project-dir",
                ) from e
        node.file_paths = canonical
        for child in node.children:
            child.parent_id = node.node_id
            stack.append(child)
    logger.debug(f"Normalized sourcemap: {visited} nodes relative to {base}")
    return sourcemap


def load_sourcemap(path: Union[Path, str], project_dir: Optional[Path] = None) -> Sourcemap:
    """Read, validate and normalize a sourcemap JSON file."""
    path = Path(path)
    text = read_source_file(path)
    try:
        data: Dict[str, Any] = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"sourcemap {path} is not valid JSON: {e.msg} (line {e.lineno}, column {e.colno})") from e
    sourcemap = Sourcemap.from_dict(data)
    logger.debug(f"Loaded sourcemap {path} with {len(sourcemap)} nodes")
    return normalize_sourcemap(sourcemap, project_dir)
