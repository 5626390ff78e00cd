"""
Instance Path Resolution

Resolves Roblox instance paths (`script.Parent.Foo`, `game.A.B`) against a
normalized Sourcemap, and computes the shortest path between two nodes.

The resolver holds no state beyond the read-only sourcemap and can be shared.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from ..shared.errors import ResolutionError
from ..utils.config import (
    MODULE_FILE_EXTENSIONS, PARENT_COMPONENT, ROOT_ANCHOR, SELF_ANCHOR,
)
from .sourcemap import Sourcemap, SourcemapNode

logger = logging.getLogger(__name__)

NodeChain = List[SourcemapNode]


def is_module_file(path: Path) -> bool:
    """True for `.lua` / `.luau` files."""
    return path.suffix in MODULE_FILE_EXTENSIONS


def _format_chain(chain: NodeChain) -> str:
    return ".".join(node.name for node in chain)


@dataclass
class ResolvedRequire:
    """Result of resolving one require path from one thunk."""
    components: Tuple[str, ...]
    thunk_chain: NodeChain
    target_chain: NodeChain
    file_path: Path

    @property
    def target(self) -> SourcemapNode:
        return self.target_chain[-1]


class PathResolver:
    """
    Instance path resolution over a sourcemap.

    - locate(file) → chain of nodes from the root to the node built from file
    - resolve(components, chain) → module file of the addressed node
    - shortest_components(resolved) → minimal path with the same anchor
    """

    def __init__(self, sourcemap: Sourcemap):
        self.sourcemap = sourcemap

    def locate(self, file_path: Path) -> NodeChain:
        """
        Find the chain from the root to the node whose file paths contain
        `file_path` (already canonical). Explicit worklist; no recursion.
        """
        stack: List[NodeChain] = [[self.sourcemap.root]]
        while stack:
            chain = stack.pop()
            node = chain[-1]
            if file_path in node.file_paths:
                return chain
            for child in node.children:
                stack.append(chain + [child])
        raise ResolutionError(
            f"{file_path} is not part of the sourcemap",
            help="regenerate the sourcemap after installing packages",
        )

    def resolve(self, components: Tuple[str, ...], start_chain: NodeChain) -> Path:
        """
        Walk `components[1:]` from `start_chain` and return the module file of
        the node reached. The first component is the anchor and is not walked.
        """
        return self._module_file(self._walk(components, start_chain))

    def resolve_require(self, thunk_path: Path, components: Tuple[str, ...]) -> ResolvedRequire:
        """Resolve a require found in `thunk_path` (canonical) to its target."""
        anchor = components[0]
        thunk_chain: NodeChain = []
        if anchor == SELF_ANCHOR:
            thunk_chain = self.locate(thunk_path)
            start_chain = list(thunk_chain)
        elif anchor == ROOT_ANCHOR:
            # `game` paths never need the thunk to be in the sourcemap
            start_chain = [self.sourcemap.root]
        else:
            raise ResolutionError(f"unknown anchor `{anchor}` in require path")

        target_chain = self._walk(components, start_chain)
        file_path = self._module_file(target_chain)
        return ResolvedRequire(tuple(components), thunk_chain, target_chain, file_path)

    def shortest_components(self, resolved: ResolvedRequire) -> Tuple[str, ...]:
        """
        Minimal components reaching the same target with the same anchor.

        `script` paths climb from the thunk to the deepest common ancestor and
        then descend; `game` paths descend from the root. A path that would be
        the bare anchor (a thunk requiring itself, or the root) is an error.
        """
        target_chain = resolved.target_chain
        anchor = resolved.components[0]
        if anchor == ROOT_ANCHOR:
            names = [node.name for node in target_chain[1:]]
            if not names:
                raise ResolutionError(
                    f"`{_format_chain(target_chain)}` is the sourcemap root and cannot be required"
                )
            return (ROOT_ANCHOR, *self._addressable(names, target_chain))

        thunk_chain = resolved.thunk_chain
        common = 0
        while (
            common < len(thunk_chain)
            and common < len(target_chain)
            and thunk_chain[common] is target_chain[common]
        ):
            common += 1
        ups = [PARENT_COMPONENT] * (len(thunk_chain) - common)
        names = [node.name for node in target_chain[common:]]
        if not ups and not names:
            raise ResolutionError(
                f"`{_format_chain(target_chain)}` requires itself",
                help="point the thunk at the package module instead",
            )
        return (SELF_ANCHOR, *ups, *self._addressable(names, target_chain))

    def _addressable(self, names: List[str], target_chain: NodeChain) -> List[str]:
        if PARENT_COMPONENT in names:
            raise ResolutionError(
                f"`{_format_chain(target_chain)}` cannot be required: "
                f"an instance named `{PARENT_COMPONENT}` shadows the parent accessor"
            )
        return names

    def _walk(self, components: Tuple[str, ...], start_chain: NodeChain) -> NodeChain:
        if not components:
            raise ResolutionError("empty require path")
        chain = list(start_chain)
        for component in components[1:]:
            if component == PARENT_COMPONENT:
                if len(chain) <= 1:
                    raise ResolutionError(
                        f"no parent available above `{chain[-1].name}` "
                        f"while resolving {'.'.join(components)}"
                    )
                chain.pop()
            else:
                child = chain[-1].find_child(component)
                if child is None:
                    raise ResolutionError(
                        f"unable to find child `{component}` of `{chain[-1].name}` "
                        f"while resolving {'.'.join(components)}",
                        help="regenerate the sourcemap after installing packages",
                    )
                chain.append(child)
            logger.debug(f"PathResolver: {component} -> {_format_chain(chain)}")
        return chain

    def _module_file(self, chain: NodeChain) -> Path:
        node = chain[-1]
        file_path: Optional[Path] = next((p for p in node.file_paths if is_module_file(p)), None)
        if file_path is None:
            raise ResolutionError(
                f"`{_format_chain(chain)}` [{node.class_name}] has no .lua or .luau file"
            )
        logger.info(f"Required file is {node.name} [{node.class_name}], located at {file_path}")
        return file_path
