"""
Link Driver

Walks a packages directory and relinks every thunk in it:

    read → parse → shape check → analyze require → resolve → mutate → write

Every error is fatal for the run; an unsupported require shape is the only
soft outcome (the thunk is skipped).
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterator, List, Optional

from ..analysis.require_analyzer import PathComponents, match_require, render_require
from ..analysis.thunk import extract_thunk
from ..frontend.parser import Parser
from ..hierarchy.path_resolver import PathResolver
from ..hierarchy.sourcemap import Sourcemap
from ..passes.link_mutator import Changed, LinkMutator
from ..shared.errors import ResolutionError, ThunkLinkIOError
from ..utils.config import INDEX_DIRECTORY_NAME
from ..utils.io_utils import read_source_file, write_source_file

logger = logging.getLogger(__name__)


class ThunkStatus(Enum):
    UNCHANGED = "unchanged"
    REWRITTEN = "rewritten"
    WOULD_REWRITE = "would rewrite"
    SKIPPED = "skipped"


@dataclass
class ThunkResult:
    path: Path
    status: ThunkStatus
    components: Optional[PathComponents] = None
    target: Optional[Path] = None


@dataclass
class LinkResult:
    """Outcome of one run, in processing order."""
    results: List[ThunkResult] = field(default_factory=list)

    def count(self, status: ThunkStatus) -> int:
        return sum(1 for result in self.results if result.status is status)

    @property
    def changed(self) -> List[ThunkResult]:
        return [r for r in self.results if r.status in (ThunkStatus.REWRITTEN, ThunkStatus.WOULD_REWRITE)]

    def summary(self) -> str:
        parts = [f"{len(self.results)} thunk(s)"]
        for status in ThunkStatus:
            n = self.count(status)
            if n:
                parts.append(f"{n} {status.value}")
        return ", ".join(parts)


def _sorted_entries(directory: Path) -> List[Path]:
    try:
        return sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise ThunkLinkIOError(f"could not list {directory}: {e.strerror or e}") from e


def discover_thunks(packages_dir: Path) -> Iterator[Path]:
    """
    Thunk files of a packages directory, in a stable order.

    - `_Index/<package>/<file>`: every regular file is a thunk
    - `<file>`: top-level regular files are thunks
    - any other directory is not a thunk and is skipped
    """
    for entry in _sorted_entries(packages_dir):
        if entry.name == INDEX_DIRECTORY_NAME and entry.is_dir():
            for package in _sorted_entries(entry):
                if not package.is_dir():
                    logger.debug(f"Skipping {package}: not a package directory")
                    continue
                for thunk in _sorted_entries(package):
                    if thunk.is_file():
                        yield thunk
                    else:
                        logger.debug(f"Skipping {thunk}: not a file")
        elif entry.is_file():
            yield entry
        else:
            logger.debug(f"Skipping {entry}: not a file")


class LinkDriver:
    """
    Relinks the thunks of a packages directory against one sourcemap.

    check=True computes every outcome but writes nothing.
    """

    def __init__(self, sourcemap: Sourcemap, parser: Optional[Parser] = None, check: bool = False):
        self.sourcemap = sourcemap
        self.parser = parser or Parser()
        self.resolver = PathResolver(sourcemap)
        self.mutator = LinkMutator(self.parser)
        self.check = check

    def run(self, packages_dir: Path) -> LinkResult:
        packages_dir = Path(packages_dir)
        if not packages_dir.is_dir():
            raise ThunkLinkIOError(f"packages directory {packages_dir} does not exist")
        result = LinkResult()
        for thunk_path in discover_thunks(packages_dir):
            result.results.append(self.link_thunk(thunk_path))
        logger.info(result.summary())
        return result

    def link_thunk(self, path: Path) -> ThunkResult:
        logger.info(f"Mutating {path}")
        try:
            canonical = path.resolve(strict=True)
        except OSError as e:
            raise ThunkLinkIOError(f"could not resolve {path}: {e.strerror or e}") from e

        source = read_source_file(canonical)
        chunk = self.parser.parse(source, str(path))
        thunk = extract_thunk(chunk, source, path)

        components = match_require(thunk.link)
        if components is None:
            logger.info(f"Skipping {path}: link is not a require of a static instance path")
            return ThunkResult(path, ThunkStatus.SKIPPED)
        logger.info(f"Found require in format {'/'.join(components)}")

        try:
            resolved = self.resolver.resolve_require(canonical, components)
            shortest = self.resolver.shortest_components(resolved)
        except ResolutionError as e:
            # Point the diagnostic at the require in this thunk
            if e.location is None:
                e.location = thunk.link.location
                e.source_code = source
            raise
        if shortest == components:
            require_text = thunk.link_text
        else:
            require_text = render_require(shortest)
            logger.debug(f"{path}: {'/'.join(components)} shortens to {'/'.join(shortest)}")

        target_source = read_source_file(resolved.file_path)
        outcome = self.mutator.mutate(thunk, require_text, target_source, resolved.file_path)
        if not isinstance(outcome, Changed):
            return ThunkResult(path, ThunkStatus.UNCHANGED, components, resolved.file_path)

        if self.check:
            logger.info(f"Would rewrite {path}")
            return ThunkResult(path, ThunkStatus.WOULD_REWRITE, components, resolved.file_path)
        write_source_file(canonical, outcome.source)
        logger.info(f"Rewrote {path}")
        return ThunkResult(path, ThunkStatus.REWRITTEN, components, resolved.file_path)
