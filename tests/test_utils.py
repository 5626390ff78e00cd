"""
Test utilities for the thunklink test suite.

Builds small Rojo-style projects on disk: source files, a packages directory
with thunks, and a sourcemap JSON describing them.
"""

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from thunklink.hierarchy.sourcemap import Sourcemap, load_sourcemap, normalize_sourcemap


def node(name: str, class_name: str = "ModuleScript", files: Sequence[str] = (),
         children: Sequence[Dict[str, Any]] = ()) -> Dict[str, Any]:
    """Sourcemap JSON object for one instance."""
    data: Dict[str, Any] = {"name": name, "className": class_name}
    if files:
        data["filePaths"] = list(files)
    if children:
        data["children"] = list(children)
    return data


def folder(name: str, *children: Dict[str, Any]) -> Dict[str, Any]:
    return node(name, "Folder", children=children)


def write_file(root: Path, relative: str, text: str) -> Path:
    """Write text (as utf-8 bytes, newlines untouched) under root."""
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(text.encode("utf-8"))
    return path


def read_file(path: Path) -> str:
    return path.read_bytes().decode("utf-8")


def write_sourcemap(root: Path, tree: Dict[str, Any], name: str = "sourcemap.json") -> Path:
    path = root / name
    path.write_text(json.dumps(tree, indent=2), encoding="utf-8")
    return path


def build_sourcemap(root: Path, tree: Dict[str, Any]) -> Sourcemap:
    """In-memory, normalized sourcemap with paths relative to root."""
    return normalize_sourcemap(Sourcemap.from_dict(tree), root)


@dataclass
class Project:
    """A project on disk: root directory, packages directory and sourcemap file."""
    root: Path
    packages: Path
    sourcemap_path: Path

    def load(self) -> Sourcemap:
        return load_sourcemap(self.sourcemap_path, self.root)

    def thunk(self, relative: str) -> Path:
        return self.packages / relative


def build_ab_project(tmp_path: Path, thunk_source: str, b_source: str = "return {}\n") -> Project:
    """
    Root `Game` with module `A` (A.lua) whose child is `B` (A/B.lua), and the
    thunk `Foo` next to `A`, built from Packages/Foo.lua.

        Game
        ├── A          A.lua
        │   └── B      A/B.lua
        └── Foo        Packages/Foo.lua
    """
    write_file(tmp_path, "A.lua", "return {}\n")
    write_file(tmp_path, "A/B.lua", b_source)
    write_file(tmp_path, "Packages/Foo.lua", thunk_source)
    tree = node("Game", "DataModel", children=[
        node("A", files=["A.lua"], children=[node("B", files=["A/B.lua"])]),
        node("Foo", files=["Packages/Foo.lua"]),
    ])
    sourcemap_path = write_sourcemap(tmp_path, tree)
    return Project(tmp_path, tmp_path / "Packages", sourcemap_path)


def build_index_project(tmp_path: Path, extra_children: Optional[List[Dict[str, Any]]] = None,
                        target_source: str = "return {}\n") -> Project:
    """
    Wally layout: a top-level thunk `Promise` pointing into
    `_Index/evaera_promise@4.0.0/promise`, whose init.lua is the real module.

        Game
        └── ReplicatedStorage
            └── Packages                          Packages/
                ├── Promise                       Packages/Promise.lua
                └── _Index
                    ├── evaera_promise@4.0.0
                    │   └── promise               .../promise/init.lua
                    └── pkg-1.0.0                 Packages/_Index/pkg-1.0.0/init.lua
    """
    index = "Packages/_Index"
    write_file(tmp_path, f"{index}/evaera_promise@4.0.0/promise/init.lua", target_source)
    write_file(
        tmp_path,
        "Packages/Promise.lua",
        'return require(script.Parent._Index["evaera_promise@4.0.0"]["promise"])\n',
    )
    write_file(
        tmp_path,
        f"{index}/pkg-1.0.0/init.lua",
        'return require(script.Parent.Parent.Promise)\n',
    )
    children = [
        node("Promise", files=["Packages/Promise.lua"]),
        folder(
            "_Index",
            folder("evaera_promise@4.0.0", node("promise", files=[f"{index}/evaera_promise@4.0.0/promise/init.lua"])),
            node("pkg-1.0.0", files=[f"{index}/pkg-1.0.0/init.lua"]),
        ),
    ]
    children.extend(extra_children or [])
    tree = node("Game", "DataModel", children=[
        node("ReplicatedStorage", "ReplicatedStorage", children=[
            node("Packages", "Folder", files=["Packages"], children=children),
        ]),
    ])
    sourcemap_path = write_sourcemap(tmp_path, tree)
    return Project(tmp_path, tmp_path / "Packages", sourcemap_path)
