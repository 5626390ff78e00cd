"""CLI entry point: run `thunklink --sourcemap sourcemap.json Packages` or `python -m thunklink ...`."""

import logging
import sys
from pathlib import Path
from typing import List, Optional


def main(argv: Optional[List[str]] = None) -> int:
    import argparse
    from .hierarchy.sourcemap import load_sourcemap
    from .linker.driver import LinkDriver
    from .shared.errors import ThunkLinkError

    parser = argparse.ArgumentParser(
        prog="thunklink",
        description="Relink Wally package thunks using a Rojo sourcemap.",
    )
    parser.add_argument("-s", "--sourcemap", type=Path, required=True, help="Path to sourcemap JSON")
    parser.add_argument("packages", type=Path, help="Path to the packages directory")
    parser.add_argument("--project-dir", type=Path, default=None,
                        help="Directory relative sourcemap paths are based on (default: current directory)")
    parser.add_argument("--check", action="store_true",
                        help="Report thunks that would be rewritten without writing them; exit 1 if any")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log resolution details")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")
    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.WARNING if args.quiet else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        sourcemap = load_sourcemap(args.sourcemap, args.project_dir)
        driver = LinkDriver(sourcemap, check=args.check)
        result = driver.run(args.packages)
    except ThunkLinkError as e:
        sys.stderr.write(e.format(color=sys.stderr.isatty()) + "\n")
        return 1

    if args.check and result.changed:
        for entry in result.changed:
            sys.stderr.write(f"thunklink: would rewrite {entry.path}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
