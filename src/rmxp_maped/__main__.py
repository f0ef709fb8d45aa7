"""
Command line entry point for rmxp_maped.
Usage: python -m rmxp_maped {info,resave,new} ...
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .exceptions import RmxpMapedError
from .project import ProjectManager
from .settings import AppSettings
from .store import Collection, Layout, scripts_filename
from .utils.logging_config import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rmxp-maped", description="Inspect and maintain RPG Maker XP projects."
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    info = subparsers.add_parser("info", help="show record counts of a project")
    info.add_argument("project", help="project directory")

    resave = subparsers.add_parser("resave", help="load and save every data file of a project")
    resave.add_argument("project", help="project directory")

    new = subparsers.add_parser("new", help="create a new project from defaults")
    new.add_argument("project", help="directory to create the project in")
    new.add_argument("--name", default=None, help="project name (defaults to the directory name)")
    return parser


def describe_project(manager: ProjectManager) -> List[str]:
    """One line per collection with its record count."""
    store = manager.store
    config = manager.config
    lines = [f"Project: {config.project_name if config else ''} ({manager.project_path})"]
    for collection in Collection:
        with store.borrow(collection) as data:
            if collection.layout is Layout.RECORD:
                count = 1
            else:
                count = len(data.value)
        lines.append(f"  {collection.label:<20} {count:>5}")
    if config is not None:
        lines.append(f"  scripts file         {scripts_filename(config.scripts_path)}")
    return lines


def main(argv: Optional[List[str]] = None, settings: Optional[AppSettings] = None) -> int:
    """Run the command line tool and return the process exit code."""
    args = build_parser().parse_args(argv)

    if settings is None:
        settings = AppSettings()
    setup_logging(settings)
    logger = logging.getLogger(f"{__name__}.main")

    manager = ProjectManager(settings)
    try:
        if args.command == "info":
            manager.open_project(args.project)
            print("\n".join(describe_project(manager)))
        elif args.command == "resave":
            manager.open_project(args.project)
            manager.save_project()
            print(f"Saved {manager.project_path}")
        elif args.command == "new":
            manager.new_project(args.project, args.name)
            print(f"Created project '{manager.config.project_name}' in {manager.project_path}")  # type: ignore[union-attr]
    except RmxpMapedError as e:
        logger.error(f"{args.command} failed: {e}")
        cause = e.__cause__
        if cause is not None:
            logger.debug(f"Caused by: {cause!r}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
