#!/usr/bin/env python3
"""
Example script showing how to use the installed-resources library.
"""

import threading
from pathlib import Path

from installed_resources import ErrorCollector, InstalledResourceFinder
from installed_resources.reporting import resources_to_dataframe


def example_list_everything():
    """Example: Latest version of every installed module and script."""
    print("="*60)
    print("Example 1: Everything installed")
    print("="*60)

    finder = InstalledResourceFinder()
    for resource in finder.find():
        print(f"{resource.name:<30} {resource.version} ({resource.type.value})")


def example_version_range():
    """Example: Every installed version of a module inside a range."""
    print("\n" + "="*60)
    print("Example 2: Version range")
    print("="*60)

    finder = InstalledResourceFinder()
    for resource in finder.find(names=["PSReadLine"], version="[2.0.0,3.0.0)"):
        print(f"{resource.name} {resource.version} installed at {resource.installed_location}")


def example_explicit_path_with_errors():
    """Example: Search one directory and inspect reported field errors."""
    print("\n" + "="*60)
    print("Example 3: Explicit path")
    print("="*60)

    errors = ErrorCollector(log=False)
    finder = InstalledResourceFinder(error_sink=errors)
    resources = list(finder.find(path=Path("./Modules")))

    print(resources_to_dataframe(resources)[["name", "version", "repository"]])
    for record in errors.records:
        print(f"  {record.error_id}: {record.message}")


def example_cancellation():
    """Example: Stop after the first resource."""
    print("\n" + "="*60)
    print("Example 4: Cancellation")
    print("="*60)

    cancel = threading.Event()
    finder = InstalledResourceFinder()
    for resource in finder.find(cancel=cancel):
        print(f"First resource: {resource.name}")
        cancel.set()


if __name__ == "__main__":
    example_list_everything()
    example_version_range()
    example_explicit_path_with_errors()
    example_cancellation()
