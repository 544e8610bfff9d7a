"""
Action builders, one per storage operation.

Each builder returns an unsealed Action pre-populated with the parameters its
operation requires; callers may keep chaining ``with_*`` setters.
"""

from datetime import datetime
from typing import Mapping, Optional, Union

from .action import Action, QUICK_DELETE_CONFIRMATION


def delete() -> Action:
    return Action("delete")


def dir_(format: Optional[str] = None) -> Action:
    """Directory listing; named with a trailing underscore to keep the builtin."""
    return Action("dir").with_format(format)


def download() -> Action:
    return Action("download")


def du(format: Optional[str] = None) -> Action:
    """Disk usage (quota) query."""
    return Action("du").with_format(format)


def mkdir() -> Action:
    return Action("mkdir")


def mtime(value: Optional[Union[datetime, int, float]] = None) -> Action:
    return Action("mtime").with_mtime(value)


def rename(destination: Optional[str] = None) -> Action:
    return Action("rename").with_destination(destination)


def rmdir() -> Action:
    return Action("rmdir")


def stat(format: Optional[str] = None) -> Action:
    return Action("stat").with_format(format)


def symlink(target: Optional[str] = None) -> Action:
    return Action("symlink").with_target(target)


def quick_delete() -> Action:
    return Action("quick-delete").with_quick_delete(QUICK_DELETE_CONFIRMATION)


def upload() -> Action:
    return Action("upload")


def setmd(additional_params: Optional[Mapping[str, str]] = None) -> Action:
    """Set metadata; the metadata travels as additional parameters."""
    return Action("setmd").with_additional_params(additional_params)
