"""Lookups against the system user database."""

import os
import pwd
from pathlib import Path
from typing import Optional, Union

from contracts import FatalConfigError


def get_path_owner(path: Union[str, Path]) -> str:
    """Return the login name owning ``path``."""
    try:
        uid = os.stat(path).st_uid
        return pwd.getpwuid(uid).pw_name
    except (OSError, KeyError) as exc:
        raise FatalConfigError(f"Cannot determine the owner of {path}: {exc}") from exc


def check_home_dir(user: str, home: Optional[str]) -> str:
    """Reject an empty home or ``/``; both count as unset."""
    if not home or home == "/":
        raise FatalConfigError(
            f"User {user} has no usable home directory (resolved to {home!r})"
        )
    return home


def resolve_home_dir(user: str) -> str:
    """Return the home directory of ``user``.

    A home of ``/`` is treated as unset: the supervised agent would otherwise run
    with the filesystem root as its HOME.
    """
    try:
        home = pwd.getpwnam(user).pw_dir
    except KeyError:
        raise FatalConfigError(f"Unknown user: {user}") from None
    return check_home_dir(user, home)
