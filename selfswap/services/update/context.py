"""Find the artifact the running code was loaded from."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from types import ModuleType

_LOGGER = logging.getLogger(__name__)

__all__ = ["find_update_context"]


def find_update_context(module: ModuleType | str | None = None) -> Path | None:
    """Return the zip application ``module`` was imported from.

    ``module`` may be a module object or a module name and defaults to
    ``__main__``.  Returns ``None`` when the module was loaded from a plain
    directory, which is the usual case when running from a source checkout.
    """

    if module is None:
        module = "__main__"
    if isinstance(module, str):
        module = sys.modules.get(module)
        if module is None:
            return None

    loader = getattr(module, "__loader__", None)
    archive = getattr(loader, "archive", None)
    if not archive:
        _LOGGER.debug("Module %s was not loaded from an archive", module.__name__)
        return None

    path = Path(archive).absolute()
    if path.is_dir():
        return None
    return path
