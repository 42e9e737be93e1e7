from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from eventify.core.observability.metrics import inc_artifact

log = logging.getLogger("eventify.generator")


def write_artifact(path: Path, render: Callable[[], str], *, artifact: str, overwrite: bool = True) -> bool:
    """
    Render and write one artifact.

    Never raises: any failure (render or I/O) is logged and reported as
    False so sibling artifacts still get written.
    """
    try:
        if not overwrite and path.exists():
            log.info("Keeping existing %s at %s", artifact, path)
            inc_artifact(artifact, True)
            return True
        text = render()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        ok = path.exists()
    except Exception:
        log.exception("Failed to generate %s at %s", artifact, path)
        ok = False
    inc_artifact(artifact, ok)
    return ok
