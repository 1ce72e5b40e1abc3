"""Bulletin text loading.

The curriculum bulletin is read once at startup and handed to the
classifier as a plain string. It is never reloaded.
"""

from __future__ import annotations

import logging
import os


logger = logging.getLogger(__name__)


def load_bulletin(path: str) -> str:
    if not path or not os.path.exists(path):
        logger.info("No bulletin text at %s; bulletin lookup disabled", path)
        return ""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            text = fh.read()
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not read bulletin text %s: %s", path, exc)
        return ""
    logger.info("Loaded bulletin text from %s (%s chars)", path, len(text))
    return text
