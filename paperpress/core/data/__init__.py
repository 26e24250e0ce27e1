"""
Bundled data — the default paper catalog shipped with the package.

``paperpress init`` copies ``papers.yml`` from here into a project.
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

_DATA_DIR = Path(__file__).parent

DEFAULT_CONFIG_PATH = _DATA_DIR / "papers.yml"


def default_config_text() -> str:
    """Return the bundled papers.yml verbatim."""
    return DEFAULT_CONFIG_PATH.read_text(encoding="utf-8")


def write_default_config(target: Path, force: bool = False) -> Path:
    """Write the bundled papers.yml into ``target`` (a directory).

    Raises:
        FileExistsError: If a papers.yml already exists and ``force`` is off.
    """
    dest = target / DEFAULT_CONFIG_PATH.name
    if dest.exists() and not force:
        raise FileExistsError(f"{dest} already exists (use --force to overwrite)")
    target.mkdir(parents=True, exist_ok=True)
    dest.write_text(default_config_text(), encoding="utf-8")
    logger.info("Wrote default config to %s", dest)
    return dest
