"""
papers.yml loading — catalog discovery, parsing and path resolution.

``open_site()`` is what the use cases call: it finds the catalog, turns
it into a validated ``Site`` and pins ``docs_dir`` / ``output_dir`` to
the directory holding the file. ``load_site()`` stops at the model.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import yaml
from pydantic import ValidationError

from paperpress.core.models.site import Paper, Site

logger = logging.getLogger(__name__)

SITE_CONFIG_FILE = "papers.yml"

# Keys that may sit beside a "site:" block instead of inside it.
_TOP_LEVEL_KEYS = ("version", "defaults", "papers")


class ConfigError(Exception):
    """papers.yml is missing, unreadable or does not describe a site."""


@dataclass(frozen=True)
class SiteConfig:
    """A loaded catalog together with the paths it is relative to."""

    site: Site
    path: Path

    @property
    def root(self) -> Path:
        return self.path.parent.resolve()

    @property
    def docs_dir(self) -> Path:
        return self.root / self.site.docs_dir

    @property
    def output_dir(self) -> Path:
        return self.root / self.site.output_dir

    def source(self, paper: Paper) -> Path:
        return self.docs_dir / paper.file

    def target(self, paper: Paper) -> Path:
        return self.output_dir / paper.output_name


def find_site_file(start_dir: Path | None = None) -> Path | None:
    """Closest papers.yml in ``start_dir`` (default: cwd) or any parent."""
    start = (start_dir or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        candidate = directory / SITE_CONFIG_FILE
        if candidate.is_file():
            return candidate
    return None


def _locate(path: Path | None) -> Path:
    if path is None:
        path = find_site_file()
        if path is None:
            raise ConfigError(
                f"No {SITE_CONFIG_FILE} found in {Path.cwd()} or its parents. "
                "Run 'paperpress init' or pass --config."
            )
    elif not path.is_file():
        raise ConfigError(f"Catalog file not found: {path}")
    return path


def _site_mapping(path: Path) -> dict:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read catalog {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(
            f"Expected a YAML mapping in {path}, found {type(data).__name__}"
        )

    block = data.get("site")
    if not isinstance(block, dict):
        return data

    merged = dict(block)
    for key in _TOP_LEVEL_KEYS:
        if key in data:
            merged.setdefault(key, data[key])
    return merged


def load_site(path: Path | None = None) -> Site:
    """Parse and validate a catalog; search upward from cwd when ``path`` is None.

    Raises:
        ConfigError: on any problem with the file or its contents.
    """
    path = _locate(path)
    logger.debug("Reading catalog %s", path)

    try:
        site = Site.model_validate(_site_mapping(path))
    except ValidationError as e:
        raise ConfigError(f"Invalid site configuration in {path}: {e}") from e

    logger.info("Catalog '%s': %d papers", site.name, len(site.papers))
    return site


def open_site(path: Path | None = None) -> SiteConfig:
    """Like ``load_site()``, keeping the resolved catalog location."""
    path = _locate(path)
    return SiteConfig(site=load_site(path), path=path)
