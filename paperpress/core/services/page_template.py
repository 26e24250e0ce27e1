"""
Page template — merges a rendered fragment and its metadata into the
fixed page shell (``paperpress/templates/paper.html``).

Metadata values are autoescaped; the fragment is inserted verbatim.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from jinja2 import Environment, PackageLoader, select_autoescape

from paperpress.core.models.site import Paper, Site

logger = logging.getLogger(__name__)

PAGE_TEMPLATE = "paper.html"

# Metadata keys that fall back to the site's PageDefaults.
_DEFAULTED_KEYS = ("author", "institution", "version", "date")


@lru_cache(maxsize=1)
def _environment() -> Environment:
    return Environment(
        loader=PackageLoader("paperpress", "templates"),
        autoescape=select_autoescape(["html"]),
    )


def page_metadata(site: Site, metadata: dict[str, str]) -> dict[str, str]:
    """Front-matter merged over the site defaults.

    Empty values count as missing, so ``author:`` with nothing after
    still shows the default author.
    """
    merged = dict(metadata)
    defaults = site.defaults.model_dump()
    for key in _DEFAULTED_KEYS:
        if not merged.get(key):
            merged[key] = defaults[key]
    return merged


def page_keywords(site: Site, paper: Paper) -> str:
    return ", ".join([*site.keywords, paper.title.lower()])


def render_page(
    site: Site,
    paper: Paper,
    content: str,
    metadata: dict[str, str],
) -> str:
    """Render the full HTML page for one paper."""
    template = _environment().get_template(PAGE_TEMPLATE)
    repository_label = site.repository.split("://", 1)[-1]
    # "github.com/Org/Repo" → "github.com/Org"
    if repository_label.count("/") >= 2:
        repository_label = repository_label.rsplit("/", 1)[0]

    logger.debug("Rendering page for %s", paper.file)
    return template.render(
        site=site,
        paper=paper,
        meta=page_metadata(site, metadata),
        keywords=page_keywords(site, paper),
        content=content,
        repository_label=repository_label,
    )
