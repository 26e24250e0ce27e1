"""
Build use case — render every catalogued paper to a standalone page.

For each paper: read markdown → extract metadata → render fragment →
merge into the page template → write ``<stem>.html``.

A paper that can't be read or written is logged and counted; it never
stops the rest of the batch.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from paperpress.core.config.loader import ConfigError, open_site
from paperpress.core.models.site import Paper, Site
from paperpress.core.services.frontmatter import extract_metadata
from paperpress.core.services.md_transforms import render_markdown
from paperpress.core.services.page_template import render_page

logger = logging.getLogger(__name__)


@dataclass
class PageResult:
    """Outcome of building one paper."""

    file: str
    output: str = ""
    ok: bool = False
    error: str = ""
    metadata: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "file": self.file,
            "output": self.output,
            "ok": self.ok,
            "error": self.error,
            "metadata": self.metadata,
        }


@dataclass
class BuildResult:
    """Aggregated result of a site build."""

    site: Site | None = None
    config_path: Path | None = None
    docs_dir: Path | None = None
    output_dir: Path | None = None
    pages: list[PageResult] = field(default_factory=list)
    error: str | None = None

    @property
    def built(self) -> int:
        return sum(1 for p in self.pages if p.ok)

    @property
    def failed(self) -> int:
        return sum(1 for p in self.pages if not p.ok)

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        if self.error:
            return {"error": self.error}
        return {
            "site": self.site.name if self.site else "",
            "config_path": str(self.config_path) if self.config_path else None,
            "docs_dir": str(self.docs_dir) if self.docs_dir else None,
            "output_dir": str(self.output_dir) if self.output_dir else None,
            "built": self.built,
            "failed": self.failed,
            "pages": [p.to_dict() for p in self.pages],
        }


def build_paper(site: Site, paper: Paper, docs_dir: Path, output_dir: Path) -> PageResult:
    """Build one page. Read/write failures are captured on the result."""
    result = PageResult(file=paper.file)
    md_path = docs_dir / paper.file
    html_path = output_dir / paper.output_name

    try:
        markdown = md_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Cannot read %s: %s", md_path, e)
        result.error = _describe(e)
        return result

    result.metadata = extract_metadata(markdown)
    content = render_markdown(markdown)
    page = render_page(site, paper, content, result.metadata)

    try:
        html_path.write_text(page, encoding="utf-8")
    except OSError as e:
        logger.warning("Cannot write %s: %s", html_path, e)
        result.error = _describe(e)
        return result

    logger.info("Built %s -> %s", paper.file, html_path)
    result.output = html_path.name
    result.ok = True
    return result


def build_site(
    config_path: Path | None = None,
    only: list[str] | None = None,
    jobs: int = 1,
) -> BuildResult:
    """Build all (or the selected) papers declared in papers.yml.

    Args:
        config_path: Optional explicit path to papers.yml.
        only: Restrict the build to these markdown file names.
        jobs: Number of papers to build concurrently.

    Returns:
        BuildResult with one PageResult per selected paper, in catalog order.
    """
    result = BuildResult()

    try:
        config = open_site(config_path)
    except ConfigError as e:
        result.error = str(e)
        return result

    site = result.site = config.site
    result.config_path = config.path
    docs_dir = result.docs_dir = config.docs_dir
    output_dir = result.output_dir = config.output_dir

    if only:
        unknown = sorted({f for f in only if site.get_paper(f) is None})
        if unknown:
            result.error = f"Unknown paper(s): {', '.join(unknown)}"
            return result
    papers = site.select(only)

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        result.error = f"Cannot create output directory {output_dir}: {e}"
        return result

    logger.info(
        "Building %d papers from %s into %s",
        len(papers), docs_dir, output_dir,
    )

    def _one(paper: Paper) -> PageResult:
        return build_paper(site, paper, docs_dir, output_dir)

    if jobs > 1 and len(papers) > 1:
        with ThreadPoolExecutor(max_workers=min(jobs, len(papers))) as pool:
            result.pages = list(pool.map(_one, papers))
    else:
        result.pages = [_one(p) for p in papers]

    logger.info("Build complete: %d built, %d failed", result.built, result.failed)
    return result


def _describe(exc: BaseException) -> str:
    if isinstance(exc, FileNotFoundError):
        return f"File not found: {exc.filename}"
    return str(exc)
