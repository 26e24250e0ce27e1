"""
Site model — the paper catalog and page defaults.

Loaded from papers.yml, this is the list of documents the build knows
about. A markdown file that isn't declared here is never rendered.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class Paper(BaseModel):
    """One catalog entry: a markdown file plus its display identity."""

    file: str
    number: str = ""
    title: str
    description: str = ""

    @property
    def output_name(self) -> str:
        """File name of the generated page (``foo.md`` → ``foo.html``)."""
        return Path(self.file).with_suffix(".html").name


class PageDefaults(BaseModel):
    """Fallbacks for metadata a paper's front-matter doesn't provide."""

    author: str = "Dan Voulez"
    institution: str = "The LogLine Foundation"
    version: str = "1.0.1"
    date: str = "February 05, 2026"


class Site(BaseModel):
    """Root site identity — loaded from papers.yml."""

    version: int = 1

    name: str
    docs_dir: str = "docs"
    output_dir: str = "website/papers"
    index_url: str = "../index.html"
    repository: str = ""
    keywords: list[str] = Field(default_factory=list)

    defaults: PageDefaults = Field(default_factory=PageDefaults)
    papers: list[Paper] = Field(default_factory=list)

    def get_paper(self, file: str) -> Paper | None:
        """Look up a paper by its markdown file name."""
        for paper in self.papers:
            if paper.file == file:
                return paper
        return None

    def select(self, files: list[str] | None = None) -> list[Paper]:
        """Papers to build, in catalog order. ``None`` means all."""
        if not files:
            return list(self.papers)
        wanted = set(files)
        return [p for p in self.papers if p.file in wanted]
