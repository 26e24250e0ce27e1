"""
Shared test fixtures and configuration.
"""

import textwrap
from pathlib import Path

import pytest


@pytest.fixture
def project_root() -> Path:
    """Return the repository root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    """A small site: papers.yml, two readable papers, one missing."""
    (tmp_path / "papers.yml").write_text(textwrap.dedent("""\
        version: 1
        site:
          name: Test Foundation
          docs_dir: docs
          output_dir: out/papers
          repository: https://github.com/test-org/test-repo
          keywords: [testing, papers]
        defaults:
          author: Default Author
          institution: Default Institute
          version: "0.9"
          date: "January 01, 2026"
        papers:
          - file: 01_Alpha.md
            number: PAPER I
            title: Alpha
            description: The first paper.
          - file: 02_Beta.md
            number: PAPER II
            title: Beta
            description: The second paper.
          - file: 03_Missing.md
            number: PAPER III
            title: Missing
            description: Not on disk.
    """), encoding="utf-8")

    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "01_Alpha.md").write_text(textwrap.dedent("""\
        ---
        title: Alpha
        author: "Ada Writer"
        thesis: Accountability is cheap.
        ---

        # Alpha

        Some **bold** text.
    """), encoding="utf-8")
    (docs / "02_Beta.md").write_text("# Beta\n\nNo front-matter here.\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def site_config(site_dir: Path) -> Path:
    """Path to the fixture site's papers.yml."""
    return site_dir / "papers.yml"
