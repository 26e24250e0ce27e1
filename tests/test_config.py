"""
Tests for configuration loading — papers.yml parsing and validation.
"""

import textwrap
from pathlib import Path

import pytest

from paperpress.core.config.loader import ConfigError, find_site_file, load_site, open_site
from paperpress.core.data import DEFAULT_CONFIG_PATH, write_default_config
from paperpress.core.use_cases.config_check import check_config


@pytest.fixture
def flat_papers_yml(tmp_path: Path) -> Path:
    """A papers.yml with the site identity at the top level."""
    content = textwrap.dedent("""\
        name: flat-site
        docs_dir: content
        papers:
          - file: a.md
            title: A
    """)
    path = tmp_path / "papers.yml"
    path.write_text(content)
    return path


@pytest.fixture
def minimal_papers_yml(tmp_path: Path) -> Path:
    path = tmp_path / "papers.yml"
    path.write_text("name: minimal\n")
    return path


class TestLoadSite:
    """Tests for load_site()."""

    def test_load_wrapped_config(self, site_config: Path):
        site = load_site(site_config)
        assert site.name == "Test Foundation"
        assert site.output_dir == "out/papers"
        assert len(site.papers) == 3
        assert site.defaults.author == "Default Author"
        assert site.keywords == ["testing", "papers"]

    def test_load_flat_config(self, flat_papers_yml: Path):
        site = load_site(flat_papers_yml)
        assert site.name == "flat-site"
        assert site.docs_dir == "content"
        assert site.papers[0].file == "a.md"

    def test_load_minimal_config(self, minimal_papers_yml: Path):
        site = load_site(minimal_papers_yml)
        assert site.name == "minimal"
        assert site.papers == []
        assert site.defaults.version == "1.0.1"

    def test_bundled_default_loads(self):
        site = load_site(DEFAULT_CONFIG_PATH)
        assert site.name == "The LogLine Foundation"
        assert len(site.papers) == 9
        assert site.get_paper("03_II_JSON_Atomic.md").title == "JSON✯Atomic"
        assert site.defaults.date == "February 05, 2026"

    def test_missing_file_raises(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_site(tmp_path / "nonexistent.yml")

    def test_invalid_yaml_raises(self, tmp_path: Path):
        path = tmp_path / "papers.yml"
        path.write_text(":: invalid: yaml: [")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_site(path)

    def test_non_mapping_raises(self, tmp_path: Path):
        path = tmp_path / "papers.yml"
        path.write_text("- just\n- a\n- list\n")
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_site(path)

    def test_missing_name_raises(self, tmp_path: Path):
        path = tmp_path / "papers.yml"
        path.write_text("docs_dir: docs\n")
        with pytest.raises(ConfigError, match="Invalid site configuration"):
            load_site(path)

    def test_paper_without_title_raises(self, tmp_path: Path):
        path = tmp_path / "papers.yml"
        path.write_text("name: s\npapers:\n  - file: a.md\n")
        with pytest.raises(ConfigError, match="Invalid site configuration"):
            load_site(path)

    def test_auto_search_returns_none(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        isolated = tmp_path / "isolated"
        isolated.mkdir()
        monkeypatch.chdir(isolated)
        with pytest.raises(ConfigError, match=r"No papers\.yml found"):
            load_site(None)


class TestOpenSite:
    """Tests for open_site() path resolution."""

    def test_paths_relative_to_catalog(self, site_config: Path, site_dir: Path):
        config = open_site(site_config)
        assert config.root == site_dir.resolve()
        assert config.docs_dir == site_dir.resolve() / "docs"
        assert config.output_dir == site_dir.resolve() / "out" / "papers"

    def test_source_and_target(self, site_config: Path, site_dir: Path):
        config = open_site(site_config)
        paper = config.site.papers[0]
        assert config.source(paper) == site_dir.resolve() / "docs" / "01_Alpha.md"
        assert config.target(paper).name == "01_Alpha.html"

    def test_found_from_subdirectory(
        self, site_config: Path, site_dir: Path, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.chdir(site_dir / "docs")
        config = open_site()
        assert config.path == site_config.resolve()
        assert config.site.name == "Test Foundation"

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            open_site(tmp_path / "papers.yml")


class TestFindSiteFile:
    """Tests for find_site_file()."""

    def test_find_in_current_dir(self, tmp_path: Path):
        (tmp_path / "papers.yml").write_text("name: test\n")
        result = find_site_file(tmp_path)
        assert result is not None
        assert result.name == "papers.yml"

    def test_find_in_parent_dir(self, tmp_path: Path):
        (tmp_path / "papers.yml").write_text("name: test\n")
        subdir = tmp_path / "docs" / "papers"
        subdir.mkdir(parents=True)
        result = find_site_file(subdir)
        assert result is not None
        assert result.parent == tmp_path

    def test_not_found_returns_none(self, tmp_path: Path):
        subdir = tmp_path / "deep" / "nested"
        subdir.mkdir(parents=True)
        assert find_site_file(subdir) is None


class TestCheckConfig:
    """Tests for check_config()."""

    def test_missing_source_is_a_warning(self, site_config: Path):
        result = check_config(site_config)
        assert result.valid is True
        assert any("03_Missing.md" in w for w in result.warnings)

    def test_missing_docs_dir_warning(self, flat_papers_yml: Path):
        result = check_config(flat_papers_yml)
        assert result.valid is True
        assert any("Docs directory does not exist" in w for w in result.warnings)

    def test_no_papers_warning(self, minimal_papers_yml: Path):
        result = check_config(minimal_papers_yml)
        assert any("No papers defined" in w for w in result.warnings)

    def test_duplicate_files_error(self, tmp_path: Path):
        path = tmp_path / "papers.yml"
        path.write_text(textwrap.dedent("""\
            name: dupes
            papers:
              - {file: a.md, title: A}
              - {file: a.md, title: A again}
        """))
        result = check_config(path)
        assert result.valid is False
        assert any("Duplicate paper files: a.md" in e for e in result.errors)

    def test_output_clash_error(self, tmp_path: Path):
        path = tmp_path / "papers.yml"
        path.write_text(textwrap.dedent("""\
            name: clash
            papers:
              - {file: a.md, title: A}
              - {file: sub/a.md, title: Also A}
        """))
        result = check_config(path)
        assert result.valid is False
        assert any("a.html" in e for e in result.errors)

    def test_invalid_config_error(self, tmp_path: Path):
        path = tmp_path / "papers.yml"
        path.write_text("- a list\n")
        result = check_config(path)
        assert result.valid is False
        assert result.to_dict()["paper_count"] == 0


class TestWriteDefaultConfig:
    def test_writes_bundled_file(self, tmp_path: Path):
        dest = write_default_config(tmp_path)
        assert dest == tmp_path / "papers.yml"
        assert dest.read_text(encoding="utf-8") == DEFAULT_CONFIG_PATH.read_text(encoding="utf-8")

    def test_refuses_to_overwrite(self, tmp_path: Path):
        (tmp_path / "papers.yml").write_text("name: mine\n")
        with pytest.raises(FileExistsError):
            write_default_config(tmp_path)
        assert (tmp_path / "papers.yml").read_text() == "name: mine\n"

    def test_force_overwrites(self, tmp_path: Path):
        (tmp_path / "papers.yml").write_text("name: mine\n")
        write_default_config(tmp_path, force=True)
        assert "LogLine" in (tmp_path / "papers.yml").read_text(encoding="utf-8")
