"""
Config check use case — validate papers.yml and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from paperpress.core.config.loader import ConfigError, open_site
from paperpress.core.models.site import Site


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    site: Site | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "site_name": self.site.name if self.site else None,
            "paper_count": len(self.site.papers) if self.site else 0,
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate the site configuration and report issues.

    Errors make the config unusable; warnings point at papers that
    would fail to build.
    """
    result = ConfigCheckResult(config_path=config_path)
    try:
        config = open_site(config_path)
    except ConfigError as e:
        result.errors.append(str(e))
        return result
    site = result.site = config.site
    result.config_path = config.path

    if not site.papers:
        result.warnings.append("No papers defined. There is nothing to build.")

    files = [p.file for p in site.papers]
    dupes = {f for f in files if files.count(f) > 1}
    if dupes:
        result.errors.append(f"Duplicate paper files: {', '.join(sorted(dupes))}")

    outputs = [p.output_name for p in site.papers]
    clashes = {o for o in outputs if outputs.count(o) > 1} - {
        p.output_name for p in site.papers if p.file in dupes
    }
    if clashes:
        result.errors.append(f"Papers share an output page: {', '.join(sorted(clashes))}")

    if not config.docs_dir.is_dir():
        result.warnings.append(f"Docs directory does not exist: {site.docs_dir}")
    else:
        for paper in site.papers:
            if not config.source(paper).is_file():
                result.warnings.append(f"Paper source not found: {paper.file}")

    result.valid = len(result.errors) == 0
    return result
