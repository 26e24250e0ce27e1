"""
paperpress — CLI entrypoint.

Usage:
    python -m paperpress.main --help
    python -m paperpress.main build
    python -m paperpress.main config check
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from paperpress import __version__
from paperpress.core.observability.logging_config import resolve_level, setup_from_env


@click.group()
@click.version_option(version=__version__, prog_name="paperpress")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to papers.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """paperpress — build standalone HTML pages from markdown papers."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_from_env(resolve_level(debug=debug, verbose=verbose, quiet=quiet), debug=debug)


# ── Building ────────────────────────────────────────────────────


@cli.command()
@click.option("--only", "only", multiple=True, help="Build only this markdown file (repeatable).")
@click.option("--jobs", "-j", default=1, type=click.IntRange(min=1), help="Papers to build in parallel.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def build(ctx: click.Context, only: tuple[str, ...], jobs: int, as_json: bool) -> None:
    """Build HTML pages for the papers in papers.yml.

    Examples:

        paperpress build

        paperpress build --only 04_III_LLLV.md --jobs 4
    """
    from paperpress.core.use_cases.build import build_site

    quiet = ctx.obj.get("quiet", False)
    if not as_json and not quiet:
        click.echo("Building papers from markdown...\n")

    result = build_site(
        config_path=ctx.obj.get("config_path"),
        only=list(only) if only else None,
        jobs=jobs,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error or result.failed:
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    for page in result.pages:
        if page.ok:
            if not quiet:
                click.secho("✓ ", fg="green", nl=False)
                click.echo(f"Built {page.file} -> {page.output}")
        else:
            click.secho("✗ ", fg="red", nl=False, err=True)
            click.echo(f"Error building {page.file}: {page.error}", err=True)

    status_color = "green" if result.failed == 0 else "yellow" if result.built else "red"
    click.echo()
    click.secho(
        f"Build complete: {result.built} papers built, {result.failed} errors",
        fg=status_color,
        bold=True,
    )

    if result.failed:
        sys.exit(1)


@cli.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_papers(ctx: click.Context, as_json: bool) -> None:
    """List the papers declared in papers.yml."""
    from paperpress.core.config.loader import ConfigError, load_site

    try:
        site = load_site(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps([p.model_dump() for p in site.papers], indent=2))
        return

    if not site.papers:
        click.secho("No papers configured.", fg="yellow")
        return

    click.secho(f"📄 {site.name} — {len(site.papers)} papers", fg="cyan", bold=True)
    for paper in site.papers:
        number = f"[{paper.number}] " if paper.number else ""
        click.echo(f"   • {number}{paper.title}  → {paper.file}")
        if ctx.obj.get("verbose") and paper.description:
            click.echo(f"     {paper.description}")
    click.echo()


# ── Single documents ────────────────────────────────────────────


def _read_source(path: str | None) -> str:
    if not path:
        return click.get_text_stream("stdin").read()
    try:
        return Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError:
        click.secho(f"❌ {path} is not valid UTF-8 text", fg="red")
    except OSError as e:
        click.secho(f"❌ Cannot read {path}: {e}", fg="red")
    sys.exit(1)


@cli.command()
@click.argument("path", required=False, type=click.Path(exists=True, dir_okay=False))
def render(path: str | None) -> None:
    """Render one markdown file (or stdin) to an HTML fragment."""
    from paperpress.core.services.md_transforms import render_markdown

    output = render_markdown(_read_source(path))
    click.echo(output)


@cli.command()
@click.argument("path", required=False, type=click.Path(exists=True, dir_okay=False))
def meta(path: str | None) -> None:
    """Print a markdown file's front-matter as JSON."""
    from paperpress.core.services.frontmatter import extract_metadata

    click.echo(json.dumps(extract_metadata(_read_source(path)), indent=2, ensure_ascii=False))


# ── Configuration ───────────────────────────────────────────────


@cli.command()
@click.option("--force", is_flag=True, help="Overwrite an existing papers.yml.")
@click.argument("directory", required=False, type=click.Path(file_okay=False), default=".")
def init(directory: str, force: bool) -> None:
    """Write the bundled default papers.yml into DIRECTORY."""
    from paperpress.core.data import write_default_config

    try:
        dest = write_default_config(Path(directory), force=force)
    except (FileExistsError, OSError) as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    click.secho(f"✅ Created {dest}", fg="green", bold=True)


@cli.group()
def config() -> None:
    """Site configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate papers.yml configuration."""
    from paperpress.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        assert result.site is not None  # guaranteed when valid
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        click.echo(f"   Site: {result.site.name}")
        click.echo(f"   Papers: {len(result.site.papers)}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        click.echo()
        sys.exit(1)

    click.echo()


if __name__ == "__main__":
    cli()
