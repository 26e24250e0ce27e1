"""
Markdown → HTML fragment — the ordered rewrite pipeline.

``render_markdown()`` runs a fixed sequence of text-level rewrites:

    strip front-matter
    protect fenced code  ──┐  code content is swapped out for placeholders
    headers                │
    horizontal rules       │
    blockquotes            │  none of these stages can see code content
    tables                 │
    unordered lists        │
    emphasis               │
    inline code            │
    links                  │
    paragraphs           ──┘  code is restored block by block

Order matters: later patterns would otherwise match the output of earlier
ones (``* item`` vs ``*italic*``, ``---`` rules vs front-matter, …).

This is a best-effort converter for small, known-shape documents.
Nothing raises; unrecognised syntax is emitted as literal text.
"""

from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass, field

from paperpress.core.services.frontmatter import strip_frontmatter

logger = logging.getLogger(__name__)


# ── Fenced Code Protection ──────────────────────────────────────────

# Opening fence may carry a language tag (discarded). An unterminated
# fence runs to the end of the document.
_FENCE_RE = re.compile(r"```([^\n]*)\n(.*?)(?:```|\Z)", re.DOTALL)

# NUL never appears in a text document, so tokens cannot collide.
_PLACEHOLDER = "\x00CODEBLOCK_{index}\x00"


@dataclass
class CodeVault:
    """Ordered (placeholder → HTML) pairs for protected code blocks."""

    blocks: list[tuple[str, str]] = field(default_factory=list)

    def stash(self, rendered: str) -> str:
        token = _PLACEHOLDER.format(index=len(self.blocks))
        self.blocks.append((token, rendered))
        return token

    def restore(self, text: str) -> str:
        for token, rendered in self.blocks:
            text = text.replace(token, rendered, 1)
        return text


def protect_code_blocks(text: str, vault: CodeVault) -> str:
    """Swap fenced code blocks for placeholders, storing escaped HTML.

    Each placeholder is padded with blank lines so the restored
    ``<pre>`` always forms a block of its own during paragraph
    wrapping (no ``<br>`` is ever injected into code).
    """

    def _replace(m: re.Match) -> str:
        code = html.escape(m.group(2), quote=False).strip()
        token = vault.stash(f"<pre><code>{code}</code></pre>")
        return f"\n\n{token}\n\n"

    return _FENCE_RE.sub(_replace, text)


# ── Headers / Rules ─────────────────────────────────────────────────

# 1–4 hashes then whitespace; five or more hashes never match because
# the run must be followed by a blank. An optional closing run of
# hashes is dropped.
_HEADER_RE = re.compile(
    r"^(#{1,4})[ \t]+(.*?)(?:[ \t]+#+)?[ \t]*$",
    re.MULTILINE,
)

_HR_RE = re.compile(r"^---[ \t]*$", re.MULTILINE)


def convert_headers(text: str) -> str:
    def _replace(m: re.Match) -> str:
        level = len(m.group(1))
        return f"<h{level}>{m.group(2).strip()}</h{level}>"

    return _HEADER_RE.sub(_replace, text)


def convert_rules(text: str) -> str:
    return _HR_RE.sub("<hr>", text)


# ── Blockquotes ─────────────────────────────────────────────────────


def convert_blockquotes(text: str) -> str:
    """Merge each run of ``> `` lines into one ``<blockquote>``.

    Quoted lines are joined with a single space, so a multi-line quote
    becomes one run of text.
    """
    out: list[str] = []
    quote: list[str] = []

    def _flush() -> None:
        if quote:
            out.append("<blockquote>" + " ".join(quote) + "</blockquote>")
            quote.clear()

    for line in text.split("\n"):
        if line.startswith("> "):
            quote.append(line[2:])
            continue
        _flush()
        out.append(line)
    _flush()

    return "\n".join(out)


# ── Tables ──────────────────────────────────────────────────────────

_TABLE_RE = re.compile(
    r"^(\|.+\|)[ \t]*\n"                    # header row
    r"\|[-:| \t]*-[-:| \t]*\|[ \t]*\n"      # separator row
    r"((?:\|.+\|[ \t]*(?:\n|$))+)",         # one or more data rows
    re.MULTILINE,
)


def split_cells(row: str) -> list[str]:
    """Split a ``| a | b |`` row into trimmed cells.

    Only the cells created by the outer pipes are dropped; an empty
    cell in the middle of a row is kept.
    """
    row = row.strip()
    if row.startswith("|"):
        row = row[1:]
    if row.endswith("|"):
        row = row[:-1]
    return [cell.strip() for cell in row.split("|")]


def convert_tables(text: str) -> str:
    def _replace(m: re.Match) -> str:
        header = "".join(f"<th>{c}</th>" for c in split_cells(m.group(1)))
        rows = [
            "<tr>" + "".join(f"<td>{c}</td>" for c in split_cells(line)) + "</tr>"
            for line in m.group(2).strip().split("\n")
        ]
        body = "\n".join(rows)
        trailer = "\n" if m.group(0).endswith("\n") else ""
        return (
            f"<table>\n<thead>\n<tr>{header}</tr>\n</thead>\n"
            f"<tbody>\n{body}\n</tbody>\n</table>{trailer}"
        )

    return _TABLE_RE.sub(_replace, text)


# ── Lists ───────────────────────────────────────────────────────────

_LIST_ITEM_RE = re.compile(r"^[-*] (.+)$", re.MULTILINE)
_LIST_RUN_RE = re.compile(r"^((?:<li>.*</li>\n?)+)", re.MULTILINE)


def convert_lists(text: str) -> str:
    """``- x`` / ``* x`` lines → ``<li>``; consecutive items share one ``<ul>``."""
    text = _LIST_ITEM_RE.sub(r"<li>\1</li>", text)

    def _wrap(m: re.Match) -> str:
        items = m.group(1)
        if not items.endswith("\n"):
            items += "\n"
        return f"<ul>\n{items}</ul>\n"

    return _LIST_RUN_RE.sub(_wrap, text)


# ── Inline Markup ───────────────────────────────────────────────────

# Highest marker count first so "***" is not read as "**" + "*".
_EMPHASIS = (
    (re.compile(r"\*\*\*(.+?)\*\*\*"), r"<strong><em>\1</em></strong>"),
    (re.compile(r"\*\*(.+?)\*\*"), r"<strong>\1</strong>"),
    (re.compile(r"\*(.+?)\*"), r"<em>\1</em>"),
)

_INLINE_CODE_RE = re.compile(r"`([^`]+)`")

_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")


def convert_emphasis(text: str) -> str:
    for pattern, replacement in _EMPHASIS:
        text = pattern.sub(replacement, text)
    return text


def convert_inline_code(text: str) -> str:
    return _INLINE_CODE_RE.sub(r"<code>\1</code>", text)


def convert_links(text: str) -> str:
    return _LINK_RE.sub(r'<a href="\2">\1</a>', text)


# ── Paragraphs ──────────────────────────────────────────────────────

_BLANK_LINE_RE = re.compile(r"\n[ \t]*\n")

_BLOCK_TAG_RE = re.compile(r"^<(h[1-6]|blockquote|ul|ol|pre|hr|table|div)")


def wrap_paragraphs(text: str, vault: CodeVault | None = None) -> str:
    """Wrap blank-line separated blocks in ``<p>``, leaving block tags alone.

    Blocks are split while code is still behind its placeholders and
    restored one block at a time, so blank lines inside code never
    split it and prose mentioning ``<pre>`` is never mistaken for code.
    """
    out: list[str] = []
    for block in _BLANK_LINE_RE.split(text):
        block = block.strip()
        if not block:
            continue
        if vault is not None:
            block = vault.restore(block)
        if _BLOCK_TAG_RE.match(block):
            out.append(block)
        else:
            out.append("<p>" + block.replace("\n", "<br>") + "</p>")
    return "\n\n".join(out)


# ── Pipeline ────────────────────────────────────────────────────────


def render_markdown(text: str) -> str:
    """Render a paper's markdown to an HTML fragment.

    Front-matter, if present, is stripped first. Fenced code content
    is escaped (``&``, ``<``, ``>`` only) and never sees the inline
    rewrites.
    """
    vault = CodeVault()

    out = strip_frontmatter(text)
    out = protect_code_blocks(out, vault)
    out = convert_headers(out)
    out = convert_rules(out)
    out = convert_blockquotes(out)
    out = convert_tables(out)
    out = convert_lists(out)
    out = convert_emphasis(out)
    out = convert_inline_code(out)
    out = convert_links(out)
    out = wrap_paragraphs(out, vault)

    logger.debug(
        "Rendered %d chars of markdown (%d code blocks) → %d chars of HTML",
        len(text), len(vault.blocks), len(out),
    )
    return out
