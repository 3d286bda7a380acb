"""
=============================================================================
MARKDOWN TO HTML CONVERTER
=============================================================================

A small, deterministic Markdown renderer for the lesson files.

This is NOT CommonMark. It recognises exactly the constructs the lessons
use, in a fixed pipeline of passes over the whole text:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        RENDER PIPELINE                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   markdown                                                           │
    │      │                                                               │
    │      ├──► 1. headers       # .. ####        → <h1> .. <h4>           │
    │      ├──► 2. code blocks   ```lang ... ```  → <div class=code-example>│
    │      ├──► 3. inline code   `x`              → <code>x</code>         │
    │      ├──► 4. bold          **x**            → <strong>x</strong>     │
    │      ├──► 5. lists         - x / 1. x       → <ul><li>x</li></ul>    │
    │      ├──► 6. links         [t](u)           → <a href="u">t</a>      │
    │      └──► 7. tables        | a | b |        → <table class=...>      │
    │                                                                      │
    │   html                                                               │
    └─────────────────────────────────────────────────────────────────────┘

The order matters and is part of the output format:

- Headers run FIRST, so a "# comment" line inside a fenced code block is
  turned into an <h1> too.
- Code blocks run before bold, so "**" inside code still becomes
  <strong>. Code content is NOT HTML-escaped.
- Tables run LAST, so bold inside a cell was already converted by pass 4
  (the cell pass converts any "**" that is left).

Each scanning pass resumes AFTER the HTML it just inserted, so a pass
never re-reads its own output.

=============================================================================
KNOWN LIMITATIONS
=============================================================================

- Ordered and unordered lists both become <ul>.
- Two lists separated only by blank lines merge into one <ul>.
- No <th>: the header row of a table is an ordinary <tr>.
- Unterminated ``` / ` / ** leave the rest of the text unchanged.

=============================================================================
"""

import re
from typing import FrozenSet, List


# ─────────────────────────────────────────────────────────────────────────────
# HEADERS
# ─────────────────────────────────────────────────────────────────────────────
# One pattern per level. "^#[ \t]+" cannot match "## Title" because the
# second character must be a space or tab, so the passes don't overlap.
# A trailing \r (CRLF files) is dropped, never captured.

_HEADER_PATTERNS = [
    (level, re.compile(rf"^{'#' * level}[ \t]+([^\r\n]+)\r?$", re.MULTILINE))
    for level in range(1, 5)
]


def render_headers(text: str) -> str:
    """Convert "# .." through "#### .." lines to <h1> .. <h4>."""
    for level, pattern in _HEADER_PATTERNS:
        text = pattern.sub(rf"<h{level}>\1</h{level}>", text)
    return text


# ─────────────────────────────────────────────────────────────────────────────
# CODE BLOCKS AND INLINE CODE
# ─────────────────────────────────────────────────────────────────────────────

LANGUAGE_CLASSES = {
    "cpp": "cpp",
    "c++": "cpp",
    "c": "c",
    "python": "python",
    "py": "python",
    "javascript": "javascript",
    "js": "javascript",
    "json": "json",
    "bash": "bash",
    "sh": "bash",
    "shell": "bash",
    "html": "html",
    "css": "css",
    "http": "http",
    "sql": "sql",
    "yaml": "yaml",
    "dockerfile": "dockerfile",
}

FENCE = "```"


def _code_block_html(language: str, code: str) -> str:
    lang = LANGUAGE_CLASSES.get(language.lower())
    if lang:
        open_tag = f'<code class="language-{lang}">'
    else:
        open_tag = "<code>"
    return f'<div class="code-example"><pre>{open_tag}{code}</code></pre></div>'


def render_code_blocks(text: str) -> str:
    """
    Convert fenced code blocks.

        ```cpp                    <div class="code-example"><pre>
        int main() {}       →     <code class="language-cpp">int main() {}
        ```                       </code></pre></div>

    The language hint is whatever follows the opening fence on the same
    line. If the closing fence comes before any newline, the whole body is
    code and there is no hint. Code is trimmed of surrounding whitespace.
    """
    out: List[str] = []
    pos = 0

    while True:
        start = text.find(FENCE, pos)
        if start == -1:
            break

        end = text.find(FENCE, start + len(FENCE))
        if end == -1:
            break  # Unterminated fence: leave the rest alone

        body = text[start + len(FENCE):end]
        newline = body.find("\n")
        if newline != -1:
            language = body[:newline].strip()
            code = body[newline + 1:]
        else:
            language = ""
            code = body

        out.append(text[pos:start])
        out.append(_code_block_html(language, code.strip(" \t\r\n")))
        pos = end + len(FENCE)

    out.append(text[pos:])
    return "".join(out)


def render_inline_code(text: str) -> str:
    """
    Convert `code` spans.

    A backtick directly after "</code>" is left alone. An unpaired backtick
    ends the pass.
    """
    out: List[str] = []
    pos = 0
    search_from = 0

    while True:
        start = text.find("`", search_from)
        if start == -1:
            break

        if text.endswith("</code>", 0, start):
            search_from = start + 1
            continue

        end = text.find("`", start + 1)
        if end == -1:
            break

        out.append(text[pos:start])
        out.append(f"<code>{text[start + 1:end]}</code>")
        pos = search_from = end + 1

    out.append(text[pos:])
    return "".join(out)


# ─────────────────────────────────────────────────────────────────────────────
# BOLD
# ─────────────────────────────────────────────────────────────────────────────

def render_bold(text: str) -> str:
    """Convert **text** to <strong>text</strong>, left to right."""
    out: List[str] = []
    pos = 0

    while True:
        start = text.find("**", pos)
        if start == -1:
            break

        end = text.find("**", start + 2)
        if end == -1:
            break

        out.append(text[pos:start])
        out.append(f"<strong>{text[start + 2:end]}</strong>")
        pos = end + 2

    out.append(text[pos:])
    return "".join(out)


# ─────────────────────────────────────────────────────────────────────────────
# LISTS
# ─────────────────────────────────────────────────────────────────────────────

_UNORDERED_ITEM = re.compile(r"^-[ \t]+([^\r\n]+)\r?$", re.MULTILINE)
_ORDERED_ITEM = re.compile(r"^\d+\.[ \t]+([^\r\n]+)\r?$", re.MULTILINE)

# A run of <li> elements with any whitespace (blank lines too) between them
_ITEM_RUN = re.compile(r"(?:<li>.*?</li>\s*)+")


def render_lists(text: str) -> str:
    """
    Convert "- item" and "1. item" lines and wrap each run in <ul>.

    The whitespace after the last item of a run (including its newline)
    ends up inside the </ul>.
    """
    text = _UNORDERED_ITEM.sub(r"<li>\1</li>", text)
    text = _ORDERED_ITEM.sub(r"<li>\1</li>", text)
    return _ITEM_RUN.sub(lambda m: f"<ul>{m.group(0)}</ul>", text)


# ─────────────────────────────────────────────────────────────────────────────
# LINKS
# ─────────────────────────────────────────────────────────────────────────────

_LINK = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")


def render_links(text: str) -> str:
    return _LINK.sub(r'<a href="\2">\1</a>', text)


# ─────────────────────────────────────────────────────────────────────────────
# TABLES
# ─────────────────────────────────────────────────────────────────────────────

TABLE_OPEN = '<div class="table-container"><table class="course-table">'
TABLE_CLOSE = "</table></div>"

_SEPARATOR_CHARS = frozenset("|- ")


def _is_table_row(line: str) -> bool:
    line = line.rstrip()
    return len(line) > 0 and line.startswith("|") and line.endswith("|")


def _is_separator(line: str) -> bool:
    line = line.rstrip()
    return "-" in line and set(line) <= _SEPARATOR_CHARS


def _table_row_html(line: str) -> str:
    cells = line.rstrip().split("|")[1:-1]
    return "<tr>" + "".join(
        f"<td>{render_bold(cell.strip())}</td>" for cell in cells
    ) + "</tr>"


def render_tables(text: str) -> str:
    """
    Convert runs of "| .. |" lines to a table.

        | Name | Port |               <div class="table-container">
        |------|------|        →      <table class="course-table">
        | http | 80   |               <tr><td>Name</td><td>Port</td></tr>
                                      <tr><td>http</td><td>80</td></tr>
                                      </table></div>

    The separator line is only recognised directly after the first row.
    A whole table is emitted as one line; everything else keeps its
    original lines.
    """
    lines = text.split("\n")
    trailing_newline = text.endswith("\n")
    if trailing_newline:
        lines.pop()

    out: List[str] = []
    i = 0
    while i < len(lines):
        if not _is_table_row(lines[i]):
            out.append(lines[i])
            i += 1
            continue

        rows = [_table_row_html(lines[i])]
        i += 1

        if i < len(lines) and _is_separator(lines[i]):
            i += 1  # header separator

        while i < len(lines) and _is_table_row(lines[i]):
            rows.append(_table_row_html(lines[i]))
            i += 1

        out.append(TABLE_OPEN + "".join(rows) + TABLE_CLOSE)

    result = "\n".join(out)
    if trailing_newline:
        result += "\n"
    return result


# =============================================================================
# PUBLIC API
# =============================================================================

def render(markdown: str) -> str:
    """
    Render lesson Markdown to an HTML fragment.

    Deterministic and total: any string renders, nothing raises.

    Example:
        >>> render("# Intro\\nHello **world**")
        '<h1>Intro</h1>\\nHello <strong>world</strong>'
    """
    html = render_headers(markdown)
    html = render_code_blocks(html)
    html = render_inline_code(html)
    html = render_bold(html)
    html = render_lists(html)
    html = render_links(html)
    html = render_tables(html)
    return html


_TITLE = re.compile(r"^#[ \t]+(.+)$", re.MULTILINE)
_TAG = re.compile(r"#(\w+)")

DEFAULT_TITLE = "Untitled Lesson"


def extract_title(markdown: str) -> str:
    """Text of the first level-1 heading, or "Untitled Lesson"."""
    match = _TITLE.search(markdown)
    return match.group(1).strip() if match else DEFAULT_TITLE


def extract_tags(markdown: str) -> FrozenSet[str]:
    """
    Every "#word" token in the raw text.

    Headings count too: "## Sockets" doesn't yield a tag (the "#" is
    followed by "#" or a space) but "#sockets" anywhere does.
    """
    return frozenset(_TAG.findall(markdown))
