"""Markdown-to-HTML conversion for model replies."""

import html
import re

_CODE_BLOCK = re.compile(r"```(\w*)\n?([\s\S]*?)```")
_INLINE_RULES: list[tuple[re.Pattern[str], str]] = [
    (
        re.compile(r"`([^`]+)`"),
        r'<code class="bg-gray-200 text-pink-600 px-1.5 py-0.5 rounded text-xs">\1</code>',
    ),
    (re.compile(r"\*\*(.+?)\*\*"), r"<strong>\1</strong>"),
    (re.compile(r"\*([^*]+)\*"), r"<em>\1</em>"),
    (
        re.compile(r"\[([^\]]+)\]\((https?://[^)\s]+)\)"),
        r'<a href="\2" class="text-blue-600 underline" target="_blank">\1</a>',
    ),
]
_LIST_KINDS = {
    "ul": (re.compile(r"^[-*]\s+"), "list-disc"),
    "ol": (re.compile(r"^\d+\.\s+"), "list-decimal"),
}


def _wrap_lists(lines: list[str]) -> list[str]:
    out: list[str] = []
    open_tag: str | None = None
    for line in lines:
        stripped = line.strip()
        kind = next((k for k, (pat, _) in _LIST_KINDS.items() if pat.match(stripped)), None)
        if kind != open_tag and open_tag is not None:
            out.append(f"</{open_tag}>")
            open_tag = None
        if kind is None:
            out.append(line)
            continue
        if open_tag is None:
            out.append(f'<{kind} class="{_LIST_KINDS[kind][1]} list-inside my-2 space-y-1">')
            open_tag = kind
        out.append(f"<li>{_LIST_KINDS[kind][0].sub('', stripped)}</li>")
    if open_tag is not None:
        out.append(f"</{open_tag}>")
    return out


def markdown_to_html(text: str) -> str:
    """Convert markdown to HTML for chat display.

    Supports: bold, italic, inline code, code blocks, http(s) links, lists.
    Input is HTML-escaped first, so raw markup in replies is shown as text.
    """
    text = html.escape(text, quote=False)

    blocks: list[str] = []

    def stash(match: re.Match[str]) -> str:
        blocks.append(
            '<pre class="bg-gray-800 text-gray-100 rounded-lg p-3 my-2 '
            f'overflow-x-auto text-xs"><code>{match.group(2)}</code></pre>'
        )
        return f"\x00{len(blocks) - 1}\x00"

    text = _CODE_BLOCK.sub(stash, text)
    for pattern, replacement in _INLINE_RULES:
        text = pattern.sub(replacement, text)

    text = "<br>".join(_wrap_lists(text.split("\n")))
    return re.sub(r"\x00(\d+)\x00", lambda m: blocks[int(m.group(1))], text)


def user_text_to_html(text: str) -> str:
    """Escape user text and keep its line breaks."""
    return html.escape(text, quote=False).replace("\n", "<br>")
