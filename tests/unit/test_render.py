"""Unit tests for reply rendering."""

import pytest

from gemchat.ui.render import markdown_to_html, user_text_to_html


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("**bold**", "<strong>bold</strong>"),
        ("*soft*", "<em>soft</em>"),
        ("a <b> tag", "a &lt;b&gt; tag"),
        ("line1\nline2", "line1<br>line2"),
    ],
)
def test_inline_markdown(source: str, expected: str) -> None:
    assert markdown_to_html(source) == expected


def test_code_block_content_is_not_formatted() -> None:
    html = markdown_to_html("```python\nx = **y**\n```")

    assert "<pre" in html
    assert "x = **y**" in html
    assert "<strong>" not in html


def test_lists_are_wrapped() -> None:
    html = markdown_to_html("- one\n- two\n1. first")

    assert html.count("<ul") == 1
    assert html.count("<ol") == 1
    assert "<li>one</li>" in html and "<li>first</li>" in html


def test_only_http_links_are_rendered() -> None:
    assert 'href="https://example.com"' in markdown_to_html("[x](https://example.com)")
    assert "href" not in markdown_to_html("[x](javascript:alert(1))")


def test_user_text_is_escaped() -> None:
    assert user_text_to_html("<i>hi</i>\nthere") == "&lt;i&gt;hi&lt;/i&gt;<br>there"
