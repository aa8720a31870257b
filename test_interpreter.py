"""
Tests for the HTML block interpreter: sniffer, extractors, normalizer,
assembler and the interpreter that wires them together.
"""

import json
import sys
import time

import pytest

from markdown_render import patterns
from markdown_render.logger import setup_logger
from markdown_render.sniffer import TagCategory, sniff
from markdown_render.extractor import Extractor, extract
from markdown_render.normalizer import normalize_text, flatten_newlines
from markdown_render.interpreter import HTMLBlockInterpreter, interpret_html
from markdown_render.schemas import (
    Alignment, Blockquote, BulletedList, CodeBlock, HTMLBlock, Heading,
    ListItem, NumberedList, Paragraph, Table, TaskList, TaskListItem, Text,
    ThematicBreak, render_plain_text,
)


WELL_FORMED_TABLE = """
<table>
  <thead>
    <tr><th>Name</th><th>Score</th></tr>
  </thead>
  <tbody>
    <tr><td>Alice</td><td>10</td></tr>
    <tr><td>Bob</td><td>7</td></tr>
  </tbody>
</table>
"""


@pytest.fixture
def extractor() -> Extractor:
    return Extractor()


@pytest.fixture
def fresh_patterns():
    """Rebuild matchers around a test that changes the pattern sources."""
    patterns.get_patterns.cache_clear()
    yield
    patterns.get_patterns.cache_clear()


def cell_texts(table: Table) -> list[list[str]]:
    return [[render_plain_text(cell.content) for cell in row.cells] for row in table.rows]


def paragraph_text(block) -> str:
    assert isinstance(block, Paragraph)
    return render_plain_text(block.content)


# --- Sniffer ---

@pytest.mark.parametrize("html, expected", [
    ("<table><tr><td>x</td></tr></table>", TagCategory.TABLE),
    ("<ul><li>x</li></ul>", TagCategory.LIST),
    ("<OL><LI>x</LI></OL>", TagCategory.LIST),
    ("<h4>Title</h4>", TagCategory.HEADING),
    ("<pre>text</pre>", TagCategory.CODE),
    ("<code>x</code>", TagCategory.CODE),
    ("<BlockQuote>q</BlockQuote>", TagCategory.BLOCKQUOTE),
    ("<div>hi</div>", TagCategory.UNKNOWN),
    ("<h0>Title</h0>", TagCategory.UNKNOWN),
    ("", TagCategory.UNKNOWN),
])
def test_sniff_categories(html, expected):
    assert sniff(html) == expected


def test_sniff_table_wins_over_list():
    html = "<ul><li>first</li></ul><table><tr><td>x</td></tr></table>"
    assert sniff(html) == TagCategory.TABLE


def test_sniff_precedence_order():
    assert sniff("<blockquote><h2>Quoted</h2></blockquote>") == TagCategory.HEADING
    assert sniff("<h1>Title</h1><pre><code>x</code></pre>") == TagCategory.HEADING
    assert sniff("<blockquote><code>x</code></blockquote>") == TagCategory.CODE


# --- Normalizer ---

def test_normalize_text_strips_tags_and_collapses_whitespace():
    assert normalize_text("  <b>Hello</b>\n\t <i>world</i>  ") == "Hello world"


def test_flatten_newlines_handles_all_line_endings():
    assert flatten_newlines("a\r\nb\rc\nd") == "a b c d"


# --- Table extraction ---

def test_well_formed_table(extractor):
    data = extractor.extract_table(WELL_FORMED_TABLE)

    assert data.alignments == [Alignment.NONE, Alignment.NONE]
    assert data.rows == [["Name", "Score"], ["Alice", "10"], ["Bob", "7"]]


def test_table_without_header_keeps_body_rows(extractor):
    html = "<table><tbody><tr><td>a</td><td>b</td><td>c</td></tr></tbody></table>"
    data = extractor.extract_table(html)

    assert data.alignments == [Alignment.NONE]
    assert data.rows == [["a", "b", "c"]]


def test_table_cells_keep_inner_tags(extractor):
    html = "<table><tbody><tr><td>  <b>bold</b> text </td></tr></tbody></table>"
    assert extractor.extract_table(html).rows == [["<b>bold</b> text"]]


def test_table_with_only_header(extractor):
    html = "<TABLE><THEAD><TR><TH>A</TH><TH>B</TH><TH>C</TH></TR></THEAD></TABLE>"
    data = extractor.extract_table(html)

    assert len(data.alignments) == 3
    assert data.rows == [["A", "B", "C"]]


@pytest.mark.parametrize("html", [
    "<table",
    "<table></table>",
    "<table><tr><td>no sections</td></tr></table>",
    "<table><thead><tr><th>unclosed",
    "<table><tbody><tr><td>x</td></tbody>",
])
def test_table_extraction_never_fails(extractor, html):
    data = extractor.extract_table(html)
    assert len(data.alignments) >= 1


# --- List extraction ---

def test_nested_list_is_dropped(extractor):
    data = extractor.extract_list("<ul><li>A</li><li><ul><li>Nested</li></ul>B</li></ul>")

    assert data.ordered is False
    assert data.items == ["A", "B"]


def test_deeply_nested_lists_are_dropped(extractor):
    html = "<ul><li>a<ul><li>b<ol><li>c</li></ol></li></ul></li><li>d</li></ul>"
    assert extractor.extract_list(html).items == ["a", "d"]


def test_ordered_list_with_start(extractor):
    data = extractor.extract_list('<OL start="3">\n<LI>One</LI>\n<LI>Two</LI>\n</OL>')

    assert data.ordered is True
    assert data.start == 3
    assert data.items == ["One", "Two"]


def test_list_items_are_plain_text(extractor):
    html = "<ul>\n  <li><a href='/x'>Link</a>   and\n <em>more</em></li>\n</ul>"
    assert extractor.extract_list(html).items == ["Link and more"]


def test_unclosed_list_still_yields_items(extractor):
    assert extractor.extract_list("<ul><li>one</li><li>two</li>").items == ["one", "two"]


def test_sibling_lists_contribute_all_items(extractor):
    data = extractor.extract_list("<ul><li>A</li></ul><ol><li>B</li></ol>")

    assert data.ordered is True
    assert data.items == ["A", "B"]


def test_start_comes_from_first_ordered_list(extractor):
    data = extractor.extract_list(
        "<ul><li>A</li></ul><ol start=5><li>B</li></ol><ol start='9'><li>C</li></ol>"
    )

    assert data.start == 5
    assert data.items == ["A", "B", "C"]


def test_sibling_lists_keep_dropping_nested_content(extractor):
    html = "<ol><li>a<ul><li>x</li></ul></li></ol><ul><li>b<ol><li>y</li></ol></li></ul>"
    assert extractor.extract_list(html).items == ["a", "b"]


@pytest.mark.parametrize("start", ["9" * 5000, "1234567890", "x"])
def test_unusable_start_is_ignored(start):
    node = interpret_html(f'<ol start="{start}"><li>x</li></ol>')

    assert isinstance(node, NumberedList)
    assert node.start == 1
    assert node.items == [ListItem(children=[Paragraph(content=[Text(text="x")])])]


def test_negative_start_is_kept(extractor):
    assert extractor.extract_list('<ol start="-2"><li>x</li></ol>').start == -2


@pytest.mark.parametrize("html", [
    "<ul>" * 20000,
    "<ol>" + "<li>" * 20000,
    "<ul><li>" + "</ul>" * 20000,
    "<ul" * 20000,
])
def test_malformed_lists_are_extracted_quickly(html):
    started = time.perf_counter()
    interpret_html(html)
    assert time.perf_counter() - started < 2.0


def test_extract_convenience_function():
    data = extract("<ol start='2'><li>x</li></ol>", TagCategory.LIST)
    assert (data.ordered, data.start, data.items) == (True, 2, ["x"])
    assert extract("<div>x</div>", TagCategory.UNKNOWN) is None


# --- Heading extraction ---

def test_heading_level_and_text(extractor):
    data = extractor.extract_heading("<h3>Title</h3>")
    assert (data.level, data.text) == (3, "Title")


def test_heading_inner_tags_stripped(extractor):
    data = extractor.extract_heading('<h2 id="x">\n  <em>Hello</em> there\n</h2>')
    assert (data.level, data.text) == (2, "Hello there")


def test_first_heading_wins(extractor):
    data = extractor.extract_heading("<p>intro</p><h5>Later</h5><h1>Top</h1>")
    assert (data.level, data.text) == (5, "Later")


@pytest.mark.parametrize("html", ["<h0>Title</h0>", "<p>no heading</p>", "<h7>x</h7>"])
def test_heading_defaults(extractor, html):
    data = extractor.extract_heading(html)
    assert (data.level, data.text) == (1, "")


def test_heading_model_clamps_level():
    assert Heading(level=0).level == 1
    assert Heading(level=9).level == 6


# --- Code extraction ---

def test_code_is_verbatim(extractor):
    assert extractor.extract_code("<pre><code>x &lt; y</code></pre>").content == "x &lt; y"


def test_code_without_pre(extractor):
    assert extractor.extract_code("<code>print(1)</code>").content == "print(1)"


def test_code_keeps_line_breaks(extractor):
    html = '<pre class="lang"><code class="python">def f():\n    return 1\n</code></pre>'
    assert extractor.extract_code(html).content == "def f():\n    return 1\n"


def test_code_falls_back_to_trimmed_input(extractor):
    assert extractor.extract_code("  <pre>plain</pre>\n").content == "<pre>plain</pre>"


# --- Blockquote extraction ---

def test_blockquote_text(extractor):
    data = extractor.extract_blockquote("<blockquote>\n  <p>Quoted <b>text</b></p>\n</blockquote>")
    assert data.text == "Quoted text"


def test_nested_blockquote_loses_depth(extractor):
    data = extractor.extract_blockquote("<blockquote>Outer <blockquote>Inner</blockquote></blockquote>")
    assert data.text == "Outer Inner"


def test_unclosed_blockquote_is_normalised(extractor):
    assert extractor.extract_blockquote("<blockquote><p>open").text == "open"


# --- Assembled nodes ---

def test_interpret_table():
    node = interpret_html(WELL_FORMED_TABLE)

    assert isinstance(node, Table)
    assert len(node.column_alignments) == 2
    assert len(node.rows) == 3
    assert all(len(row.cells) == 2 for row in node.rows)
    assert cell_texts(node)[1] == ["Alice", "10"]


def test_interpret_table_containing_list():
    node = interpret_html("<table><tbody><tr><td><ul><li>x</li></ul></td></tr></tbody></table>")

    assert isinstance(node, Table)
    assert cell_texts(node) == [["<ul><li>x</li></ul>"]]


def test_interpret_bulleted_list():
    node = interpret_html("<ul><li>A</li><li><ul><li>Nested</li></ul>B</li></ul>")

    assert isinstance(node, BulletedList)
    assert node.tight is True
    assert [paragraph_text(item.children[0]) for item in node.items] == ["A", "B"]
    assert all(len(item.children) == 1 for item in node.items)


def test_interpret_numbered_list():
    node = interpret_html("<ol><li>first</li><li>second</li></ol>")

    assert isinstance(node, NumberedList)
    assert node.start == 1
    assert len(node.items) == 2


def test_interpret_heading():
    node = interpret_html("<h3>Title</h3>")

    assert isinstance(node, Heading)
    assert node.level == 3
    assert node.content == [Text(text="Title")]


def test_interpret_code():
    node = interpret_html("<pre><code>x &lt; y</code></pre>")
    assert node == CodeBlock(fence_info=None, content="x &lt; y")


def test_interpret_blockquote():
    node = interpret_html("<blockquote>Quote</blockquote>")

    assert isinstance(node, Blockquote)
    assert node.children == [Paragraph(content=[Text(text="Quote")])]


@pytest.mark.parametrize("html", ["<div>hi</div>", "<h0>Title</h0>", "plain text\n", ""])
def test_unknown_markup_is_kept_verbatim(html):
    node = interpret_html(html)

    assert isinstance(node, Paragraph)
    assert node.content == [Text(text=html)]


@pytest.mark.parametrize("html", [
    "<<table>>",
    "<ul><li><ol><li>",
    "<h2>",
    "<code>",
    "</blockquote><blockquote",
    "<table><thead><tr><th>a</th></tr></thead><tbody><tr><td>b</td><td>c</td><td>d</td></tr></tbody>",
])
def test_interpret_is_total(html):
    node = interpret_html(html)
    assert not isinstance(node, HTMLBlock)


def test_interpreted_node_round_trips_through_json():
    node = interpret_html(WELL_FORMED_TABLE)
    assert Table.model_validate_json(node.model_dump_json()) == node


# --- Resolving block trees ---

def test_resolve_replaces_nested_html_blocks():
    interpreter = HTMLBlockInterpreter()
    blocks = [
        ThematicBreak(),
        HTMLBlock(content="<h2>Top</h2>\n"),
        Blockquote(children=[HTMLBlock(content="<div>raw</div>")]),
        BulletedList(items=[ListItem(children=[HTMLBlock(content="<code>c</code>")])]),
        TaskList(items=[TaskListItem(is_completed=True, children=[HTMLBlock(content="<h1>Done</h1>")])]),
    ]

    resolved = interpreter.resolve(blocks)

    assert resolved[0] == ThematicBreak()
    assert resolved[1] == Heading(level=2, content=[Text(text="Top")])
    assert resolved[2].children == [Paragraph(content=[Text(text="<div>raw</div>")])]
    assert resolved[3].items[0].children == [CodeBlock(content="c")]
    assert resolved[4].items[0].is_completed is True
    assert isinstance(resolved[4].items[0].children[0], Heading)
    # Input tree is untouched
    assert isinstance(blocks[2].children[0], HTMLBlock)


def test_resolve_rejects_unknown_block_types():
    with pytest.raises(TypeError):
        HTMLBlockInterpreter().resolve_block("not a node")


# --- Matcher construction failure ---

def test_broken_pattern_disables_only_its_category(monkeypatch, fresh_patterns, extractor):
    broken = dict(patterns.PATTERN_SOURCES[TagCategory.TABLE], row="<tr(")
    monkeypatch.setitem(patterns.PATTERN_SOURCES, TagCategory.TABLE, broken)

    assert patterns.get_patterns(TagCategory.TABLE) is None

    data = extractor.extract_table(WELL_FORMED_TABLE)
    assert data.alignments == [Alignment.NONE]
    assert data.rows == []

    heading = interpret_html("<h2>Still works</h2>")
    assert heading == Heading(level=2, content=[Text(text="Still works")])


def test_broken_code_pattern_falls_back_to_input(monkeypatch, fresh_patterns, extractor):
    monkeypatch.setitem(patterns.PATTERN_SOURCES, TagCategory.CODE, {"code": "(unbalanced"})
    assert extractor.extract_code(" <code>x</code> ").content == "<code>x</code>"


def test_patterns_are_shared(fresh_patterns):
    first = patterns.get_patterns(TagCategory.LIST)
    assert first is patterns.get_patterns(TagCategory.LIST)
    with pytest.raises(TypeError):
        first["item"] = None


# --- CLI ---

def test_cli_writes_nodes(tmp_path, monkeypatch):
    import run_interpreter

    source = tmp_path / "heading.html"
    source.write_text("<h2>From file</h2>")
    output = tmp_path / "out.json"
    monkeypatch.setattr("sys.argv", ["run_interpreter.py", str(source), "-o", str(output)])

    run_interpreter.main()

    results = json.loads(output.read_text())
    assert results[0]["status"] == "success"
    assert results[0]["node"]["kind"] == "heading"
    assert results[0]["node"]["level"] == 2


def test_cli_stdout_is_pure_json(tmp_path, monkeypatch, capsys):
    import run_interpreter

    for name in ("MARKDOWN_RENDER_CAPABILITIES", "MARKDOWN_RENDER_PLATFORM_VERSION"):
        monkeypatch.delenv(name, raising=False)

    source = tmp_path / "list.html"
    source.write_text("<ul><li>one</li></ul>")
    monkeypatch.setattr("sys.argv", ["run_interpreter.py", str(source), "--layout"])
    # Route the package handler through the captured stderr for this test
    handler = setup_logger().handlers[0]
    monkeypatch.setattr(handler, "stream", sys.stderr)

    run_interpreter.main()

    captured = capsys.readouterr()
    results = json.loads(captured.out)
    assert results[0]["node"]["kind"] == "bulleted_list"
    assert "No platform version configured" in captured.err


def test_log_records_go_to_stderr():
    logger = setup_logger("markdown_render_stream_check")
    assert logger.handlers[0].stream is sys.stderr
