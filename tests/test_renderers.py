from musings.renderers import MarkdownRenderer, generate_heading_id, highlight_css


def render(text):
    return MarkdownRenderer().render(text)


def test_paragraph_and_emphasis():
    html = render("Hello *world*")
    assert html.strip() == "<p>Hello <em>world</em></p>"


def test_heading_ids_are_unique():
    html = render("## Intro\n\n## Intro\n\n## Intro")
    assert '<h2 id="intro">Intro</h2>' in html
    assert '<h2 id="intro-1">Intro</h2>' in html
    assert '<h2 id="intro-2">Intro</h2>' in html


def test_heading_ids_reset_between_documents():
    renderer = MarkdownRenderer()
    renderer.render("## Intro")
    assert 'id="intro"' in renderer.render("## Intro")


def test_generate_heading_id():
    assert generate_heading_id("Hello, <em>World</em>!") == "hello-world"
    assert generate_heading_id("  spaced   out  ") == "spaced-out"


def test_tables():
    html = render("| a | b |\n|---|---|\n| 1 | 2 |")
    assert "<table>" in html
    assert "<td>1</td>" in html


def test_footnotes():
    html = render("Text[^1]\n\n[^1]: The note.")
    assert 'class="footnotes"' in html
    assert "The note." in html


def test_strikethrough_and_autolinks():
    html = render("~~gone~~ see https://example.com")
    assert "<del>gone</del>" in html
    assert 'href="https://example.com"' in html


def test_external_links_open_in_new_tab():
    html = render("[out](https://example.com) and [in](/about.html)")
    assert '<a target="_blank" href="https://example.com">out</a>' in html
    assert '<a href="/about.html">in</a>' in html


def test_definition_lists():
    html = render("Term\n: Definition")
    assert "<dl>" in html
    assert "<dt>Term</dt>" in html


def test_math_passthrough():
    html = render("Inline $x + y$ math")
    assert 'class="math"' in html


def test_superscript_and_subscript():
    html = render("E = mc^2^ and H~2~O")
    assert "<sup>2</sup>" in html
    assert "<sub>2</sub>" in html


def test_task_lists():
    html = render("- [x] done\n- [ ] todo")
    assert 'type="checkbox"' in html


def test_backslash_line_break():
    html = render("first\\\nsecond")
    assert "<br" in html


def test_known_language_is_highlighted():
    html = render("```python\nprint('hi')\n```")
    assert 'class="highlight"' in html


def test_unknown_language_falls_back_to_plain_block():
    html = render("```nosuchlang\n<tag>\n```")
    assert '<pre><code class="language-nosuchlang">&lt;tag&gt;' in html


def test_custom_plugin_list():
    html = MarkdownRenderer(plugins=[]).render("| a |\n|---|\n| 1 |")
    assert "<table>" not in html


def test_highlight_css():
    assert ".highlight" in highlight_css()
    assert ".code" in highlight_css(".code")
