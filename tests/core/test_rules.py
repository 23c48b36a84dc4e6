# tests/core/test_rules.py
import pytest

from transformer.engine.core import RuleDefinition, rewrite_spec
from transformer.engine.registry import RuleRegistry
from transformer.engine.rewriter import RewriteEngine
from transformer.model import TransformerSettings
from transformer.rules.close_void_tags import fix_self_closing_tags
from transformer.rules.convert_comments import HTML_COMMENT, convert_html_comments, to_jsx_comment
from transformer.rules.escape_text import escape_less_than
from transformer.rules.rewrite_links import fix_relative_links, strip_prefix
from transformer.tree.builder import TreeBuilder
from transformer.tree.core import NodeType, collect
from transformer.tree.serializer import TreeSerializer


@pytest.fixture
def settings():
    return TransformerSettings()


@pytest.fixture
def transform(settings):
    """Volledige pijplijn: parse -> alle passes -> serialize."""
    builder = TreeBuilder()
    engine = RewriteEngine(settings)
    serializer = TreeSerializer(settings.serializer)

    def _run(text):
        tree = builder.parse(text)
        results = engine.run(tree)
        return serializer.serialize(tree), any(results.values())

    return _run


# --- Registry ---

def test_registry_discovers_passes_in_order():
    """Test of de registry alle passes vindt in de vaste volgorde."""
    RuleRegistry.discover()
    names = [d.name for d in RuleRegistry.get_rewrite_passes()]
    assert names == ["escape_text", "convert_comments", "close_void_tags", "rewrite_links"]
    codes = [code for d in RuleRegistry.get_definitions() for code in d.codes]
    assert "CURLY_BRACE_EXPRESSION" in codes


def test_registry_rejects_immutable_targets():
    """Test of een pass die code nodes wil muteren wordt geweigerd."""
    @rewrite_spec(targets=[NodeType.CODE])
    def touch_code(tree, settings):
        return False

    with pytest.raises(ValueError):
        RuleRegistry.register(RuleDefinition(name="bad", order=1, rewrite=touch_code))
    assert "bad" not in [d.name for d in RuleRegistry.get_definitions()]


# --- escape_text ---

def test_escape_less_than_in_text(transform):
    """Test het 'Budget < 500' scenario."""
    out, changed = transform("Budget < 500\n")
    assert changed is True
    assert out == "Budget &lt; 500\n"


def test_escape_leaves_code_untouched(transform):
    """Test of code blocks en inline code nooit worden aangepast."""
    text = "Use `a < b` inline.\n\n```js\nif (a < b) {}\n```\n"
    out, changed = transform(text)
    assert changed is False
    assert out == text


def test_escaping_is_total(settings):
    """Test of na de pass geen enkele TEXT node nog een '<' bevat."""
    tree = TreeBuilder().parse("a < b\n\n- <5 items\n\n> x << y\n\n# Less <than\n")
    escape_less_than(tree, settings)
    assert all("<" not in n.value for n in collect(tree, NodeType.TEXT))


# --- convert_comments ---

def test_comment_scenario(transform):
    """Test of een HTML comment een JSX comment wordt, met getrimde witruimte."""
    out, changed = transform("<!--   note here   -->\n\nText\n")
    assert changed is True
    assert out == "{/* note here */}\n\nText\n"


def test_multiple_comments_in_one_node(settings):
    """Test of elk comment in een node los wordt omgezet."""
    tree = TreeBuilder().parse("<!-- a\n--><!-- b -->\n")
    assert convert_html_comments(tree, settings) is True
    html = collect(tree, NodeType.HTML)[0]
    assert html.value == "{/* a */}{/* b */}\n"


def test_to_jsx_comment():
    """Test de omzetting van een los comment."""
    assert to_jsx_comment(HTML_COMMENT.search("<!--x-->")) == "{/* x */}"


# --- close_void_tags ---

@pytest.mark.parametrize("source, expected", [
    ('<img src="x">', '<img src="x" />'),
    ("<br>", "<br />"),
    ("<BR>", "<BR />"),
    ('<input type="text" disabled>', '<input type="text" disabled />'),
    ('<img src="x" />', '<img src="x" />'),
    ('<img src="x"/>', '<img src="x"/>'),
    ("<br/>", "<br/>"),
    ('<image href="x">', '<image href="x">'),
])
def test_self_closing_tags(settings, source, expected):
    """Test of void tags self-closing worden zonder dubbele reparatie."""
    tree = TreeBuilder().parse(f"Line {source} end\n")
    fix_self_closing_tags(tree, settings)
    assert collect(tree, NodeType.HTML)[0].value == expected


def test_tag_repair_is_not_duplicated(transform):
    """Test of een tweede run een al gerepareerde tag niet nogmaals aanpast."""
    once, _ = transform('<img src="x">\n')
    twice, changed = transform(once)
    assert once == '<img src="x" />\n'
    assert twice == once
    assert changed is False


# --- rewrite_links ---

def test_link_prefix_is_stripped(transform):
    """Test of het 'docs/' prefix uit links verdwijnt en de fragment blijft staan."""
    out, changed = transform("See [docs/intro](docs/01-architecture.md#section).\n")
    assert changed is True
    assert out == "See [docs/intro](01-architecture.md#section).\n"


def test_other_links_are_untouched(settings):
    """Test of links zonder prefix ongewijzigd blijven."""
    tree = TreeBuilder().parse("[a](https://example.com/docs/x) [b](./docs/y.md)\n")
    assert fix_relative_links(tree, settings) is False


def test_strip_prefix_removes_repeated_prefix():
    """Test of herhaalde prefixen ook verdwijnen, zodat de pass idempotent is."""
    assert strip_prefix("docs/docs/a.md", "docs/") == "a.md"
    assert strip_prefix("docs/guide.md#setup", "docs/") == "guide.md#setup"
    assert strip_prefix("other/guide.md", "docs/") == "other/guide.md"
    assert strip_prefix("a.md", "docs/") == "a.md"
    assert strip_prefix("docs/a.md", "") == "docs/a.md"


# --- Idempotence ---

MIXED_DOCUMENT = """# Intro <draft>

Budget < 500 and <Budget.

<!-- hidden -->

<img src="logo.png">

Line<br>two, see [arch](docs/docs/arch.md).

```
a < b
```
"""


def test_pipeline_is_idempotent(transform):
    """Test of de pijplijn na een keer niets meer verandert."""
    once, changed = transform(MIXED_DOCUMENT)
    assert changed is True
    twice, changed_again = transform(once)
    assert twice == once
    assert changed_again is False


def test_engine_reports_per_pass_results(settings):
    """Test of de engine per pass meldt of die iets veranderde."""
    tree = TreeBuilder().parse("[a](docs/a.md)\n")
    results = RewriteEngine(settings).run(tree)
    assert results == {
        "escape_text": False,
        "convert_comments": False,
        "close_void_tags": False,
        "rewrite_links": True,
    }
