# tests/core/test_scanner.py
from transformer.engine.scanner import DiagnosticScanner
from transformer.model import TransformerSettings
from transformer.tree.builder import TreeBuilder
from transformer.tree.serializer import TreeSerializer


def test_curly_braces_are_flagged():
    """Test of accolades in tekst als waarschuwing worden gemeld."""
    tree = TreeBuilder().parse("Use {name} and {value} here.\n")
    records = DiagnosticScanner(TransformerSettings()).scan(tree, "docs/a.md")
    assert len(records) == 1
    assert records[0].matches == ["{name}", "{value}"]
    assert records[0].source_path == "docs/a.md"
    assert records[0].code == "CURLY_BRACE_EXPRESSION"


def test_comments_and_whitespace_braces_are_ignored():
    """Test of JSX comments en '{ ' niet worden gemeld."""
    tree = TreeBuilder().parse("{/* note */} and { spaced }\n")
    assert DiagnosticScanner(TransformerSettings()).scan(tree, "a.md") == []


def test_code_is_never_scanned():
    """Test of accolades in code geen waarschuwing geven."""
    tree = TreeBuilder().parse("`{x}`\n\n```\n{y}\n```\n")
    assert DiagnosticScanner(TransformerSettings()).scan(tree, "a.md") == []


def test_excerpt_is_truncated():
    """Test of het fragment wordt afgekapt op de ingestelde lengte."""
    settings = TransformerSettings(excerpt_length=10)
    tree = TreeBuilder().parse("Some long text with {x} in the middle\n")
    record = DiagnosticScanner(settings).scan(tree, "a.md")[0]
    assert record.excerpt == "Some long "


def test_scanner_does_not_mutate():
    """Test of de scanner de boom ongewijzigd laat."""
    text = "Keep {this} < as is\n"
    tree = TreeBuilder().parse(text)
    before = TreeSerializer().serialize(tree)
    DiagnosticScanner(TransformerSettings()).scan(tree, "a.md")
    assert TreeSerializer().serialize(tree) == before
