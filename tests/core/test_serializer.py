# tests/core/test_serializer.py
import pytest

from transformer.model import SerializerOptions
from transformer.tree.builder import TreeBuilder
from transformer.tree.core import Node, NodeType
from transformer.tree.serializer import TreeSerializer

CANONICAL_DOCUMENT = """---
title: Intro
---

# Title

Some *emphasis* and **strong** text with `code`.

- one
- two

1. first
2. second

> quote

```python
print("x")
```

***

| a | b |
| --- | --: |
| 1 | 2 |
"""

MESSY_DOCUMENT = """Title
=====

Intro paragraph
continues here.

    indented code

* a
* b

1) one

2) two

<div>
raw html
</div>

[link]: docs/x.md
"""


@pytest.fixture
def roundtrip():
    builder = TreeBuilder()
    serializer = TreeSerializer(SerializerOptions())
    return lambda text: serializer.serialize(builder.parse(text))


def test_canonical_document_is_unchanged(roundtrip):
    """Test of een document in het vaste formaat ongewijzigd terugkomt."""
    assert roundtrip(CANONICAL_DOCUMENT) == CANONICAL_DOCUMENT


def test_roundtrip_is_stable(roundtrip):
    """Test of serialize(parse(.)) na een keer een vast punt is."""
    once = roundtrip(MESSY_DOCUMENT)
    assert roundtrip(once) == once


def test_setext_and_indented_code_are_normalized(roundtrip):
    """Test of setext koppen ATX worden en ingesprongen code fenced wordt."""
    out = roundtrip(MESSY_DOCUMENT)
    assert out.startswith("# Title\n")
    assert "```\nindented code\n```" in out


def test_empty_document(roundtrip):
    """Test of een leeg document leeg blijft."""
    assert roundtrip("") == ""


def test_fence_is_longer_than_content_backticks(roundtrip):
    """Test of de fence langer is dan elke backtick-reeks in de code."""
    text = "````\n```\nx\n```\n````\n"
    assert roundtrip(text) == text


def test_tilde_fence_when_info_contains_backtick(roundtrip):
    """Test of een info string met backtick een tilde-fence krijgt."""
    assert roundtrip("~~~a`b\nx\n~~~\n") == "~~~a`b\nx\n~~~\n"


def test_escapes_are_emitted_verbatim(roundtrip):
    """Test of escapes en entities in bronvorm worden teruggeschreven."""
    assert roundtrip("a &lt; b \\* c &amp; d\n") == "a &lt; b \\* c &amp; d\n"


def test_heading_with_trailing_hashes_keeps_text(roundtrip):
    """Test of een kop die op een #-reeks eindigt die tekst behoudt."""
    out = roundtrip("# C \\#\n")
    assert roundtrip(out) == out


def test_loose_list_items_are_separated(roundtrip):
    """Test of een losse lijst lege regels tussen de items houdt."""
    assert roundtrip("- a\n\n- b\n") == "- a\n\n- b\n"


def test_nested_list_indentation(roundtrip):
    """Test of geneste lijsten onder de marker worden ingesprongen."""
    text = "- a\n  - b\n  - c\n- d\n"
    assert roundtrip(text) == text


def test_link_destination_with_space_is_wrapped():
    """Test of een url met spatie tussen punthaken wordt gezet."""
    link = Node(type=NodeType.LINK, url="my file.md", children=[Node(type=NodeType.TEXT, value="x")])
    tree = Node(type=NodeType.ROOT, children=[Node(type=NodeType.PARAGRAPH, children=[link])])
    assert TreeSerializer().serialize(tree) == "[x](<my file.md>)\n"


def test_autolink_is_kept(roundtrip):
    """Test of een autolink een autolink blijft zolang de url niet wijzigt."""
    assert roundtrip("<https://example.com>\n") == "<https://example.com>\n"


@pytest.mark.parametrize("text", [
    "| a |\n| --- |\n| b \\| c |\n",
    "| a | b |\n| --- | --- |\n| `x \\| y` | z |\n",
])
def test_escaped_pipe_in_table_cell_survives(roundtrip, text):
    """Test of een geescapete pipe in een tabelcel de cel niet splitst."""
    assert roundtrip(text) == text
    assert roundtrip(roundtrip(text)) == text


def test_pipe_in_cell_text_is_escaped():
    """Test of een kale pipe in celtekst als \\| wordt geschreven, buiten tabellen niet."""
    tree = TreeBuilder().parse("| a |\n| --- |\n| b \\| c |\n\nd | e\n")
    out = TreeSerializer().serialize(tree)
    assert "| b \\| c |" in out
    assert out.endswith("d | e\n")
