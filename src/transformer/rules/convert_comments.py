import logging
import re

from ..engine.core import RuleDefinition, rewrite_spec
from ..model import TransformerSettings
from ..tree.core import Node, NodeType, visit

logger = logging.getLogger(__name__)

# Non-greedy body, dot matches newlines; whitespace around the body is trimmed.
HTML_COMMENT = re.compile(r"<!--\s*(.*?)\s*-->", re.DOTALL)


def to_jsx_comment(match: re.Match) -> str:
    return "{/* " + match.group(1) + " */}"


@rewrite_spec(targets=[NodeType.HTML])
def convert_html_comments(tree: Node, settings: TransformerSettings) -> bool:
    """Converts every <!-- body --> in HTML nodes to the {/* body */} expression comment."""
    changed = False

    def convert(node: Node, _parent) -> None:
        nonlocal changed
        original = node.value or ""
        updated = HTML_COMMENT.sub(to_jsx_comment, original)
        if updated != original:
            node.value = updated
            changed = True
            logger.debug("Converted HTML comment to JSX: %r", original[:50])

    visit(tree, NodeType.HTML, convert)
    return changed


DEFINITION = RuleDefinition(
    name="convert_comments",
    order=20,
    rewrite=convert_html_comments,
    description="Turn HTML comments into JSX expression comments.",
)
