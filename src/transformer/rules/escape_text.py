import logging

from ..engine.core import RuleDefinition, rewrite_spec
from ..model import TransformerSettings
from ..tree.core import Node, NodeType, visit

logger = logging.getLogger(__name__)

LESS_THAN_ENTITY = "&lt;"


@rewrite_spec(targets=[NodeType.TEXT])
def escape_less_than(tree: Node, settings: TransformerSettings) -> bool:
    """
    Replaces every literal '<' in TEXT nodes with '&lt;'.

    Unconditional: '<2', '<$1,000', '<<' and '<Budget' are all escaped. Code is
    never visited because CODE and INLINE_CODE are separate node types.
    """
    changed = False

    def escape(node: Node, _parent) -> None:
        nonlocal changed
        original = node.value or ""
        if "<" not in original:
            return
        node.value = original.replace("<", LESS_THAN_ENTITY)
        changed = True
        logger.debug("Escaped < in text: %r", original[:50])

    visit(tree, NodeType.TEXT, escape)
    return changed


DEFINITION = RuleDefinition(
    name="escape_text",
    order=10,
    rewrite=escape_less_than,
    description="Escape '<' in plain text so it is not read as a JSX tag.",
)
