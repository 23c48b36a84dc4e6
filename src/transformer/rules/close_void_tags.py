import logging
import re
from functools import lru_cache
from typing import Tuple

from ..engine.core import RuleDefinition, rewrite_spec
from ..model import TransformerSettings
from ..tree.core import Node, NodeType, visit

logger = logging.getLogger(__name__)


@lru_cache(maxsize=8)
def void_tag_pattern(names: Tuple[str, ...]) -> re.Pattern:
    """
    Matches an opening tag of one of 'names' up to the first '>'.

    Heuristic: a '>' inside a quoted attribute value ends the match early.
    The tag name must be followed by whitespace, '/' or '>' so <image> is not read as <img>.
    """
    alternation = "|".join(re.escape(n) for n in sorted(names, key=len, reverse=True))
    return re.compile(r"<(%s)(?=[\s/>])([^<>]*?)\s*>" % alternation, re.IGNORECASE)


def _self_close(match: re.Match) -> str:
    tag, attrs = match.group(1), match.group(2).rstrip()
    if attrs.endswith("/"):
        # Already self-closing (<br/>, <img src="x" />)
        return match.group(0)
    return f"<{tag}{attrs} />"


@rewrite_spec(targets=[NodeType.HTML])
def fix_self_closing_tags(tree: Node, settings: TransformerSettings) -> bool:
    """Rewrites <img src="x"> style void tags in HTML nodes to <img src="x" />."""
    if not settings.void_elements:
        return False
    pattern = void_tag_pattern(tuple(settings.void_elements))
    changed = False

    def close(node: Node, _parent) -> None:
        nonlocal changed
        original = node.value or ""
        updated = pattern.sub(_self_close, original)
        if updated != original:
            node.value = updated
            changed = True
            logger.debug("Fixed self-closing tags in HTML node: %r", original[:50])

    visit(tree, NodeType.HTML, close)
    return changed


DEFINITION = RuleDefinition(
    name="close_void_tags",
    order=30,
    rewrite=fix_self_closing_tags,
    description="Self-close void HTML elements (<img>, <br>, ...).",
)
