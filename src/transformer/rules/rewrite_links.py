import logging

from ..engine.core import RuleDefinition, rewrite_spec
from ..model import TransformerSettings
from ..tree.core import Node, NodeType, visit

logger = logging.getLogger(__name__)


def strip_prefix(url: str, prefix: str) -> str:
    """
    Removes the leading 'prefix' segment from 'url'.
    Unlike a single strip, repeated leading segments (docs/docs/a.md) are removed
    as well, so the result never starts with 'prefix' and a second run is a no-op.
    e.g. docs/01-architecture.md#section -> 01-architecture.md#section
    """
    if not prefix:
        return url
    while url.startswith(prefix):
        url = url[len(prefix):]
    return url


@rewrite_spec(targets=[NodeType.LINK])
def fix_relative_links(tree: Node, settings: TransformerSettings) -> bool:
    """Strips the configured path prefix from LINK targets. Display text is never touched."""
    prefix = settings.link_prefix
    if not prefix:
        return False
    changed = False

    def rewrite(node: Node, _parent) -> None:
        nonlocal changed
        original = node.url or ""
        if not original.startswith(prefix):
            return
        node.url = strip_prefix(original, prefix)
        changed = True
        logger.debug("Fixed relative link: %r -> %r", original, node.url)

    visit(tree, NodeType.LINK, rewrite)
    return changed


DEFINITION = RuleDefinition(
    name="rewrite_links",
    order=40,
    rewrite=fix_relative_links,
    description="Strip the docs/ prefix from relative markdown links.",
)
