import re
from typing import List

from ..engine.core import RuleDefinition, diagnostic_spec
from ..model import TransformerSettings
from ..tree.core import Node, NodeType

# '{' not followed by whitespace or a comment marker, then anything up to '}'.
CURLY_EXPRESSION = re.compile(r"\{[^/*\s][^}]*\}")


@diagnostic_spec(codes=["CURLY_BRACE_EXPRESSION"], targets=[NodeType.TEXT])
def detect_curly_braces(node: Node, settings: TransformerSettings) -> List[str]:
    """Returns every '{...}' span in a TEXT node that MDX would evaluate as an expression."""
    return CURLY_EXPRESSION.findall(node.value or "")


DEFINITION = RuleDefinition(
    name="curly_braces",
    order=90,
    diagnostics=[detect_curly_braces],
    description="Flag curly braces for manual review; they cannot be fixed safely.",
)
