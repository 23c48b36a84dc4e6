from typing import Callable, List, Optional, Set

from ..model import TransformerSettings
from ..tree.core import Node, NodeType

# A rewrite pass mutates the tree in place and reports whether anything changed.
RewriteFn = Callable[[Node, TransformerSettings], bool]
# A diagnostic rule inspects one node and returns the offending substrings.
DiagnosticFn = Callable[[Node, TransformerSettings], List[str]]


def rewrite_spec(targets: List[NodeType]):
    """
    Decorator to declare which node types a rewrite pass mutates.
    The RuleRegistry uses it to document and verify the mutation surface.
    """
    def decorator(func):
        func.target_types = list(targets)
        return func
    return decorator


def diagnostic_spec(codes: List[str], targets: List[NodeType]):
    """
    Decorator to declare which issue codes a diagnostic rule returns
    and which node types it inspects.
    """
    def decorator(func):
        func.defined_codes = codes
        func.target_types = list(targets)
        return func
    return decorator


class RuleDefinition:
    """
    Configuration object binding a rule name to its rewrite pass and diagnostics.

    'order' fixes the position of the rewrite pass in the pipeline; lower runs first.
    """

    def __init__(
            self,
            name: str,
            order: int,
            rewrite: Optional[RewriteFn] = None,
            diagnostics: Optional[List[DiagnosticFn]] = None,
            description: str = "",
    ):
        self.name = name
        self.order = order
        self.rewrite = rewrite
        self.diagnostics = diagnostics or []
        self.description = description

        # --- Auto-Discovery of Issue Codes ---
        final_codes: Set[str] = set()
        for rule in self.diagnostics:
            if hasattr(rule, 'defined_codes'):
                final_codes.update(rule.defined_codes)
        self.codes = sorted(list(final_codes))

    @property
    def target_types(self) -> List[NodeType]:
        return list(getattr(self.rewrite, "target_types", []))

    def __repr__(self) -> str:
        return f"<RuleDefinition name={self.name} order={self.order}>"
