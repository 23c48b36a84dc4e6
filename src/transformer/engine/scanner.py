# src/transformer/engine/scanner.py
import logging
from typing import List, Optional

from .core import DiagnosticFn
from .registry import RuleRegistry
from ..model import DiagnosticRecord, TransformerSettings
from ..tree.core import Node, NodeType, collect

logger = logging.getLogger(__name__)


class DiagnosticScanner:
    """
    Read-only visitor flagging constructs the rewrite passes cannot fix safely.

    Every registered diagnostic rule is applied to the node types it declares
    (TEXT by default). One DiagnosticRecord is produced per offending node, holding
    an excerpt of the node and all matched substrings. The tree is never mutated.
    """

    def __init__(self, settings: TransformerSettings, rules: Optional[List[DiagnosticFn]] = None):
        self.settings = settings
        if rules is None:
            RuleRegistry.discover()
            rules = RuleRegistry.get_diagnostics()
        self.rules = rules

    def scan(self, tree: Node, source_path: str) -> List[DiagnosticRecord]:
        findings: List[DiagnosticRecord] = []

        for rule in self.rules:
            targets = getattr(rule, "target_types", None) or [NodeType.TEXT]
            code = (getattr(rule, "defined_codes", None) or ["DIAGNOSTIC"])[0]

            for node in collect(tree, targets):
                matches = rule(node, self.settings)
                if not matches:
                    continue
                text = node.value or ""
                findings.append(DiagnosticRecord(
                    source_path=source_path,
                    excerpt=text[:self.settings.excerpt_length],
                    matches=list(matches),
                    code=code,
                ))
                logger.debug("%s in %s: %s", code, source_path, ", ".join(matches))

        return findings
