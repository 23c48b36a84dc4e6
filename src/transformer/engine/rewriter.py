# src/transformer/engine/rewriter.py
import logging
from typing import Dict, List, Optional

from .core import RuleDefinition
from .registry import RuleRegistry
from ..model import TransformerSettings
from ..tree.core import Node

logger = logging.getLogger(__name__)


class RewriteEngine:
    """
    Applies the registered rewrite passes to a tree, in pipeline order.

    Passes work on disjoint payloads (text vs. html vs. link url), so the order only
    matters in that every pass sees the output of the ones before it.
    """

    def __init__(self, settings: TransformerSettings, passes: Optional[List[RuleDefinition]] = None):
        self.settings = settings
        if passes is None:
            RuleRegistry.discover()
            passes = RuleRegistry.get_rewrite_passes()
        self.passes = passes

    @property
    def pass_names(self) -> List[str]:
        return [p.name for p in self.passes]

    def run(self, tree: Node) -> Dict[str, bool]:
        """
        Runs every pass over the same tree (in place).

        Returns:
            Dict[str, bool]: pass name -> whether that pass mutated the tree.
        """
        results: Dict[str, bool] = {}
        for definition in self.passes:
            changed = bool(definition.rewrite(tree, self.settings))
            results[definition.name] = changed
            if changed:
                logger.debug("Pass '%s' modified the tree.", definition.name)
        return results
