# src/transformer/engine/registry.py
import importlib
import pkgutil
import logging
from typing import Dict, List

from .core import DiagnosticFn, RuleDefinition
from ..tree.core import NodeType

logger = logging.getLogger(__name__)

# Rewrite passes may only ever touch these payloads.
MUTABLE_TYPES = {NodeType.TEXT, NodeType.HTML, NodeType.LINK}


class RuleRegistry:
    """
    Central registry for rewrite passes and diagnostic rules.

    Dynamically discovers and loads RuleDefinition modules from the
    'transformer.rules' package.
    """

    _definitions: Dict[str, RuleDefinition] = {}
    _loaded: bool = False

    @classmethod
    def discover(cls) -> None:
        """
        Discovers and registers all rule definitions found in the 'transformer.rules' package.

        Every module exposing a `DEFINITION` attribute (instance of `RuleDefinition`)
        is registered. A rewrite pass declaring a target outside the mutable node
        types is rejected.
        """
        if cls._loaded:
            return

        try:
            import transformer.rules as rules_pkg
        except ImportError as e:
            logger.error(f"Could not find rules package: {e}")
            return

        for _, name, _ in pkgutil.iter_modules(rules_pkg.__path__):
            full_name = f"transformer.rules.{name}"
            try:
                module = importlib.import_module(full_name)
            except Exception as e:
                logger.error(f"Error loading rule module {name}: {e}")
                continue

            defn = getattr(module, "DEFINITION", None)
            if not isinstance(defn, RuleDefinition):
                continue
            try:
                cls.register(defn)
            except ValueError as e:
                logger.error(f"Rejected rule module {name}: {e}")

        cls._loaded = True

    @classmethod
    def register(cls, defn: RuleDefinition) -> None:
        illegal = set(defn.target_types) - MUTABLE_TYPES
        if illegal:
            raise ValueError(
                f"Rule '{defn.name}' declares immutable targets: {sorted(t.value for t in illegal)}"
            )
        cls._definitions[defn.name] = defn
        logger.debug(f"Rule loaded: {defn.name} (order {defn.order})")

    @classmethod
    def get_definitions(cls) -> List[RuleDefinition]:
        """Returns all definitions sorted by pipeline order."""
        return sorted(cls._definitions.values(), key=lambda d: (d.order, d.name))

    @classmethod
    def get_rewrite_passes(cls) -> List[RuleDefinition]:
        return [d for d in cls.get_definitions() if d.rewrite is not None]

    @classmethod
    def get_diagnostics(cls) -> List[DiagnosticFn]:
        return [rule for d in cls.get_definitions() for rule in d.diagnostics]
