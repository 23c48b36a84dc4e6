# src/transformer/tree/models.py
from pathlib import Path
from typing import Dict, List

from pydantic import BaseModel, Field

from .core import Node
from ..model import DiagnosticRecord


class Document(BaseModel):
    """
    A markdown document loaded from disk.

    'raw_text' is the untouched original and cannot be reassigned; 'tree' is
    mutated in place by the rewrite passes. 'changed' is the OR over all
    passes and is never set by the diagnostic scanner.
    """
    path: Path
    raw_text: str = Field(frozen=True)
    tree: Node
    changed: bool = False
    pass_results: Dict[str, bool] = Field(default_factory=dict)
    warnings: List[DiagnosticRecord] = Field(default_factory=list)

    @property
    def name(self) -> str:
        return self.path.name
