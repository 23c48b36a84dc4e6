# ============================================
# file: src/transformer/model.py
# ============================================
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from mdx_compat.core.managers.config_manager import config_manager

DEFAULT_VOID_ELEMENTS = [
    "img", "br", "hr", "input", "meta", "link", "area", "base",
    "col", "embed", "param", "source", "track", "wbr",
]


class SerializerOptions(BaseModel):
    """Fixed formatting conventions used when a tree is written back to markdown."""
    fence: Literal["`", "~"] = "`"
    list_item_indent: int = Field(default=1, ge=1, le=4)
    thematic_break: str = "***"


class TransformerSettings(BaseModel):
    link_prefix: str = "docs/"
    void_elements: List[str] = Field(default_factory=lambda: list(DEFAULT_VOID_ELEMENTS))
    excerpt_length: int = 100
    backup_suffix: str = ".bak"
    warning_preview_limit: int = 5
    serializer: SerializerOptions = Field(default_factory=SerializerOptions)

    @field_validator("void_elements")
    @classmethod
    def normalize_void_elements(cls, v: List[str]) -> List[str]:
        return [name.strip().lower() for name in v if name and name.strip()]

    @classmethod
    def from_config(cls) -> "TransformerSettings":
        """Builds the settings from the 'transformer' section of settings.json."""
        return cls(**(config_manager.get_nested("transformer", {}) or {}))


class DiagnosticRecord(BaseModel):
    """
    A single finding from the diagnostic scanner.
    Produced once per offending text node and never mutated afterwards.
    """
    model_config = {"frozen": True}

    source_path: str
    excerpt: str
    matches: List[str]
    code: str = "CURLY_BRACE_EXPRESSION"


class ErrorEntry(BaseModel):
    """A recoverable per-document failure (read, parse, rewrite, scan, serialize, write, backup)."""
    source_path: str
    stage: str
    message: str


class RunSummary(BaseModel):
    """Aggregate result of one run. Built incrementally and finalized once by the RunController."""
    files_scanned: int = 0
    files_changed: int = 0
    warnings_found: int = 0
    warnings: List[DiagnosticRecord] = Field(default_factory=list)
    errors: List[ErrorEntry] = Field(default_factory=list)
    changed_files: List[str] = Field(default_factory=list)
    applied: bool = False
    backup: bool = True
    duration_s: float = 0.0
    finalized: bool = False

    def preview(self, limit: int = 5) -> List[DiagnosticRecord]:
        """Returns the first 'limit' warnings to bound the report size."""
        return self.warnings[:max(limit, 0)]

    def as_dict(self) -> Dict[str, Any]:
        return {
            "files_scanned": self.files_scanned,
            "files_changed": self.files_changed,
            "warnings_found": self.warnings_found,
            "errors": len(self.errors),
            "applied": self.applied,
            "duration_s": round(self.duration_s, 3),
        }


def display_path(path: Path, base: Optional[Path] = None) -> str:
    """Renders a path relative to 'base' when possible, for readable reports."""
    if base is not None:
        try:
            return str(path.relative_to(base))
        except ValueError:
            pass
    return str(path)
