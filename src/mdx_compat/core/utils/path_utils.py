# src/mdx_compat/core/utils/path_utils.py
import logging
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)


class PathUtils:
    """
    A central utility for reliably retrieving important package and working paths.
    """

    # --- Package specific paths

    @staticmethod
    def get_package_root() -> Path:
        """
        Returns the absolute path of the mdx_compat package directory.
        This is where the bundled settings.json lives.
        """
        return Path(__file__).resolve().parents[2]

    @staticmethod
    def get_settings_file() -> Path:
        return PathUtils.get_package_root() / "settings.json"

    # --- Invocation specific paths ---

    @staticmethod
    def get_invocation_root() -> Path:
        """
        Returns the directory the command was started from.
        Document roots and onboarding targets are resolved against it.
        """
        return Path.cwd()

    @staticmethod
    def get_user_settings_file() -> Path:
        """
        Returns the path of the optional per-repository override file.
        (e.g., /path/to/site/.mdx-compat.json)
        """
        return PathUtils.get_invocation_root() / ".mdx-compat.json"

    # --- Helper methods ---

    @staticmethod
    def resolve_roots(roots: List[str], base_dir: Optional[Path] = None) -> List[Path]:
        """Resolves configured root names (relative or absolute) against the invocation root."""
        base = base_dir if base_dir else PathUtils.get_invocation_root()
        resolved = []
        for root in roots:
            path = Path(root)
            resolved.append(path if path.is_absolute() else base / path)
        return resolved

    @staticmethod
    def backup_path_for(path: Path, suffix: str) -> Path:
        """Returns the sibling backup path, e.g. docs/intro.md -> docs/intro.md.bak"""
        return path.with_name(path.name + suffix)
