# src/mdx_compat/core/managers/report_manager.py
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
from tqdm import tqdm

from transformer.model import ErrorEntry, RunSummary, display_path
from transformer.tree.models import Document

logger = logging.getLogger(__name__)

RULE = "━" * 60


class ReportManager:
    """
    Renders the console report of a transformer run and exports its warnings.

    Per-document lines go through tqdm.write so they do not break an active
    progress bar; the banner and the summary block are plain prints.
    """

    def __init__(self, apply: bool, backup: bool, preview_limit: int = 5, base_dir: Optional[Path] = None):
        self.apply = apply
        self.backup = backup
        self.preview_limit = preview_limit
        self.base_dir = base_dir

    def _label(self, path: Path) -> str:
        return display_path(path, self.base_dir)

    # --- Banner ---

    def print_banner(self, backup_suffix: str = ".bak") -> None:
        print("MDX Compat - markdown to MDX compatibility fixer")
        print("Mode:  ", "APPLY (will modify files)" if self.apply else "DRY-RUN (preview only)")
        print("Backup:", f"enabled ({backup_suffix} files)" if self.backup else "disabled")
        print("")

    def print_found(self, count: int) -> None:
        print(f"📄 Found {count} document(s) to process\n")

    # --- Per document ---

    def on_document(self, path: Path, document: Optional[Document], error: Optional[ErrorEntry]) -> None:
        """Callback for the RunController; prints the line group of one document."""
        label = self._label(path)

        if error is not None:
            tqdm.write(f"[ERROR]  {label} -> {error.stage}: {error.message}")
            return

        if document.changed:
            tqdm.write(f"[MODIFY] {label}")
            if self.apply:
                tqdm.write("  ✓ File updated")
            else:
                tqdm.write("  -> Would modify this file (use --apply to make changes)")
            applied = [name for name, changed in document.pass_results.items() if changed]
            logger.debug("%s changed by: %s", label, ", ".join(applied))
        else:
            logger.debug("[OK] %s", label)

        if document.warnings:
            tqdm.write(f"[WARN]   {label}")
            tqdm.write(f"  ⚠ Found {len(document.warnings)} potential curly brace issue(s)")

    # --- Summary ---

    def print_summary(self, summary: RunSummary) -> None:
        print("")
        print(RULE)
        print(f"Summary: Processed {summary.files_scanned} file(s) in {summary.duration_s:.2f}s")
        print(f"  Changed:  {summary.files_changed} file(s) {'(modified)' if self.apply else '(dry-run)'}")
        print(f"  Warnings: {summary.warnings_found} curly brace issue(s) detected")
        if summary.errors:
            print(f"  Errors:   {len(summary.errors)} file(s) could not be processed")

        if summary.warnings:
            print("")
            print("⚠ Curly Brace Warnings (manual review recommended):")
            for record in summary.preview(self.preview_limit):
                print(f"  {record.source_path}")
                print(f"    Matches: {', '.join(record.matches)}")
            remaining = len(summary.warnings) - self.preview_limit
            if remaining > 0:
                print(f"  ... and {remaining} more")

        print(RULE)

        if not self.apply and summary.files_changed > 0:
            print("\nRun with --apply to make changes")

    # --- Export ---

    @staticmethod
    def warnings_to_rows(summary: RunSummary) -> List[Dict[str, Any]]:
        return [
            {
                "File": w.source_path,
                "Code": w.code,
                "Matches": " | ".join(w.matches),
                "Excerpt": w.excerpt,
            }
            for w in summary.warnings
        ]

    def export_warnings(self, summary: RunSummary, filename: str) -> Optional[Path]:
        """Writes all warnings to a CSV file. Returns the path, or None when nothing was written."""
        rows = self.warnings_to_rows(summary)
        if not rows:
            print("ℹ️  No warnings to export.")
            return None
        out_path = Path(filename)
        if out_path.suffix.lower() != ".csv":
            out_path = out_path.with_name(out_path.name + ".csv")
        try:
            pd.DataFrame(rows, columns=["File", "Code", "Matches", "Excerpt"]).to_csv(out_path, index=False)
        except OSError as e:
            logger.error("Export to %s failed: %s", out_path, e)
            print(f"❌ Error exporting: {e}")
            return None
        print(f"✅ Warnings exported to: {out_path}")
        return out_path
