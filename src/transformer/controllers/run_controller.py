# src/transformer/controllers/run_controller.py
import logging
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from loader.model import LoaderSettings
from loader.services.document_discovery_service import DocumentDiscoveryService
from loader.services.document_io_service import DocumentIOService
from mdx_compat.core.utils.path_utils import PathUtils
from transformer.engine.rewriter import RewriteEngine
from transformer.engine.scanner import DiagnosticScanner
from transformer.managers.progress_manager import ProgressManager
from transformer.model import ErrorEntry, RunSummary, TransformerSettings, display_path
from transformer.tree.builder import TreeBuilder
from transformer.tree.models import Document
from transformer.tree.serializer import TreeSerializer
from transformer.utils.run_timers import RunTimers

logger = logging.getLogger(__name__)

# (path, document or None when it failed before a tree existed, error or None)
DocumentCallback = Callable[[Path, Optional[Document], Optional[ErrorEntry]], None]


class RunState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    PARSING = "parsing"
    REWRITING = "rewriting"
    SCANNING = "scanning"
    SERIALIZING = "serializing"
    WRITING = "writing"
    REPORTING = "reporting"
    DONE = "done"


class RunController:
    """
    Orchestrates one transformer run over a set of documents.

    For every document: read -> parse -> rewrite -> scan and, in apply mode only,
    serialize -> (backup) -> write. A failure in any stage is recorded as an
    ErrorEntry for that document and the run continues with the next one.
    In dry-run mode no file is ever opened for writing.
    """

    def __init__(
            self,
            roots: Optional[List[Path]] = None,
            apply: bool = False,
            backup: bool = True,
            settings: Optional[TransformerSettings] = None,
            loader_settings: Optional[LoaderSettings] = None,
            on_document: Optional[DocumentCallback] = None,
            show_progress: bool = False,
            base_dir: Optional[Path] = None,
    ):
        self.settings = settings or TransformerSettings.from_config()
        self.loader_settings = loader_settings or LoaderSettings.from_config()
        self.base_dir = base_dir or PathUtils.get_invocation_root()
        self.roots = roots if roots is not None else PathUtils.resolve_roots(
            self.loader_settings.roots, self.base_dir
        )
        self.apply = apply
        self.backup = backup
        self.on_document = on_document
        self.show_progress = show_progress

        self.discovery = DocumentDiscoveryService(self.loader_settings.extension)
        self.io = DocumentIOService()
        self.builder = TreeBuilder()
        self.engine = RewriteEngine(self.settings)
        self.scanner = DiagnosticScanner(self.settings)
        self.serializer = TreeSerializer(self.settings.serializer)
        self.timer = RunTimers()

        self._state = RunState.IDLE

    @property
    def state(self) -> RunState:
        return self._state

    def _set_state(self, state: RunState) -> None:
        logger.debug("RunController: %s -> %s", self._state.value, state.value)
        self._state = state

    def discover(self) -> List[Path]:
        self._set_state(RunState.LOADING)
        return self.discovery.find_documents(self.roots)

    def run(self, paths: Optional[Iterable[Path]] = None) -> RunSummary:
        """Processes every document and returns the finalized RunSummary."""
        self.timer.start()
        documents = list(paths) if paths is not None else self.discover()
        summary = RunSummary(applied=self.apply, backup=self.apply and self.backup)

        progress = ProgressManager(total=len(documents), enabled=self.show_progress)
        try:
            for path in documents:
                self._process(Path(path), summary)
                progress.advance(summary.files_changed, summary.warnings_found, len(summary.errors))
        finally:
            progress.close()

        self._set_state(RunState.REPORTING)
        self.timer.stop()
        summary.duration_s = self.timer.duration
        summary.finalized = True
        logger.info(
            "Run finished: %d scanned, %d changed, %d warning(s), %d error(s) in %.2fs.",
            summary.files_scanned, summary.files_changed, summary.warnings_found,
            len(summary.errors), summary.duration_s
        )
        self._set_state(RunState.DONE)
        return summary

    def _process(self, path: Path, summary: RunSummary) -> None:
        source = display_path(path, self.base_dir)
        summary.files_scanned += 1
        document: Optional[Document] = None
        stage = "read"

        try:
            self._set_state(RunState.LOADING)
            raw_text = self.io.read(path)

            stage = "parse"
            self._set_state(RunState.PARSING)
            document = Document(path=path, raw_text=raw_text, tree=self.builder.parse(raw_text))

            stage = "rewrite"
            self._set_state(RunState.REWRITING)
            document.pass_results = self.engine.run(document.tree)
            document.changed = any(document.pass_results.values())

            stage = "scan"
            self._set_state(RunState.SCANNING)
            document.warnings = self.scanner.scan(document.tree, source)

            if document.changed and self.apply:
                stage = "serialize"
                self._set_state(RunState.SERIALIZING)
                output = self.serializer.serialize(document.tree)

                self._set_state(RunState.WRITING)
                if self.backup:
                    stage = "backup"
                    self.io.write_backup(path, document.raw_text, self.settings.backup_suffix)
                stage = "write"
                self.io.write(path, output)
        except Exception as e:
            error = ErrorEntry(source_path=source, stage=stage, message=str(e) or type(e).__name__)
            summary.errors.append(error)
            logger.error("Failed to %s %s: %s", stage, source, e, exc_info=logger.isEnabledFor(logging.DEBUG))
            if self.on_document:
                self.on_document(path, document, error)
            return

        if document.changed:
            summary.files_changed += 1
            summary.changed_files.append(source)
        if document.warnings:
            summary.warnings_found += len(document.warnings)
            summary.warnings.extend(document.warnings)

        if self.on_document:
            self.on_document(path, document, None)
