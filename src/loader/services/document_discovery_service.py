# src/loader/services/document_discovery_service.py
import logging
from pathlib import Path
from typing import Iterable, List

logger = logging.getLogger(__name__)


class DocumentDiscoveryService:
    """
    Finds the markdown documents under a set of root directories.

    Roots are walked in the given order. Inside a directory the entries are
    visited in lexical order, files and subdirectories interleaved, so the
    resulting list is deterministic across platforms. Symlinked directories are
    not entered, so a link pointing back up the tree cannot loop.
    """

    def __init__(self, extension: str = ".md"):
        self.extension = extension

    def find_documents(self, roots: Iterable[Path]) -> List[Path]:
        documents: List[Path] = []
        for root in roots:
            root = Path(root)
            if not root.is_dir():
                logger.debug("Skipping root %s (missing or not a directory).", root)
                continue
            self._walk(root, documents)
        logger.info("Discovered %d document(s).", len(documents))
        return documents

    def _walk(self, directory: Path, documents: List[Path]) -> None:
        try:
            entries = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            logger.debug("Cannot read directory %s: %s", directory, e)
            return

        for entry in entries:
            if entry.is_symlink() and entry.is_dir():
                logger.debug("Skipping symlinked directory %s.", entry)
            elif entry.is_dir():
                self._walk(entry, documents)
            elif entry.is_file() and entry.name.endswith(self.extension):
                documents.append(entry)
