# src/loader/services/document_io_service.py
import logging
from pathlib import Path

from mdx_compat.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)

ENCODING = "utf-8"


class DocumentIOService:
    """
    Raw document access. All reads and writes go through bytes so that line
    endings survive untouched; a backup is byte-identical to the original.
    """

    @staticmethod
    def read(path: Path) -> str:
        return Path(path).read_bytes().decode(ENCODING)

    @staticmethod
    def write(path: Path, text: str) -> None:
        Path(path).write_bytes(text.encode(ENCODING))
        logger.debug("Wrote %s", path)

    @staticmethod
    def write_backup(path: Path, raw_text: str, suffix: str = ".bak") -> Path:
        """Writes 'raw_text' next to 'path'. An existing backup is overwritten."""
        backup = PathUtils.backup_path_for(Path(path), suffix)
        backup.write_bytes(raw_text.encode(ENCODING))
        logger.debug("Created backup: %s", backup.name)
        return backup
