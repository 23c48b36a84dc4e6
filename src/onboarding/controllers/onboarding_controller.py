# src/onboarding/controllers/onboarding_controller.py
import logging
from pathlib import Path
from typing import Callable, List, Optional

from onboarding.model import OnboardingSettings, SpliceResult, SpliceStatus
from onboarding.services.repo_name_service import extract_repo_name
from onboarding.services.splice_service import SpliceService

logger = logging.getLogger(__name__)


class OnboardingController:
    """
    Registers a documentation source repository in the site:
    workflow steps, docs folder, sidebar and navbar entry.

    The workflow step gates the rest; when it fails nothing else is attempted.
    """

    def __init__(self, settings: Optional[OnboardingSettings] = None, base_dir: Optional[Path] = None):
        self.settings = settings or OnboardingSettings.from_config()
        self.base_dir = Path(base_dir) if base_dir else Path.cwd()
        self.splicer = SpliceService(self.settings, self.base_dir)

    def create_docs_folder(self, repo: str) -> SpliceResult:
        step = "docs_folder"
        docs_path = self.base_dir / self.settings.docs_dir / repo
        label = f"{self.settings.docs_dir}/{repo}/"
        if docs_path.is_dir():
            return SpliceResult(step=step, status=SpliceStatus.SKIPPED, message=f"Docs folder {label} already exists")
        try:
            docs_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return SpliceResult(step=step, status=SpliceStatus.FAILED, message=f"Could not create docs folder: {e}")
        return SpliceResult(step=step, status=SpliceStatus.APPLIED, message=f"Created docs folder: {label}")

    def _guarded(self, step: str, operation: Callable[[str], SpliceResult], repo: str) -> SpliceResult:
        try:
            result = operation(repo)
        except OSError as e:
            logger.error("Onboarding step '%s' failed: %s", step, e)
            result = SpliceResult(step=step, status=SpliceStatus.FAILED, message=str(e))
        logger.debug("Onboarding step '%s': %s", step, result.status.value)
        return result

    def run(self, value: str) -> List[SpliceResult]:
        repo = extract_repo_name(value)
        if not repo:
            raise ValueError("Repository name is empty.")

        results = [self._guarded("workflow", self.splicer.add_to_workflow, repo)]
        if not results[0].ok:
            return results

        results.append(self._guarded("docs_folder", self.create_docs_folder, repo))
        results.append(self._guarded("sidebars", self.splicer.add_to_sidebars, repo))
        results.append(self._guarded("navbar", self.splicer.add_to_navbar, repo))
        return results
