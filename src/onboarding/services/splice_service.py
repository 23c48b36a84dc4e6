# src/onboarding/services/splice_service.py
import logging
import re
from pathlib import Path
from typing import Optional, Tuple

from loader.services.document_io_service import DocumentIOService
from onboarding.model import OnboardingSettings, SpliceResult, SpliceStatus
from onboarding.services.repo_name_service import to_title_case

logger = logging.getLogger(__name__)

# End of a shell 'if' block inside a run step, plus the blank line(s) after it.
SYNC_BLOCK_END = re.compile(r"\n          fi\r?\n\s*\r?\n")
GITHUB_NAV_ITEM = re.compile(r"^[ \t]*\{\s*href:\s*['\"]https://github\.com", re.MULTILINE)
JS_IDENTIFIER_UNSAFE = re.compile(r"[^a-zA-Z0-9_$]")


class SpliceError(Exception):
    """An anchor needed for an insertion was not found."""


class SpliceService:
    """
    Text splices that register a documentation source repository in the site.

    Every operation works on an in-memory copy of the target file and only writes
    it back once all anchors of that operation were found, so a failure never
    leaves a half-edited file. Entries that are already present are skipped.
    """

    def __init__(self, settings: OnboardingSettings, base_dir: Path):
        self.settings = settings
        self.base_dir = Path(base_dir)
        self.io = DocumentIOService()

    # --- Snippets ---

    def checkout_step(self, repo: str) -> str:
        return (
            f"\n      - name: Checkout {repo}"
            f"\n        uses: actions/checkout@v4"
            f"\n        with:"
            f"\n          repository: {self.settings.owner}/{repo}"
            f"\n          ref: main"
            f"\n          path: _source_{repo}"
            "\n          token: ${{ secrets.DOCS_REPO_TOKEN }}"
        )

    @staticmethod
    def sync_section(repo: str) -> str:
        return (
            f"\n          # Sync {repo} docs"
            f"\n          if [ -d \"_source_{repo}/docs\" ]; then"
            f"\n            rm -rf docs/{repo}"
            f"\n            mkdir -p docs/{repo}"
            f"\n            rsync -a --delete _source_{repo}/docs/ docs/{repo}/"
            f"\n          fi\n"
        )

    @staticmethod
    def cleanup_line(repo: str) -> str:
        return f"          rm -rf _source_{repo}"

    @staticmethod
    def sidebar_key(repo: str) -> str:
        key = f"{repo}Sidebar"
        return f"'{key}'" if JS_IDENTIFIER_UNSAFE.search(key) else key

    @staticmethod
    def sidebar_entry(repo: str) -> str:
        return (
            f"  // {repo} sidebar\n"
            f"  {SpliceService.sidebar_key(repo)}: [\n"
            f"    {{\n"
            f"      type: 'autogenerated',\n"
            f"      dirName: '{repo}',\n"
            f"    }},\n"
            f"  ],"
        )

    @staticmethod
    def navbar_entry(repo: str) -> str:
        return (
            f"        {{\n"
            f"          type: 'docSidebar',\n"
            f"          sidebarId: '{repo}Sidebar',\n"
            f"          position: 'left',\n"
            f"          label: '{to_title_case(repo)}',\n"
            f"        }},\n"
        )

    # --- Helpers ---

    def _read(self, relative: str) -> Tuple[Path, Optional[str]]:
        path = self.base_dir / relative
        try:
            return path, self.io.read(path)
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Cannot read %s: %s", path, e)
            return path, None

    # --- Operations ---

    def splice_workflow(self, content: str, repo: str) -> str:
        """
        Inserts the checkout step, the sync section and the cleanup line for 'repo'
        next to the template repository's entries. Raises SpliceError on a missing anchor.
        """
        template = self.settings.template_repo

        anchor = content.find(f"- name: Checkout {template}")
        if anchor == -1:
            raise SpliceError(f"Could not find {template} checkout step")
        insert_at = content.find("\n      - name:", anchor + 1)
        if insert_at == -1:
            raise SpliceError(f"Could not find insertion point after {template}")
        content = content[:insert_at] + self.checkout_step(repo) + content[insert_at:]

        marker = f"# Sync {template} docs"
        anchor = content.find(marker)
        if anchor == -1:
            raise SpliceError(f"Could not find {template} sync section")
        search_from = anchor + len(marker)
        match = SYNC_BLOCK_END.search(content, search_from)
        if not match:
            raise SpliceError(f"Could not find end of {template} sync section")
        content = content[:match.end()] + self.sync_section(repo) + content[match.end():]

        anchor = content.find(f"rm -rf _source_{template}")
        if anchor == -1:
            raise SpliceError(f"Could not find {template} cleanup line")
        line_end = content.find("\n", anchor)
        if line_end == -1:
            line_end = len(content)
        content = content[:line_end] + "\n" + self.cleanup_line(repo) + content[line_end:]

        return content

    def add_to_workflow(self, repo: str) -> SpliceResult:
        step = "workflow"
        path, content = self._read(self.settings.workflow_path)
        if content is None:
            return SpliceResult(step=step, status=SpliceStatus.FAILED, message=f"Could not read {path}")

        if re.search(rf"- name: Checkout {re.escape(repo)}\s*$", content, re.MULTILINE):
            return SpliceResult(step=step, status=SpliceStatus.SKIPPED,
                                message=f'Repository "{repo}" already exists in workflow')
        try:
            updated = self.splice_workflow(content, repo)
        except SpliceError as e:
            return SpliceResult(step=step, status=SpliceStatus.FAILED, message=str(e))

        self.io.write(path, updated)
        logger.info("Workflow %s updated for %s", path, repo)
        return SpliceResult(step=step, status=SpliceStatus.APPLIED, message=f"Updated {self.settings.workflow_path}")

    def add_to_sidebars(self, repo: str) -> SpliceResult:
        step = "sidebars"
        path, content = self._read(self.settings.sidebars_path)
        if content is None:
            return SpliceResult(step=step, status=SpliceStatus.FAILED, message=f"Could not read {path}")

        key = f"{repo}Sidebar"
        if key in content:
            return SpliceResult(step=step, status=SpliceStatus.SKIPPED, message=f'Sidebar "{key}" already exists')

        export_at = content.find("export default sidebars;")
        if export_at == -1:
            return SpliceResult(step=step, status=SpliceStatus.FAILED,
                                message=f"Could not find export statement in {self.settings.sidebars_path}")
        brace_at = content.rfind("};", 0, export_at)
        if brace_at == -1:
            return SpliceResult(step=step, status=SpliceStatus.FAILED,
                                message=f"Could not find closing brace in {self.settings.sidebars_path}")

        updated = content[:brace_at] + self.sidebar_entry(repo) + "\n" + content[brace_at:]
        self.io.write(path, updated)
        return SpliceResult(step=step, status=SpliceStatus.APPLIED,
                            message=f"Added {key} to {self.settings.sidebars_path}")

    def add_to_navbar(self, repo: str) -> SpliceResult:
        step = "navbar"
        path, content = self._read(self.settings.config_path)
        if content is None:
            return SpliceResult(step=step, status=SpliceStatus.FAILED, message=f"Could not read {path}")

        sidebar_id = f"{repo}Sidebar"
        if f"sidebarId: '{sidebar_id}'" in content or f'sidebarId: "{sidebar_id}"' in content:
            return SpliceResult(step=step, status=SpliceStatus.SKIPPED,
                                message=f'Navbar item for "{repo}" already exists')

        match = GITHUB_NAV_ITEM.search(content)
        if not match:
            return SpliceResult(step=step, status=SpliceStatus.FAILED, message="Could not find GitHub link in navbar")

        updated = content[:match.start()] + self.navbar_entry(repo) + content[match.start():]
        self.io.write(path, updated)
        return SpliceResult(step=step, status=SpliceStatus.APPLIED,
                            message=f'Added navbar entry "{to_title_case(repo)}" to {self.settings.config_path}')
