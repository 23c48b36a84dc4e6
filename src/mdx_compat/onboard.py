from __future__ import annotations

import logging
import sys
from typing import List, Optional

from mdx_compat.core.managers.config_manager import config_manager
from mdx_compat.core.utils.configure_logging import configure_logger
from mdx_compat.core.utils.path_utils import PathUtils
from onboarding.controllers.onboarding_controller import OnboardingController
from onboarding.model import OnboardingSettings, SpliceStatus
from onboarding.services.repo_name_service import extract_repo_name

logger = logging.getLogger(__name__)

RULE = "━" * 60

STATUS_ICONS = {
    SpliceStatus.APPLIED: "✓",
    SpliceStatus.SKIPPED: "⚠",
    SpliceStatus.FAILED: "❌",
}


def _print_usage() -> None:
    print("Usage: mdx-add-repo <repo-name>")
    print("")
    print("Examples:")
    print("  mdx-add-repo nextinvestment")
    print("  mdx-add-repo https://github.com/mwinfiel0331/nextinvestment")


def main(argv: Optional[List[str]] = None) -> int:
    """Entrypoint for the 'mdx-add-repo' command."""
    args = sys.argv[1:] if argv is None else argv
    configure_logger(config_manager.get_nested("debug.level", "WARNING"))

    if not args or not args[0].strip():
        _print_usage()
        return 1

    settings = OnboardingSettings.from_config()
    repo = extract_repo_name(args[0])

    print("")
    print("Adding repository to documentation site")
    print(RULE)
    print(f"Repository: {settings.owner}/{repo}")
    print("")

    controller = OnboardingController(settings, PathUtils.get_invocation_root())
    try:
        results = controller.run(args[0])
    except ValueError as e:
        print(f"❌ {e}")
        return 1

    for result in results:
        print(f"{STATUS_ICONS[result.status]} {result.message}")

    if not results[0].ok:
        return 1

    print("")
    print(RULE)
    print("✅ Repository added successfully!")
    print("")
    print("Next steps:")
    print(f"  1. Ensure {repo} has a /docs folder with markdown files")
    print("  2. Commit the changes")
    print('  3. Run the "Sync project docs" workflow in GitHub Actions')
    print("")
    return 0


if __name__ == "__main__":
    sys.exit(main())
