# src/onboarding/model.py (Onboarding Layer)
from enum import Enum

from pydantic import BaseModel

from mdx_compat.core.managers.config_manager import config_manager


class SpliceStatus(str, Enum):
    APPLIED = "applied"
    SKIPPED = "skipped"
    FAILED = "failed"


class SpliceResult(BaseModel):
    """Outcome of one onboarding step. A failed step never leaves a partial edit behind."""
    step: str
    status: SpliceStatus
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status != SpliceStatus.FAILED


class OnboardingSettings(BaseModel):
    owner: str = "mwinfiel0331"
    template_repo: str = "birddogger"
    workflow_path: str = ".github/workflows/sync-docs.yml"
    sidebars_path: str = "sidebars.ts"
    config_path: str = "docusaurus.config.ts"
    docs_dir: str = "docs"

    @classmethod
    def from_config(cls) -> "OnboardingSettings":
        return cls(**(config_manager.get_nested("onboarding", {}) or {}))
