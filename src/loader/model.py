# src/loader/model.py (Loader Layer)
from typing import List

from pydantic import BaseModel, Field, field_validator

from mdx_compat.core.managers.config_manager import config_manager


class LoaderSettings(BaseModel):
    roots: List[str] = Field(default_factory=lambda: ["docs", "blog"])
    extension: str = ".md"

    @field_validator("extension")
    @classmethod
    def ensure_leading_dot(cls, v: str) -> str:
        v = v.strip()
        if v and not v.startswith("."):
            return "." + v
        return v

    @classmethod
    def from_config(cls) -> "LoaderSettings":
        return cls(**(config_manager.get_nested("loader", {}) or {}))
