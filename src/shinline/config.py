"""Execution configuration"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field


class ExecConfig(BaseModel):
    """How strict-mode scripts are run.

    Example shinline.yaml:

        shell: /bin/bash
        capture_output: true
    """

    model_config = {"extra": "forbid", "frozen": True}

    shell: str = Field(default="bash", description="Shell interpreter binary")
    capture_output: bool = Field(
        default=False,
        description="Capture stdout/stderr instead of inheriting the parent's streams",
    )

    @classmethod
    def load(cls, path: Path) -> "ExecConfig":
        """Load config from yaml file"""
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.model_validate(data)
