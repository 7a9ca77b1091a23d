"""Configuration model for the mcanswers command line."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator

DEFAULT_DATA_DIR = Path.home() / ".mcanswers"


class Settings(BaseModel):
    log_level: str = "WARNING"
    json_indent: int = Field(default=2, ge=0)
    report_id_limit: int = Field(default=50, ge=0)
    data_dir: Path = DEFAULT_DATA_DIR

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    def get_log_level(self) -> str:
        return (os.environ.get("MCANSWERS_LOG_LEVEL") or self.log_level).upper()

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        config_path = config_path or DEFAULT_DATA_DIR / "config.yaml"
        if config_path.exists():
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
            return cls(**data)
        return cls()

    def save(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        config_path = self.data_dir / "config.yaml"
        with open(config_path, "w") as f:
            yaml.dump(self.model_dump(mode="json"), f, default_flow_style=False)
