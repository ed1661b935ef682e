from __future__ import annotations

import codecs
import json
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from jobtail.scanner import CHUNK_SIZE, MAX_LINE_LENGTH


MAX_LINES_CAP = 100_000


class TailConfig(BaseModel):
    default_lines: int = Field(default=500, gt=0)
    max_lines_cap: int = Field(default=MAX_LINES_CAP, gt=0, le=MAX_LINES_CAP)


class ScannerConfig(BaseModel):
    max_line_length: int = Field(default=MAX_LINE_LENGTH, gt=0)
    chunk_size: int = Field(default=CHUNK_SIZE, gt=0)
    encoding: str = "utf-8"
    errors: Literal["strict", "replace", "ignore", "backslashreplace"] = "replace"

    @field_validator("encoding")
    @classmethod
    def _known_encoding(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError as exc:
            raise ValueError(f"Unknown encoding: {value}") from exc
        return value


class JobTailConfig(BaseModel):
    tail: TailConfig = Field(default_factory=TailConfig)
    scanner: ScannerConfig = Field(default_factory=ScannerConfig)
    verbosity: int = 0


def load_config(path: Path | None) -> JobTailConfig:
    if path is None:
        return JobTailConfig()
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    content = path.read_text(encoding="utf-8")
    if path.suffix.lower() in {".yaml", ".yml"}:
        data = yaml.safe_load(content) or {}
    else:
        data = json.loads(content)
    try:
        return JobTailConfig.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid config: {exc}") from exc


def merge_config(base: JobTailConfig, overrides: dict[str, Any]) -> JobTailConfig:
    payload = base.model_dump(mode="python")
    for key, value in overrides.items():
        if value is None:
            continue
        if isinstance(value, dict) and isinstance(payload.get(key), dict):
            payload[key] = {**payload[key], **{k: v for k, v in value.items() if v is not None}}
            continue
        payload[key] = value
    try:
        return JobTailConfig.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(f"Invalid config: {exc}") from exc
