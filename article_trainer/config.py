from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.json"

DEFAULTS = {
    "default_level": "A1",
    "levels": ["A1", "A2"],
    "session_size": 20,
    "data_dir": "data",
    "filename_template": "german_nouns_{level}.csv",
    "auto_advance_seconds": 3.0,
    "random_seed": None,
}


@dataclass
class Settings:
    default_level: str = DEFAULTS["default_level"]
    levels: list[str] = field(default_factory=lambda: list(DEFAULTS["levels"]))
    session_size: int = DEFAULTS["session_size"]
    data_dir: str = DEFAULTS["data_dir"]
    filename_template: str = DEFAULTS["filename_template"]
    auto_advance_seconds: float = DEFAULTS["auto_advance_seconds"]
    random_seed: int | None = DEFAULTS["random_seed"]

    @property
    def project_root(self) -> Path:
        return Path(__file__).resolve().parent.parent

    @property
    def data_path(self) -> Path:
        # Absolute data_dir values survive the join unchanged
        return self.project_root / self.data_dir

    def to_dict(self) -> dict:
        return {
            "default_level": self.default_level,
            "levels": self.levels,
            "session_size": self.session_size,
            "data_dir": self.data_dir,
            "filename_template": self.filename_template,
            "auto_advance_seconds": self.auto_advance_seconds,
            "random_seed": self.random_seed,
        }


def load_settings() -> Settings:
    if CONFIG_PATH.exists():
        raw = json.loads(CONFIG_PATH.read_text())
        known = {f.name for f in Settings.__dataclass_fields__.values()}
        filtered = {k: v for k, v in raw.items() if k in known}
        return Settings(**filtered)
    return Settings()


def save_settings(settings: Settings) -> None:
    CONFIG_PATH.write_text(json.dumps(settings.to_dict(), indent=4) + "\n")
