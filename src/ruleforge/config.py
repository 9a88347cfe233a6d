"""Runtime configuration for RuleForge."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from ruleforge.types import DEFAULT_LOCALE


@dataclass
class EngineConfig:
    """Engine defaults read from the environment.

    Attributes:
        locale: Locale new engines start with
        locale_dir: Directory of extra YAML locale files, if any
    """

    locale: str = DEFAULT_LOCALE
    locale_dir: Path | None = None

    @classmethod
    def from_env(cls) -> EngineConfig:
        """Create config from environment variables.

        - RULEFORGE_LOCALE: default locale (falls back to "en")
        - RULEFORGE_LOCALE_DIR: directory of locale YAML files
        """
        locale = os.environ.get("RULEFORGE_LOCALE") or DEFAULT_LOCALE
        locale_dir = os.environ.get("RULEFORGE_LOCALE_DIR")
        return cls(
            locale=locale,
            locale_dir=Path(locale_dir) if locale_dir else None,
        )
