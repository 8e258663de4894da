"""Executable resolution for the poppler tools."""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass, fields
from pathlib import Path
from typing import List, Mapping, Optional

_LOGGER = logging.getLogger("pdf_process.config")

POPPLER_PATH_ENV = "PDF_PROCESS_POPPLER_PATH"
TOOL_ENV_PREFIX = "PDF_PROCESS_"


@dataclass(frozen=True)
class ToolConfig:
    """Names or paths of the poppler executables to invoke."""

    pdfinfo: str = "pdfinfo"
    pdftocairo: str = "pdftocairo"
    pdftotext: str = "pdftotext"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ToolConfig":
        """Build a config from ``PDF_PROCESS_*`` environment variables.

        ``PDF_PROCESS_POPPLER_PATH`` names a directory holding all three
        executables; ``PDF_PROCESS_PDFINFO`` and friends override a single tool
        and take precedence over the directory.
        """

        env = os.environ if environ is None else environ
        poppler_path = env.get(POPPLER_PATH_ENV)

        values = {}
        for field in fields(cls):
            override = env.get(f"{TOOL_ENV_PREFIX}{field.name.upper()}")
            if override:
                values[field.name] = override
            elif poppler_path:
                values[field.name] = str(Path(poppler_path).expanduser() / field.name)
        config = cls(**values)
        _LOGGER.debug("Resolved tool config: %s", config)
        return config

    def missing(self) -> List[str]:
        """Return the executables that cannot be found."""

        return [
            getattr(self, field.name)
            for field in fields(self)
            if shutil.which(getattr(self, field.name)) is None
        ]


def get_default_config() -> ToolConfig:
    """Return the config derived from the current environment."""

    return ToolConfig.from_env()


__all__ = ["ToolConfig", "get_default_config", "POPPLER_PATH_ENV"]
