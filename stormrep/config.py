"""
Run configuration
=================

The dataset path is always passed in explicitly; nothing is looked up
relative to the current working directory.
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class PipelineConfig:
    """Inputs to one pipeline run."""
    data_path: Path
    # Rows per ranked table
    top_n: int = 6
    # Write a rotating log file here as well as to the console
    log_dir: Optional[Path] = None

    def __post_init__(self) -> None:
        self.data_path = Path(self.data_path)
        if self.log_dir is not None:
            self.log_dir = Path(self.log_dir)
        if self.top_n < 1:
            raise ValueError("top_n must be at least 1")
