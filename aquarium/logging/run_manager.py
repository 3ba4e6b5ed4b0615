"""
Run Manager for the Aquarium Simulator.

Manages output directories for simulation runs:
  - Creates timestamped run directories under a base output path
  - Copies the config used for the run
  - Provides the metrics CSV path and writes the final summary

Run output is write-only diagnostics; nothing here is ever read back into an
engine.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from aquarium.core.config import SimConfig, save_config
from aquarium.logging.kpi_table import KPITable

logger = logging.getLogger(__name__)


class RunManager:
    """
    Manages a single simulation run's output directory.

    Directory structure:
        {base_dir}/{run_name}/
            config.json          (copy of the simulation config)
            metrics.csv          (sampled per-tick KPIs)
            summary.json         (written by finalize)

    Attributes:
        run_dir: Path to this run's output directory.
        kpi_table: KPITable holding the sampled tick KPIs.
    """

    def __init__(
        self,
        config: SimConfig,
        base_dir: Optional[str | Path] = None,
        run_name: Optional[str] = None,
    ):
        """
        Initialize a run manager and create the output directory.

        Args:
            config: Simulation configuration (will be saved as config.json).
            base_dir: Base output directory. None = use config.viz.output_dir.
            run_name: Name for this run's subdirectory. None = timestamp.
        """
        if base_dir is None:
            base_dir = config.viz.output_dir

        if run_name is None:
            run_name = datetime.now().strftime("%Y%m%d_%H%M%S")

        self.run_dir = Path(base_dir) / run_name
        self.run_dir.mkdir(parents=True, exist_ok=True)

        config_path = self.run_dir / "config.json"
        save_config(config, config_path)
        self._config_path = config_path

        self.kpi_table = KPITable(self.run_dir / "metrics.csv")
        logger.info("Run output directory: %s", self.run_dir)

    @property
    def config_path(self) -> Path:
        """Path to the saved config file."""
        return self._config_path

    @property
    def metrics_path(self) -> Path:
        """Path to the metrics CSV file."""
        return self.kpi_table.file_path

    @property
    def summary_path(self) -> Path:
        return self.run_dir / "summary.json"

    def log_tick(self, kpi_dict: dict) -> None:
        """Log one tick's KPIs to CSV."""
        self.kpi_table.append(kpi_dict)

    def finalize(self, summary: Optional[dict] = None) -> None:
        """
        Finalize the run (write summary file if provided).

        Args:
            summary: Optional summary dict to save as summary.json.
        """
        if summary is not None:
            with open(self.summary_path, "w", encoding="utf-8") as f:
                json.dump(summary, f, indent=2, ensure_ascii=False)

    @staticmethod
    def list_runs(base_dir: str | Path) -> list[str]:
        """
        List all run directories under the base directory.

        Args:
            base_dir: Base output directory.

        Returns:
            Sorted list of run directory names.
        """
        base = Path(base_dir)
        if not base.exists():
            return []
        return sorted(
            d.name for d in base.iterdir()
            if d.is_dir() and (d / "config.json").exists()
        )

    def __repr__(self) -> str:
        return f"RunManager(run_dir='{self.run_dir}')"
