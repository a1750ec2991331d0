"""Configuration loader for SeaState Go/No-Go."""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional, List


class Config:
    """Loads and validates config.yaml."""

    def __init__(self, config_path: Optional[Path] = None):
        if config_path is None:
            # Default: config.yaml in project root
            config_path = Path(__file__).parent.parent.parent / "config.yaml"

        with open(config_path, "r") as f:
            self._data: Dict[str, Any] = yaml.safe_load(f) or {}

        self._validate()

    def _validate(self):
        """Basic validation of required fields."""
        required_sections = [
            "project",
            "data",
            "feasibility",
            "windowing",
            "api",
        ]
        for section in required_sections:
            if section not in self._data:
                raise ValueError(f"Missing required config section: {section}")

        ratio = self.caution_ratio
        if not 0 < ratio <= 1:
            raise ValueError(f"feasibility.caution_ratio must be in (0, 1], got {ratio}")
        if self.period_tolerance_s < 0:
            raise ValueError("feasibility.period_tolerance_s must be >= 0")
        if self.min_padding < 0:
            raise ValueError("windowing.min_padding must be >= 0")

    # Project settings
    @property
    def project_name(self) -> str:
        return self._data["project"]["name"]

    @property
    def project_id(self) -> Optional[str]:
        """Project to evaluate; None selects the first project in the document."""
        return self._data["project"].get("project_id")

    # Data file paths
    @property
    def data_dir(self) -> Path:
        """Return data directory path."""
        return Path(__file__).parent.parent.parent / "data"

    @property
    def project_file(self) -> Path:
        return self.data_dir / self._data["data"]["project_file"]

    @property
    def forecast_file(self) -> Path:
        return self.data_dir / self._data["data"]["forecast_file"]

    # Feasibility thresholds
    @property
    def caution_ratio(self) -> float:
        return float(self._data["feasibility"]["caution_ratio"])

    @property
    def period_tolerance_s(self) -> float:
        return float(self._data["feasibility"]["period_tolerance_s"])

    # Zoom windowing
    @property
    def min_padding(self) -> int:
        return int(self._data["windowing"]["min_padding"])

    @property
    def padding_fraction(self) -> float:
        return float(self._data["windowing"]["padding_fraction"])

    # API settings
    @property
    def cors_origins(self) -> List[str]:
        return list(self._data["api"].get("cors_origins", []))


# Global config instance
_config: Optional[Config] = None


def get_config(config_path: Optional[Path] = None) -> Config:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = Config(config_path)
    return _config
