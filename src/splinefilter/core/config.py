"""
Configuration dataclass for spline smoothing.

This module provides the configuration class controlling the node-grid
search, CSV column selection and logging for smoothing runs, with YAML
serialization so that a run can be reproduced from a file.
"""

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@dataclass
class SplineConfig:
    """
    Configuration for fitting smoothing B-splines.

    The grid-search constants decide the node count M; changing them changes
    the size of every matrix built for a domain.

    Parameters
    ----------
    wavelength : Optional[float]
        Default cutoff wavelength used by ``SplineSmoother`` when none is
        passed explicitly. Variation shorter than this is smoothed away.
        Default: None (must be given per call).
    initial_intervals : int
        Interval count the grid search starts from. Default: 9.
    min_intervals_per_wavelength : float
        Grid grows until the cutoff wavelength spans at least this many node
        intervals. Default: 2.0.
    target_intervals_per_wavelength : float
        Refinement continues while fewer intervals than this span the
        wavelength. Default: 4.0.
    max_intervals_per_wavelength : float
        Refinement never goes beyond this many intervals per wavelength.
        Default: 15.0.
    max_points_per_node : float
        Refinement continues while there are more samples per node than this.
        Default: 2.0.
    x_column : str
        Column holding the abscissas when loading samples from CSV. Default: 'x'.
    y_column : str
        Column holding the values when loading samples from CSV. Default: 'y'.
    log_level : str
        Logging level for ``setup_logging``. Default: 'INFO'.

    Examples
    --------
    >>> config = SplineConfig(wavelength=5.0)
    >>> config.to_yaml_file("spline_config.yaml")
    >>> loaded = SplineConfig.from_yaml_file("spline_config.yaml")
    """

    wavelength: Optional[float] = None

    # Node-grid search
    initial_intervals: int = 9
    min_intervals_per_wavelength: float = 2.0
    target_intervals_per_wavelength: float = 4.0
    max_intervals_per_wavelength: float = 15.0
    max_points_per_node: float = 2.0

    # Input columns
    x_column: str = "x"
    y_column: str = "y"

    log_level: str = "INFO"

    def __post_init__(self):
        """Validate configuration parameters after initialization."""
        if self.wavelength is not None and self.wavelength <= 0:
            raise ValueError(f"wavelength must be positive, got {self.wavelength}")

        # Corner blocks of the system matrix must not overlap
        if self.initial_intervals < 7:
            raise ValueError(f"initial_intervals must be >= 7, got {self.initial_intervals}")
        if self.min_intervals_per_wavelength <= 0:
            raise ValueError(
                f"min_intervals_per_wavelength must be positive, got {self.min_intervals_per_wavelength}"
            )
        if self.target_intervals_per_wavelength < self.min_intervals_per_wavelength:
            raise ValueError(
                f"target_intervals_per_wavelength ({self.target_intervals_per_wavelength}) must be >= "
                f"min_intervals_per_wavelength ({self.min_intervals_per_wavelength})"
            )
        if self.max_intervals_per_wavelength < self.target_intervals_per_wavelength:
            raise ValueError(
                f"max_intervals_per_wavelength ({self.max_intervals_per_wavelength}) must be >= "
                f"target_intervals_per_wavelength ({self.target_intervals_per_wavelength})"
            )
        if self.max_points_per_node < 1.0:
            raise ValueError(f"max_points_per_node must be >= 1, got {self.max_points_per_node}")

        if not self.x_column or not self.y_column:
            raise ValueError("x_column and y_column must be non-empty")
        if self.x_column == self.y_column:
            raise ValueError(f"x_column and y_column must differ, both are '{self.x_column}'")

        if self.log_level.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {VALID_LOG_LEVELS}, got '{self.log_level}'")

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert configuration to dictionary for serialization.

        Returns
        -------
        Dict[str, Any]
            Dictionary representation of configuration.
        """
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SplineConfig":
        """
        Create configuration from dictionary.

        Parameters
        ----------
        data : Dict[str, Any]
            Dictionary with configuration parameters. Unknown keys are ignored.

        Returns
        -------
        SplineConfig
            Configuration instance.
        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered_data = {k: v for k, v in data.items() if k in valid_fields}
        return cls(**filtered_data)

    def to_yaml_file(self, filepath: Path) -> Path:
        """
        Save configuration to YAML file.

        Parameters
        ----------
        filepath : Path
            Output YAML file path.

        Returns
        -------
        Path
            Path to written file.
        """
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        with open(filepath, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

        return filepath

    @classmethod
    def from_yaml_file(cls, filepath: Path) -> "SplineConfig":
        """
        Load configuration from YAML file.

        Parameters
        ----------
        filepath : Path
            Input YAML file path.

        Returns
        -------
        SplineConfig
            Configuration instance.

        Raises
        ------
        FileNotFoundError
            If the file does not exist.
        ValueError
            If the file does not hold a YAML mapping.
        """
        filepath = Path(filepath)

        if not filepath.exists():
            raise FileNotFoundError(f"Config file not found: {filepath}")

        with open(filepath, "r") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Failed to load config from {filepath}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Failed to load config from {filepath}: expected a mapping")

        return cls.from_dict(data)

    def copy_with_overrides(self, **kwargs) -> "SplineConfig":
        """
        Create a copy with specified parameters overridden.

        Examples
        --------
        >>> config = SplineConfig(wavelength=4.0)
        >>> wider = config.copy_with_overrides(wavelength=8.0)
        """
        current_dict = self.to_dict()
        current_dict.update(kwargs)
        return self.from_dict(current_dict)


def export_default_spline_config(output_dir: Path, filename: str = "spline_config.yaml") -> Path:
    """
    Export default configuration template to YAML file.

    Parameters
    ----------
    output_dir : Path
        Directory to save configuration file.
    filename : str
        Output filename. Default: 'spline_config.yaml'.

    Returns
    -------
    Path
        Path to exported configuration file.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    filepath = output_dir / filename
    SplineConfig().to_yaml_file(filepath)

    return filepath
