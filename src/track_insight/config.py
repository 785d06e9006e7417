"""Configuration loading and management for Track Insight.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig / QueryThresholds)
    2. Project config (./track-insight.toml)
    3. Explicit config file
    4. Environment variables (TRACK_INSIGHT_* prefix)
    5. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(workers=4)
    >>> config.workers
    4
    >>> config.thresholds.min_danceability
    0.8
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

# Type aliases for clarity
Verbosity = Literal["quiet", "normal", "verbose"]
OutputFormat = Literal["rich", "json", "csv"]

ENV_PREFIX = "TRACK_INSIGHT_"
PROJECT_CONFIG_NAME = "track-insight.toml"


@dataclass(frozen=True)
class QueryThresholds:
    """Constants the named queries filter and limit by.

    Attributes:
        Limits:
            top_viewed_limit: Rows returned by the most-viewed query
            top_artists_limit: Artists returned by the stream leaderboard
            top_per_platform: Tracks kept per most-played-on platform
            top_per_album: Rank cutoff inside a single album

        Audio feature filters (exclusive bounds):
            min_danceability: Danceability floor for danceable+energetic tracks
            min_energy: Energy floor for danceable+energetic tracks
            min_liveness: Liveness floor for live-sounding tracks
            max_acousticness: Acousticness ceiling for live-sounding tracks

        Album filters (exclusive bounds):
            album_min_streams: Total streams an album must exceed
            album_min_tracks: Track count an album must exceed
            album_min_views: Total views an album must exceed
    """

    # === Limits ===
    top_viewed_limit: int = 10
    top_artists_limit: int = 5
    top_per_platform: int = 3
    top_per_album: int = 3

    # === Audio features ===
    min_danceability: float = 0.8
    min_energy: float = 0.7
    min_liveness: float = 0.8
    max_acousticness: float = 0.2

    # === Albums ===
    album_min_streams: float = 1_000_000
    album_min_tracks: int = 5
    album_min_views: float = 2_000_000_000

    def __post_init__(self) -> None:
        """Validate threshold configuration."""
        # Bounded features live in [0, 1]
        for field_name in ("min_danceability", "min_energy", "min_liveness", "max_acousticness"):
            value = getattr(self, field_name)
            if not 0.0 <= value <= 1.0:
                raise InvalidConfigError(field_name, value, "must be between 0.0 and 1.0")

        for field_name in ("top_viewed_limit", "top_artists_limit", "top_per_platform", "top_per_album"):
            value = getattr(self, field_name)
            if value < 1:
                raise InvalidConfigError(field_name, value, "must be at least 1")

        for field_name in ("album_min_streams", "album_min_tracks", "album_min_views"):
            value = getattr(self, field_name)
            if value < 0:
                raise InvalidConfigError(field_name, value, "must be non-negative")


# Default threshold configuration (singleton)
DEFAULT_THRESHOLDS = QueryThresholds()


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for loading data and running queries.

    Attributes:
        strict_validation: Reject out-of-range features and negative counts
        workers: Threads used by run-all (1 = sequential)
        output_format: Default renderer for the CLI
        verbosity: Logging verbosity level
        thresholds: Query constants
    """

    strict_validation: bool = True
    workers: int = 1
    output_format: OutputFormat = "rich"
    verbosity: Verbosity = "normal"

    # Query constants (nested config)
    thresholds: QueryThresholds = field(default_factory=QueryThresholds)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.workers < 1:
            raise InvalidConfigError("workers", self.workers, "must be at least 1")
        if self.output_format not in ("rich", "json", "csv"):
            raise InvalidConfigError("output_format", self.output_format, "expected rich, json or csv")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError("verbosity", self.verbosity, "expected quiet, normal or verbose")


DEFAULT_CONFIG = AnalysisConfig()


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``verbose``
            and ``quiet`` booleans are mapped onto ``verbosity``.

    Returns:
        Validated AnalysisConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
    """
    merged: dict = {}

    # 1. Project config
    project_config = Path.cwd() / PROJECT_CONFIG_NAME
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Invalid project config '{project_config}': {e}")

    # 2. Explicit config file
    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Invalid config file '{config_file}': {e}")

    # 3. Environment variables
    merged.update(_load_env_vars())

    # 4. CLI overrides
    if overrides.pop("verbose", False):
        overrides["verbosity"] = "verbose"
    if overrides.pop("quiet", False):
        overrides["verbosity"] = "quiet"
    merged.update({k: v for k, v in overrides.items() if v is not None})

    # Handle [thresholds] section from TOML
    thresholds = merged.pop("thresholds", None)
    if isinstance(thresholds, dict):
        try:
            merged["thresholds"] = QueryThresholds(**thresholds)
        except TypeError as e:
            raise ConfigurationError(f"Invalid [thresholds] config: {e}")
    elif isinstance(thresholds, QueryThresholds):
        merged["thresholds"] = thresholds

    try:
        return AnalysisConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from TRACK_INSIGHT_* environment variables.

    Supported environment variables:
        TRACK_INSIGHT_STRICT_VALIDATION: bool (true/false/1/0)
        TRACK_INSIGHT_WORKERS: int
        TRACK_INSIGHT_OUTPUT_FORMAT: rich/json/csv
        TRACK_INSIGHT_VERBOSITY: quiet/normal/verbose

    Returns:
        Dict of field_name -> parsed_value for any TRACK_INSIGHT_* vars found.
    """
    type_hints = get_type_hints(AnalysisConfig)

    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hints.get(field_name))
        except ValueError as e:
            raise ConfigurationError(f"Invalid {env_key}: {e}")
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the annotated type.

    Returns None for types that can't come from the environment.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    # String (including Literal types like Verbosity)
    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If tomllib/tomli not available
        Exception: If TOML parsing fails
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            # Fallback to tomli for Python 3.9-3.10
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
