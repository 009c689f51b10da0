"""Application configuration.

Loads settings from ~/.curio/config.json and environment variables.
"""

import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from .progress import MasteryPolicy
from .selection import ExclusionPolicy

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path.home() / ".curio"
DEFAULT_CONFIG_PATH = DEFAULT_DATA_DIR / "config.json"

PROVIDERS = ("groq", "deepseek", "none")

_POSITIVE_INTS = ("min_pool_size", "generation_count", "batch_size", "daily_count", "cooldown_days")
_NON_NEGATIVE_FLOATS = ("cache_ttl_seconds", "batch_delay", "request_timeout")


@dataclass
class CurioConfig:
    """Configuration for the fact deck.

    Attributes:
        data_dir: Directory holding the database and logs.
        db_path: SQLite file for progress, profile and bookmarks.
        profile_id: Which local profile's data to use.
        provider: Fact generator backend: groq, deepseek or none.
        model: Model name for the generator.
        deepseek_url: Chat completions endpoint for the deepseek provider.
        cache_ttl_seconds: How long generated facts count as fresh.
        min_pool_size: Generate more when fewer matching facts remain.
        generation_count: Facts requested per top-up.
        batch_size: Topics generated concurrently.
        batch_delay: Seconds to pause between generation batches.
        request_timeout: Seconds before a generation request is abandoned.
        daily_count: Facts per daily deck.
        cooldown_days: Days before a seen fact can come back.
        mastery_policy: Rule for mastering a fact.
        exclusion_policy: Rule for re-showing seen facts.
    """

    data_dir: Path = field(default_factory=lambda: DEFAULT_DATA_DIR)
    db_path: Path | None = None
    profile_id: str = "default"
    provider: str = "groq"
    model: str = "llama-3.1-70b-versatile"
    deepseek_url: str = "https://api.deepseek.com/v1/chat/completions"
    cache_ttl_seconds: float = 1800
    min_pool_size: int = 10
    generation_count: int = 20
    batch_size: int = 5
    batch_delay: float = 1.0
    request_timeout: float = 30.0
    daily_count: int = 3
    cooldown_days: int = 30
    mastery_policy: MasteryPolicy = MasteryPolicy.FIRST_ATTEMPT
    exclusion_policy: ExclusionPolicy = ExclusionPolicy.COOLDOWN

    def __post_init__(self) -> None:
        """Validate config and set defaults."""
        self.data_dir = Path(self.data_dir).expanduser()
        if self.db_path is None:
            self.db_path = self.data_dir / "curio.db"

        if self.provider not in PROVIDERS:
            raise ValueError(f"provider must be one of {PROVIDERS}, got {self.provider!r}")

        for name in _POSITIVE_INTS:
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1")

        for name in _NON_NEGATIVE_FLOATS:
            if getattr(self, name) < 0:
                raise ValueError(f"{name} cannot be negative")

    @property
    def log_dir(self) -> Path:
        return self.data_dir / "logs"


def load_config(config_path: Path | None = None) -> CurioConfig:
    """Load CurioConfig from a JSON file.

    The config file should have this structure:
    ```json
    {
      "curio": {
        "profile_id": "default",
        "provider": "groq",
        "cache_ttl_seconds": 1800,
        "daily_count": 3
      }
    }
    ```

    Args:
        config_path: Path to config file. Uses DEFAULT_CONFIG_PATH if None.

    Returns:
        CurioConfig instance with loaded values.
    """
    path = config_path or DEFAULT_CONFIG_PATH

    if not path.exists():
        logger.debug("No config file at %s, using defaults", path)
        return CurioConfig()

    try:
        with open(path, "r") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.warning("Invalid JSON in %s: %s. Using defaults.", path, e)
        return CurioConfig()
    except OSError as e:
        logger.warning("Cannot read %s: %s. Using defaults.", path, e)
        return CurioConfig()

    if not isinstance(data, dict):
        logger.warning("Config in %s is not an object. Using defaults.", path)
        return CurioConfig()

    return _parse_config(data)


def _parse_config(data: dict[str, Any]) -> CurioConfig:
    """Parse config dictionary into CurioConfig.

    Values that are missing or invalid keep their defaults.
    """
    section = data.get("curio", {})
    if not isinstance(section, dict):
        section = {}

    defaults = CurioConfig()
    kwargs: dict[str, Any] = {}

    for name in ("data_dir", "db_path"):
        value = section.get(name)
        if isinstance(value, str) and value:
            kwargs[name] = Path(value).expanduser()

    for name in ("profile_id", "model", "deepseek_url"):
        value = section.get(name)
        if isinstance(value, str) and value:
            kwargs[name] = value

    provider = section.get("provider")
    if provider in PROVIDERS:
        kwargs["provider"] = provider

    for name in _POSITIVE_INTS:
        value = section.get(name)
        if isinstance(value, int) and not isinstance(value, bool) and value >= 1:
            kwargs[name] = value

    for name in _NON_NEGATIVE_FLOATS:
        value = section.get(name)
        if isinstance(value, (int, float)) and not isinstance(value, bool) and value >= 0:
            kwargs[name] = float(value)

    try:
        kwargs["mastery_policy"] = MasteryPolicy(
            section.get("mastery_policy", defaults.mastery_policy.value)
        )
    except ValueError:
        logger.warning("Unknown mastery_policy %r, using default", section.get("mastery_policy"))

    try:
        kwargs["exclusion_policy"] = ExclusionPolicy(
            section.get("exclusion_policy", defaults.exclusion_policy.value)
        )
    except ValueError:
        logger.warning(
            "Unknown exclusion_policy %r, using default", section.get("exclusion_policy")
        )

    return CurioConfig(**kwargs)


def save_config(config: CurioConfig, config_path: Path | None = None) -> None:
    """Save CurioConfig to a JSON file, writing only non-default values.

    Args:
        config: The config to save.
        config_path: Path to write to. Uses DEFAULT_CONFIG_PATH if None.
    """
    path = config_path or DEFAULT_CONFIG_PATH

    # Ensure parent directory exists
    path.parent.mkdir(parents=True, exist_ok=True)

    defaults = CurioConfig(data_dir=config.data_dir)
    section: dict[str, Any] = {}
    for f in fields(CurioConfig):
        value = getattr(config, f.name)
        if f.name != "data_dir" and value == getattr(defaults, f.name):
            continue
        if f.name == "data_dir" and value == DEFAULT_DATA_DIR:
            continue
        if isinstance(value, Path):
            value = str(value)
        elif isinstance(value, (MasteryPolicy, ExclusionPolicy)):
            value = value.value
        section[f.name] = value

    data: dict[str, Any] = {"curio": section} if section else {}

    try:
        with open(path, "w") as f:
            json.dump(data, f, indent=2)
    except OSError as e:
        logger.error("Failed to save config to %s: %s", path, e)
        raise


def config_from_env(config: CurioConfig | None = None) -> CurioConfig:
    """Apply environment variable overrides on top of a config."""
    config = config or load_config()
    overrides: dict[str, Any] = {}

    provider = os.getenv("CURIO_PROVIDER")
    if provider:
        if provider.lower() in PROVIDERS:
            overrides["provider"] = provider.lower()
        else:
            logger.warning("Ignoring unknown CURIO_PROVIDER=%r", provider)

    model = os.getenv("GROQ_MODEL")
    if model:
        overrides["model"] = model

    profile = os.getenv("CURIO_PROFILE")
    if profile:
        overrides["profile_id"] = profile

    data_dir = os.getenv("CURIO_DATA_DIR")
    if data_dir:
        overrides["data_dir"] = Path(data_dir)
        overrides["db_path"] = None

    ttl = os.getenv("CURIO_CACHE_TTL")
    if ttl:
        try:
            overrides["cache_ttl_seconds"] = float(ttl)
        except ValueError:
            logger.warning("Ignoring invalid CURIO_CACHE_TTL=%r", ttl)

    if not overrides:
        return config

    values = {f.name: getattr(config, f.name) for f in fields(CurioConfig)}
    values.update(overrides)
    return CurioConfig(**values)
