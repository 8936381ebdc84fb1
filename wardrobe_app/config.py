"""Configuration helpers for the wardrobe planner."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Optional

STORAGE_BACKENDS = ("memory", "json", "sqlite")
DEFAULT_STORAGE_PATHS = {
    "json": "data/wardrobe",
    "sqlite": "data/wardrobe.db",
}


@dataclass
class WardrobeConfig:
    """Configuration values for the catalog and its persistence backend.

    ``storage_backend`` chooses the key-value adapter the catalog writes
    through; ``random_seed`` pins the suggestion engine's random source so a
    deployment can reproduce a run.
    """

    storage_backend: str = "json"
    storage_path: Optional[str] = None
    log_level: str = "INFO"
    random_seed: Optional[int] = None
    environment: str | None = None

    def __post_init__(self) -> None:
        self.storage_backend = str(self.storage_backend).strip().lower()
        if self.storage_backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"Unsupported storage backend '{self.storage_backend}'. Allowed: {list(STORAGE_BACKENDS)}"
            )
        if not self.storage_path:
            self.storage_path = DEFAULT_STORAGE_PATHS.get(self.storage_backend)

    @classmethod
    def from_env(cls) -> "WardrobeConfig":
        """Build a config from environment variables or an environment file.

        Environment specific files live in ``config/environments/<env>.yaml`` by
        default; environment variables take precedence over file values.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("WARDROBE_CONFIG_DIR", "config/environments"))
        file_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            file_config = cls._load_config_file(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            env_key = f"WARDROBE_{key.upper()}"
            return os.getenv(env_key, file_config.get(key, default))

        raw_seed = get_value("random_seed")
        return cls(
            storage_backend=str(get_value("storage_backend", "json") or "json"),
            storage_path=get_value("storage_path"),
            log_level=str(os.getenv("LOG_LEVEL", file_config.get("log_level", "INFO"))),
            random_seed=int(raw_seed) if raw_seed not in (None, "") else None,
            environment=env_name,
        )

    @staticmethod
    def _load_config_file(path: Path) -> dict:
        """Parse a flat ``key: value`` file."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if (value.startswith("\"") and value.endswith("\"")) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            config[key.strip()] = value
        return config


__all__ = ["WardrobeConfig", "STORAGE_BACKENDS", "DEFAULT_STORAGE_PATHS"]
