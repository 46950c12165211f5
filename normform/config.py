"""Global configuration and registry path resolution.

Resolution order for the norm registry:
    1. NORMFORM_NORM_REGISTRY environment variable
    2. default_norm_registry_path in $NORMFORM_HOME/config.yaml
    3. The registry shipped inside the package
"""

import os
from pathlib import Path

import yaml
from pydantic import BaseModel

PACKAGE_DATA = Path(__file__).parent / "data"


class GlobalConfig(BaseModel):
    """Settings read from config.yaml."""

    default_norm_registry_path: str | None = None
    schema_dir: str | None = None


def get_normform_home() -> Path:
    """Directory holding config.yaml (default ~/.config/normform)."""
    env_path = os.environ.get("NORMFORM_HOME")
    if env_path:
        return Path(env_path)
    return Path.home() / ".config" / "normform"


def get_config_path() -> Path:
    return get_normform_home() / "config.yaml"


def load_global_config() -> GlobalConfig:
    """Load config.yaml, or defaults when it doesn't exist or is empty."""
    config_path = get_config_path()
    if not config_path.exists():
        return GlobalConfig()

    with open(config_path) as f:
        data = yaml.safe_load(f)

    if data is None:
        return GlobalConfig()
    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")
    return GlobalConfig.model_validate(data)


def save_global_config(config: GlobalConfig) -> Path:
    """Write config.yaml, creating the home directory if needed."""
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        yaml.safe_dump(config.model_dump(exclude_none=True), f, sort_keys=False)
    return config_path


def get_bundled_registry_path() -> Path:
    return PACKAGE_DATA / "norm-registry"


def get_bundled_schema_dir() -> Path:
    return PACKAGE_DATA / "schemas"


def get_norm_registry_path() -> Path:
    """Resolve the norm registry path."""
    env_path = os.environ.get("NORMFORM_NORM_REGISTRY")
    if env_path:
        return Path(env_path)

    global_config = load_global_config()
    if global_config.default_norm_registry_path:
        return Path(global_config.default_norm_registry_path).expanduser()

    return get_bundled_registry_path()


def get_schema_dir() -> Path:
    """Resolve the schema directory used to validate norm documents."""
    env_path = os.environ.get("NORMFORM_SCHEMA_DIR")
    if env_path:
        return Path(env_path)

    global_config = load_global_config()
    if global_config.schema_dir:
        return Path(global_config.schema_dir).expanduser()

    return get_bundled_schema_dir()
