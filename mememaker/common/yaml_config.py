import yaml

from mememaker.common.config import ConfigError, RendererConfig


def load_renderer_config(path: str = "config.yaml") -> RendererConfig:
    """Load renderer configuration from a YAML file.

    Args:
        path: Path to the config YAML file

    Returns:
        RendererConfig loaded from the ``renderer`` section, or defaults if the
        file doesn't exist

    Raises:
        ConfigError: If the file is not valid YAML or the section is not a mapping
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        return RendererConfig()
    except yaml.YAMLError as e:
        raise ConfigError(f"{path!r} is not valid YAML: {e}") from e

    if data is None:
        return RendererConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{path!r} must contain a mapping at the top level")

    renderer_data = data.get("renderer") or {}
    if not isinstance(renderer_data, dict):
        raise ConfigError(f"'renderer' section of {path!r} must be a mapping")
    return RendererConfig(**renderer_data)
