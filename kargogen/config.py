"""Configuration loading for kargogen (.kargogen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

CONFIG_FILENAME = ".kargogen.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class PathsConfig:
    """Input and output directories, resolved against the config root."""

    services_dir: Path
    output_dir: Path
    templates_dir: Optional[Path] = None


@dataclass
class KubectlConfig:
    """How the deployer reaches the cluster."""

    binary: str = "kubectl"
    context: Optional[str] = None
    kubeconfig: Optional[str] = None
    timeout: Optional[float] = None


@dataclass
class KargoGenConfig:
    """Represents the settings defined in .kargogen.yml."""

    root: Path
    paths: PathsConfig
    image_repository: Optional[str] = None
    git_repo_url: Optional[str] = None
    region: Optional[str] = None
    environment: Optional[str] = None
    flavor: Optional[str] = None
    kubectl: KubectlConfig = field(default_factory=KubectlConfig)


def default_config(root: Path) -> KargoGenConfig:
    return KargoGenConfig(
        root=root,
        paths=PathsConfig(services_dir=root / "services", output_dir=root / "projects"),
    )


def load_config(config_path: Path) -> KargoGenConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return default_config(root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = default_config(root)
    config.image_repository = _as_str(data.get("image_repository"))
    config.git_repo_url = _as_str(data.get("git_repo_url"))
    config.region = _as_str(data.get("region"))
    config.environment = _as_str(data.get("environment"))
    config.flavor = _as_str(data.get("flavor"))

    paths_data = _as_dict(data.get("paths"))
    services_dir = _as_str(paths_data.get("services_dir"))
    output_dir = _as_str(paths_data.get("output_dir"))
    templates_dir = _as_str(paths_data.get("templates_dir"))
    if services_dir:
        config.paths.services_dir = root / services_dir
    if output_dir:
        config.paths.output_dir = root / output_dir
    if templates_dir:
        config.paths.templates_dir = root / templates_dir

    kubectl_data = _as_dict(data.get("kubectl"))
    if kubectl_data:
        config.kubectl = KubectlConfig(
            binary=_as_str(kubectl_data.get("binary")) or "kubectl",
            context=_as_str(kubectl_data.get("context")),
            kubeconfig=_as_str(kubectl_data.get("kubeconfig")),
            timeout=_as_float(kubectl_data.get("timeout")),
        )

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (str, int, float)):
        text = str(value).strip()
        return text or None
    return None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None
