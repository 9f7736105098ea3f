"""Tests for kargogen.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from kargogen.config import ConfigError, KargoGenConfig, KubectlConfig, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, KargoGenConfig)
    assert config.root == tmp_path.resolve()
    assert config.paths.services_dir == tmp_path.resolve() / "services"
    assert config.paths.output_dir == tmp_path.resolve() / "projects"
    assert config.paths.templates_dir is None
    assert config.image_repository is None
    assert config.kubectl == KubectlConfig()


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".kargogen.yml"
    config_file.write_text(
        """
image_repository: ghcr.io/acme
git_repo_url: https://github.com/acme/gitops.git
region: us-east-1
environment: dev
paths:
  services_dir: apps
  templates_dir: platform/templates
  output_dir: generated
kubectl:
  context: staging
  kubeconfig: ~/.kube/staging
  timeout: 45
""",
        encoding="utf-8",
    )

    config = load_config(config_file)
    root = tmp_path.resolve()

    assert config.image_repository == "ghcr.io/acme"
    assert config.git_repo_url == "https://github.com/acme/gitops.git"
    assert config.region == "us-east-1"
    assert config.environment == "dev"
    assert config.flavor is None
    assert config.paths.services_dir == root / "apps"
    assert config.paths.templates_dir == root / "platform" / "templates"
    assert config.paths.output_dir == root / "generated"
    assert config.kubectl.binary == "kubectl"
    assert config.kubectl.context == "staging"
    assert config.kubectl.kubeconfig == "~/.kube/staging"
    assert config.kubectl.timeout == 45.0


def test_load_config_ignores_wrongly_typed_values(tmp_path: Path) -> None:
    (tmp_path / ".kargogen.yml").write_text(
        "region: [us-east-1]\nkubectl:\n  timeout: soon\n",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.region is None
    assert config.kubectl.timeout is None


def test_load_config_empty_file_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / ".kargogen.yml").write_text("\n", encoding="utf-8")
    config = load_config(tmp_path)
    assert config.paths.output_dir == tmp_path.resolve() / "projects"


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    (tmp_path / ".kargogen.yml").write_text("- one\n- two\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_reports_parse_errors(tmp_path: Path) -> None:
    (tmp_path / ".kargogen.yml").write_text("region: [unterminated\n", encoding="utf-8")
    with pytest.raises(ConfigError) as excinfo:
        load_config(tmp_path)
    assert ".kargogen.yml" in str(excinfo.value)
