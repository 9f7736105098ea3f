"""Pipeline orchestration for generate and deploy flows."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from .cluster import ClusterClient, KubectlClient
from .config import KargoGenConfig, KubectlConfig, load_config
from .deployer import DeploymentSequencer
from .generator import GenerationSettings, ResourceSetGenerator
from .logging import get_logger
from .models import DeploymentReport, GenerationReport
from .stores import FileStore, LocalFileStore
from .templating import TemplateSet

ClientFactory = Callable[[KubectlConfig, bool], ClusterClient]


def _default_client_factory(settings: KubectlConfig, dry_run: bool) -> ClusterClient:
    return KubectlClient(
        binary=settings.binary,
        context=settings.context,
        kubeconfig=settings.kubeconfig,
        timeout=settings.timeout,
        dry_run=dry_run,
    )


class Orchestrator:
    """Merges configuration with per-run overrides and drives the pipelines."""

    def __init__(
        self,
        store: FileStore | None = None,
        generator: ResourceSetGenerator | None = None,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self.store = store or LocalFileStore()
        self.generator = generator or ResourceSetGenerator(self.store)
        self.client_factory = client_factory or _default_client_factory
        self.logger = get_logger("orchestrator")

    def run_generate(
        self,
        config_path: str = ".",
        *,
        service_filter: str | None = None,
        image_repository: str | None = None,
        git_repo_url: str | None = None,
        region: str | None = None,
        environment: str | None = None,
        flavor: str | None = None,
        services_dir: str | None = None,
        templates_dir: str | None = None,
        output_dir: str | None = None,
        force: bool = False,
    ) -> GenerationReport:
        """Generate per-service resource sets."""
        config = self._load_config(config_path)
        settings = GenerationSettings(
            image_repository=image_repository or config.image_repository or "",
            git_repo_url=git_repo_url or config.git_repo_url or "",
            region=region or config.region or "",
            environment=environment or config.environment,
            flavor=flavor or config.flavor,
        )
        for label, value in (
            ("image repository", settings.image_repository),
            ("git repository URL", settings.git_repo_url),
            ("region", settings.region),
        ):
            if not value:
                self.logger.warning("No %s configured; the token will expand to an empty string", label)

        resolved_templates = self._resolve_path(templates_dir) or config.paths.templates_dir
        if resolved_templates is None:
            resolved_templates = TemplateSet.bundled().root
            self.logger.debug("Using bundled templates from %s", resolved_templates)

        return self.generator.generate(
            self._resolve_path(services_dir) or config.paths.services_dir,
            resolved_templates,
            self._resolve_path(output_dir) or config.paths.output_dir,
            service_filter,
            settings,
            force=force,
        )

    def run_deploy(
        self,
        config_path: str = ".",
        *,
        service_filter: str | None = None,
        skip_namespace: bool = False,
        output_dir: str | None = None,
        context: str | None = None,
        kubeconfig: str | None = None,
        dry_run: bool = False,
    ) -> DeploymentReport:
        """Apply generated resource sets to the cluster."""
        config = self._load_config(config_path)
        kubectl = KubectlConfig(
            binary=config.kubectl.binary,
            context=context or config.kubectl.context,
            kubeconfig=kubeconfig or config.kubectl.kubeconfig,
            timeout=config.kubectl.timeout,
        )
        if dry_run:
            self.logger.info("Dry-run enabled; manifests are validated server-side without persisting")

        sequencer = DeploymentSequencer(self.client_factory(kubectl, dry_run), self.store)
        return sequencer.deploy(
            self._resolve_path(output_dir) or config.paths.output_dir,
            service_filter,
            skip_namespace=skip_namespace,
        )

    def _load_config(self, config_path: str) -> KargoGenConfig:
        config = load_config(Path(config_path))
        self.logger.debug("Loaded configuration rooted at %s", config.root)
        return config

    @staticmethod
    def _resolve_path(value: str | None) -> Path | None:
        if not value:
            return None
        return Path(value).expanduser().resolve()


__all__ = ["Orchestrator"]
