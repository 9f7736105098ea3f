"""Ordered application of generated resource sets to a cluster."""

from __future__ import annotations

from pathlib import Path

from .cluster import ApplyError, ClusterClient
from .logging import get_logger, service_logger
from .models import DeploymentOutcome, DeploymentReport
from .scanner import DiscoveryError, ServiceScanner
from .stores import FileStore, LocalFileStore
from .templating import RESOURCE_KINDS, TemplateSet


class DeploymentSequencer:
    """Applies each service's resources in namespace, project, warehouse, stages order.

    A failed step stops the remaining steps for that service only. Earlier
    applies are left in place; re-running converges because applies are
    declarative.
    """

    def __init__(
        self,
        client: ClusterClient,
        store: FileStore | None = None,
        scanner: ServiceScanner | None = None,
    ) -> None:
        self.client = client
        self.store = store or LocalFileStore()
        self.scanner = scanner or ServiceScanner(self.store)
        self.logger = get_logger("deployer")

    def deploy(
        self,
        output_dir: Path,
        service_filter: str | None = None,
        *,
        skip_namespace: bool = False,
    ) -> DeploymentReport:
        """Apply every generated resource set under ``output_dir``."""
        self.client.check_connectivity()
        if not self.store.is_dir(output_dir):
            raise DiscoveryError(
                f"Output directory not found: {output_dir}. Run `kargogen generate` first."
            )

        services = self.scanner.scan(output_dir, service_filter)
        self.logger.info("Deploying %d service(s) from %s", len(services), output_dir)

        kinds = [kind for kind in RESOURCE_KINDS if not (skip_namespace and kind == "namespace")]
        report = DeploymentReport()
        for name in services:
            outcome = self._deploy_service(output_dir / name, name, kinds)
            report.outcomes.append(outcome)
            log = service_logger(self.logger, name)
            if outcome.success:
                log.info("deployed %s", ", ".join(outcome.applied))
            else:
                log.error("failed: %s", outcome.error)

        self.logger.info(
            "Deployment finished: %d succeeded, %d failed",
            report.success_count,
            report.fail_count,
        )
        return report

    def _deploy_service(self, service_dir: Path, name: str, kinds: list[str]) -> DeploymentOutcome:
        outcome = DeploymentOutcome(service=name, success=False)
        for kind in kinds:
            manifest = service_dir / TemplateSet.output_name(kind)
            if not self.store.exists(manifest):
                outcome.error = f"Missing {kind} manifest at {manifest}"
                return outcome
            service_logger(self.logger, name).debug("applying %s", manifest)
            try:
                self.client.apply(manifest)
            except ApplyError as exc:
                outcome.error = str(exc)
                return outcome
            outcome.applied.append(kind)
        outcome.success = True
        return outcome


__all__ = ["DeploymentSequencer"]
