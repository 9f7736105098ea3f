"""Per-service resource set generation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

from .logging import ServiceLogAdapter, get_logger, service_logger
from .models import (
    GenerationReport,
    GenerationStatus,
    ServiceDescriptor,
    ServiceGenerationOutcome,
)
from .naming import fullname
from .scanner import DiscoveryError, ServiceScanner
from .stores import FileStore, LocalFileStore
from .templating import TemplateSet, expand, find_unresolved_tokens


@dataclass(frozen=True)
class GenerationSettings:
    """Values substituted into every service's templates."""

    image_repository: str = ""
    git_repo_url: str = ""
    region: str = ""
    environment: str | None = None
    flavor: str | None = None

    def describe(self, service_name: str) -> ServiceDescriptor:
        repository = self.image_repository.rstrip("/")
        image = f"{repository}/{service_name}" if repository else service_name
        return ServiceDescriptor(
            name=service_name,
            image_repository=image,
            git_repo_url=self.git_repo_url,
            region=self.region,
        )


def build_replacements(service: ServiceDescriptor, settings: GenerationSettings) -> Dict[str, str]:
    """Return the token map for one service."""
    return {
        "SERVICE_NAME": service.name,
        "IMAGE_REPOSITORY": service.image_repository,
        "GIT_REPO_URL": service.git_repo_url,
        "REGION": service.region,
        "RELEASE_NAME": fullname(
            service.name, settings.environment, settings.flavor, settings.region
        ),
    }


class ResourceSetGenerator:
    """Expands the template set once per discovered service."""

    def __init__(self, store: FileStore | None = None, scanner: ServiceScanner | None = None) -> None:
        self.store = store or LocalFileStore()
        self.scanner = scanner or ServiceScanner(self.store)
        self.logger = get_logger("generator")

    def generate(
        self,
        services_dir: Path,
        templates_dir: Path,
        output_dir: Path,
        service_filter: str | None = None,
        settings: GenerationSettings | None = None,
        *,
        force: bool = False,
    ) -> GenerationReport:
        """Generate resource sets and report per-service outcomes."""
        settings = settings or GenerationSettings()
        if not self.store.is_dir(templates_dir):
            raise DiscoveryError(f"Templates directory not found: {templates_dir}")
        services = self.scanner.scan(services_dir, service_filter)
        self.logger.info("Generating resources for %d service(s) into %s", len(services), output_dir)

        templates = TemplateSet(templates_dir)
        report = GenerationReport()
        for name in services:
            outcome = self._generate_service(name, templates, output_dir, settings, force=force)
            report.outcomes.append(outcome)
            self._log_outcome(outcome)

        self.logger.info(
            "Generation finished: %d succeeded, %d skipped, %d failed",
            report.success_count,
            report.skipped_count,
            report.fail_count,
        )
        return report

    def _generate_service(
        self,
        name: str,
        templates: TemplateSet,
        output_dir: Path,
        settings: GenerationSettings,
        *,
        force: bool,
    ) -> ServiceGenerationOutcome:
        log = service_logger(self.logger, name)
        target = output_dir / name
        if self.store.exists(target) and not force:
            log.info("skipped: %s already exists; use --force to overwrite", target)
            return ServiceGenerationOutcome(service=name, status=GenerationStatus.SKIPPED_EXISTING)

        # Render before touching the target: a broken template must leave
        # existing output intact.
        try:
            rendered = self._render(name, templates, settings)
        except (OSError, UnicodeDecodeError) as exc:
            self._log_exception(f"Failed to render templates for {name}", exc)
            return ServiceGenerationOutcome(service=name, status=GenerationStatus.FAILED, error=str(exc))

        status = GenerationStatus.CREATED
        try:
            if self.store.exists(target):
                log.debug("removing existing output")
                self.store.remove_tree(target)
                status = GenerationStatus.OVERWRITTEN
            self.store.make_dirs(target)
            for file_name, text in rendered.items():
                self.store.write_text(target / file_name, text)
        except OSError as exc:
            self._log_exception(f"Failed to write resources for {name}", exc)
            self._discard_partial(target, log)
            return ServiceGenerationOutcome(service=name, status=GenerationStatus.FAILED, error=str(exc))

        unresolved = {token for text in rendered.values() for token in find_unresolved_tokens(text)}
        return ServiceGenerationOutcome(
            service=name,
            status=status,
            files=list(rendered),
            unresolved_tokens=sorted(unresolved),
        )

    def _render(self, name: str, templates: TemplateSet, settings: GenerationSettings) -> Dict[str, str]:
        replacements = build_replacements(settings.describe(name), settings)
        rendered: Dict[str, str] = {}
        for kind in templates.kinds:
            text = self.store.read_text(templates.template_path(kind))
            rendered[templates.output_name(kind)] = expand(text, replacements)
        return rendered

    def _discard_partial(self, target: Path, log: ServiceLogAdapter) -> None:
        # A leftover directory would be skipped as finished on the next run.
        try:
            if self.store.exists(target):
                self.store.remove_tree(target)
        except OSError as exc:
            log.warning("could not remove partial output %s: %s", target, exc)

    def _log_outcome(self, outcome: ServiceGenerationOutcome) -> None:
        log = service_logger(self.logger, outcome.service)
        if outcome.status is GenerationStatus.FAILED:
            log.error("failed: %s", outcome.error)
        elif outcome.status is not GenerationStatus.SKIPPED_EXISTING:
            log.info("%s %d file(s)", outcome.status.value, len(outcome.files))
        if outcome.unresolved_tokens:
            log.warning(
                "unresolved template tokens left in output: %s",
                ", ".join(outcome.unresolved_tokens),
            )

    def _log_exception(self, message: str, exc: Exception) -> None:
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.exception("%s: %s", message, exc)


__all__ = ["GenerationSettings", "ResourceSetGenerator", "build_replacements"]
