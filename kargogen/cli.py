"""CLI entrypoints for kargogen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .cluster import ConnectivityError
from .config import ConfigError
from .logging import configure_logging
from .models import DeploymentReport, GenerationReport, GenerationStatus
from .naming import fullname
from .orchestrator import Orchestrator
from .scanner import DiscoveryError


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_service_filter_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--service-name",
        dest="service_name",
        default=None,
        help="Only process the service with this directory name.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kargogen",
        description="Generate and apply isolated per-service promotion resources.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .kargogen.yml or the directory containing it (defaults to current directory).",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Render namespace, project, warehouse and stages manifests per service.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_service_filter_option(generate_parser)
    generate_parser.add_argument("--image-repository", help="Registry prefix; the service name is appended.")
    generate_parser.add_argument("--git-repo-url", help="GitOps repository URL written into the manifests.")
    generate_parser.add_argument("--region", help="Region written into the manifests.")
    generate_parser.add_argument("--environment", help="Environment component of the release name.")
    generate_parser.add_argument("--flavor", help="Flavor component of the release name.")
    generate_parser.add_argument("--services-dir", help="Directory containing one folder per service.")
    generate_parser.add_argument("--templates-dir", help="Directory containing the *.yaml.template files.")
    generate_parser.add_argument("--output-dir", help="Directory receiving one folder per service.")
    generate_parser.add_argument(
        "--force",
        action="store_true",
        help="Delete and regenerate output directories that already exist.",
    )

    deploy_parser = subparsers.add_parser(
        "deploy",
        help="Apply generated manifests to the cluster in dependency order.",
    )
    _add_verbose_option(deploy_parser, suppress_default=True)
    _add_service_filter_option(deploy_parser)
    deploy_parser.add_argument(
        "--skip-namespace-creation",
        dest="skip_namespace",
        action="store_true",
        help="Do not apply namespace.yaml (namespaces are managed elsewhere).",
    )
    deploy_parser.add_argument("--output-dir", help="Directory holding generated resource sets.")
    deploy_parser.add_argument("--context", help="kubeconfig context to use.")
    deploy_parser.add_argument("--kubeconfig", help="Path to the kubeconfig file.")
    deploy_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate manifests server-side without persisting them.",
    )

    fullname_parser = subparsers.add_parser(
        "fullname",
        help="Print the DNS-safe resource name for the given components.",
    )
    _add_verbose_option(fullname_parser, suppress_default=True)
    fullname_parser.add_argument("app_name", help="Application or service name.")
    fullname_parser.add_argument("--environment", default=None)
    fullname_parser.add_argument("--flavor", default=None)
    fullname_parser.add_argument("--region", default=None)
    fullname_parser.add_argument("--override", default=None, help="Use this name instead of composing one.")

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service exposing generate and deploy.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for kargogen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file) if args.log_file else None
    configure_logging(verbose=bool(args.verbose), log_file=log_file)

    if args.command == "fullname":
        try:
            print(
                fullname(
                    args.app_name,
                    args.environment,
                    args.flavor,
                    args.region,
                    override=args.override,
                )
            )
        except ValueError as exc:
            parser.exit(1, f"{exc}\n")
        return

    if args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port, config_path=args.config)
        return

    orchestrator = Orchestrator()

    if args.command == "generate":
        try:
            report = orchestrator.run_generate(
                args.config,
                service_filter=args.service_name,
                image_repository=args.image_repository,
                git_repo_url=args.git_repo_url,
                region=args.region,
                environment=args.environment,
                flavor=args.flavor,
                services_dir=args.services_dir,
                templates_dir=args.templates_dir,
                output_dir=args.output_dir,
                force=bool(args.force),
            )
        except (DiscoveryError, ConfigError) as exc:
            parser.exit(1, f"kargogen generate failed: {exc}\n")
        _print_generation_report(report)
        if not report.ok:
            parser.exit(1)
    elif args.command == "deploy":
        try:
            deploy_report = orchestrator.run_deploy(
                args.config,
                service_filter=args.service_name,
                skip_namespace=bool(args.skip_namespace),
                output_dir=args.output_dir,
                context=args.context,
                kubeconfig=args.kubeconfig,
                dry_run=bool(args.dry_run),
            )
        except (ConnectivityError, DiscoveryError, ConfigError) as exc:
            parser.exit(1, f"kargogen deploy failed: {exc}\n")
        _print_deployment_report(deploy_report)
        if not deploy_report.ok:
            parser.exit(1)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _print_generation_report(report: GenerationReport) -> None:
    for outcome in report.outcomes:
        line = f"{outcome.status.value:<12}{outcome.service}"
        if outcome.status is GenerationStatus.FAILED and outcome.error:
            line += f"  ({outcome.error})"
        print(line)
    print(
        f"Generated {report.success_count}, skipped {report.skipped_count}, failed {report.fail_count}"
    )


def _print_deployment_report(report: DeploymentReport) -> None:
    for outcome in report.outcomes:
        if outcome.success:
            print(f"{'deployed':<12}{outcome.service}")
        else:
            print(f"{'failed':<12}{outcome.service}  ({outcome.error})")
    print(f"Deployed {report.success_count}, failed {report.fail_count}")


if __name__ == "__main__":
    main(sys.argv[1:])
