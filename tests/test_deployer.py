"""Tests for kargogen.deployer."""

from __future__ import annotations

from pathlib import Path

import pytest

from kargogen.cluster import ApplyError, ConnectivityError
from kargogen.deployer import DeploymentSequencer
from kargogen.scanner import DiscoveryError
from kargogen.templating import RESOURCE_KINDS


class RecordingClient:
    """Cluster double that records applies and can fail selected manifests."""

    def __init__(self, *, fail_on: set[str] | None = None, reachable: bool = True) -> None:
        self.applied: list[Path] = []
        self.fail_on = fail_on or set()
        self.reachable = reachable
        self.state: dict[Path, str] = {}

    def check_connectivity(self) -> None:
        if not self.reachable:
            raise ConnectivityError("Unable to reach the cluster: connection refused")

    def apply(self, path: Path) -> None:
        relative = f"{path.parent.name}/{path.name}"
        if relative in self.fail_on:
            raise ApplyError(path, "admission webhook denied the request")
        self.applied.append(path)
        # Declarative upsert: re-applying the same manifest converges.
        self.state[path] = path.read_text(encoding="utf-8")


def _write_resource_sets(root: Path, services: list[str]) -> Path:
    output = root / "projects"
    for name in services:
        service_dir = output / name
        service_dir.mkdir(parents=True)
        for kind in RESOURCE_KINDS:
            (service_dir / f"{kind}.yaml").write_text(f"kind: {kind}\nname: {name}\n", encoding="utf-8")
    return output


def test_deploy_applies_resources_in_dependency_order(tmp_path: Path) -> None:
    output = _write_resource_sets(tmp_path, ["nginx"])
    client = RecordingClient()

    report = DeploymentSequencer(client).deploy(output)

    assert report.success_count == 1
    assert [path.name for path in client.applied] == [
        "namespace.yaml",
        "project.yaml",
        "warehouse.yaml",
        "stages.yaml",
    ]
    assert report.outcomes[0].applied == ["namespace", "project", "warehouse", "stages"]


def test_deploy_skip_namespace(tmp_path: Path) -> None:
    output = _write_resource_sets(tmp_path, ["nginx"])
    client = RecordingClient()

    DeploymentSequencer(client).deploy(output, skip_namespace=True)

    assert [path.name for path in client.applied] == ["project.yaml", "warehouse.yaml", "stages.yaml"]


def test_deploy_failure_stops_only_that_service(tmp_path: Path) -> None:
    output = _write_resource_sets(tmp_path, ["api-gw", "nginx"])
    client = RecordingClient(fail_on={"api-gw/warehouse.yaml"})

    report = DeploymentSequencer(client).deploy(output)

    assert report.success_count == 1
    assert report.fail_count == 1
    failed = report.outcomes[0]
    assert failed.service == "api-gw"
    assert failed.success is False
    assert failed.applied == ["namespace", "project"]
    assert "admission webhook denied" in (failed.error or "")
    applied = [f"{path.parent.name}/{path.name}" for path in client.applied]
    assert "api-gw/stages.yaml" not in applied
    # Earlier applies for the failed service are not rolled back.
    assert "api-gw/project.yaml" in applied
    assert applied[-4:] == [
        "nginx/namespace.yaml",
        "nginx/project.yaml",
        "nginx/warehouse.yaml",
        "nginx/stages.yaml",
    ]


def test_deploy_rerun_after_partial_failure_succeeds(tmp_path: Path) -> None:
    output = _write_resource_sets(tmp_path, ["api-gw", "nginx"])
    flaky = RecordingClient(fail_on={"nginx/stages.yaml"})
    first = DeploymentSequencer(flaky).deploy(output)
    assert first.fail_count == 1

    flaky.fail_on.clear()
    second = DeploymentSequencer(flaky).deploy(output)
    third = DeploymentSequencer(flaky).deploy(output)

    assert second.ok
    assert third.ok
    assert len(flaky.state) == 8


def test_deploy_records_missing_manifest(tmp_path: Path) -> None:
    output = _write_resource_sets(tmp_path, ["nginx"])
    (output / "nginx" / "project.yaml").unlink()
    client = RecordingClient()

    report = DeploymentSequencer(client).deploy(output)

    assert report.fail_count == 1
    assert "Missing project manifest" in (report.outcomes[0].error or "")
    assert [path.name for path in client.applied] == ["namespace.yaml"]


def test_deploy_respects_service_filter(tmp_path: Path) -> None:
    output = _write_resource_sets(tmp_path, ["api-gw", "nginx"])
    client = RecordingClient()

    report = DeploymentSequencer(client).deploy(output, "nginx")

    assert [outcome.service for outcome in report.outcomes] == ["nginx"]
    assert {path.parent.name for path in client.applied} == {"nginx"}


def test_deploy_aborts_when_cluster_unreachable(tmp_path: Path) -> None:
    output = _write_resource_sets(tmp_path, ["nginx"])
    client = RecordingClient(reachable=False)

    with pytest.raises(ConnectivityError):
        DeploymentSequencer(client).deploy(output)
    assert client.applied == []


def test_deploy_requires_output_directory(tmp_path: Path) -> None:
    with pytest.raises(DiscoveryError) as excinfo:
        DeploymentSequencer(RecordingClient()).deploy(tmp_path / "projects")
    assert "kargogen generate" in str(excinfo.value)
