"""kubectl-backed cluster access."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Iterable, List, Protocol


class ConnectivityError(RuntimeError):
    """Raised when the cluster cannot be reached before deploying."""


class ApplyError(RuntimeError):
    """Raised when applying a manifest fails."""

    def __init__(self, path: Path, detail: str) -> None:
        super().__init__(f"kubectl apply failed for {path}: {detail}")
        self.path = path
        self.detail = detail


class ClusterClient(Protocol):
    """Operations the deployment sequencer needs from a cluster."""

    def apply(self, path: Path) -> None:
        ...

    def check_connectivity(self) -> None:
        ...


class KubectlClient:
    """Applies manifests by shelling out to kubectl."""

    def __init__(
        self,
        *,
        binary: str = "kubectl",
        context: str | None = None,
        kubeconfig: str | None = None,
        timeout: float | None = None,
        dry_run: bool = False,
        runner: Callable[..., str] | None = None,
    ) -> None:
        self.binary = binary
        self.context = context
        self.kubeconfig = kubeconfig
        self.timeout = timeout
        self.dry_run = dry_run
        self._runner = runner or self._default_runner

    def check_connectivity(self) -> None:
        try:
            self._run([*self._base_args(), "cluster-info"])
        except FileNotFoundError as exc:
            raise ConnectivityError(f"{self.binary} not found on PATH") from exc
        except subprocess.TimeoutExpired as exc:
            raise ConnectivityError(f"Timed out contacting the cluster after {exc.timeout}s") from exc
        except subprocess.CalledProcessError as exc:
            raise ConnectivityError(
                f"Unable to reach the cluster: {_error_detail(exc)}"
            ) from exc

    def apply(self, path: Path) -> None:
        args = [*self._base_args(), "apply", "-f", str(path)]
        if self.dry_run:
            args.append("--dry-run=server")
        try:
            self._run(args)
        except subprocess.CalledProcessError as exc:
            raise ApplyError(path, _error_detail(exc)) from exc
        except (FileNotFoundError, subprocess.TimeoutExpired) as exc:
            raise ApplyError(path, str(exc)) from exc

    # ------------------------------------------------------------------
    # Helpers

    def _base_args(self) -> List[str]:
        args = [self.binary]
        if self.kubeconfig:
            args.extend(["--kubeconfig", self.kubeconfig])
        if self.context:
            args.extend(["--context", self.context])
        return args

    def _run(self, args: Iterable[str]) -> str:
        return self._runner(args, timeout=self.timeout)

    @staticmethod
    def _default_runner(args: Iterable[str], *, timeout: float | None = None) -> str:
        completed = subprocess.run(
            list(args),
            check=True,
            text=True,
            capture_output=True,
            timeout=timeout,
        )
        return completed.stdout


def _error_detail(exc: subprocess.CalledProcessError) -> str:
    stderr = exc.stderr.strip() if isinstance(exc.stderr, str) else ""
    return stderr or f"exit status {exc.returncode}"


__all__ = ["ApplyError", "ClusterClient", "ConnectivityError", "KubectlClient"]
