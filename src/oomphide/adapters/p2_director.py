"""Package installer backed by the Eclipse p2 director application."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List

from oomphide.ports.package_installer import DirectorError, DirectorRequest, PackageInstaller

DIRECTOR_APPLICATION = "org.eclipse.equinox.p2.director"


class P2DirectorInstaller(PackageInstaller):
    """Runs the p2 director synchronously and waits for it to finish."""

    def __init__(self, director: str) -> None:
        self._director = director

    def build_args(self, request: DirectorRequest) -> List[str]:
        model = request.model
        args = [self._director, "-nosplash", "-application", DIRECTOR_APPLICATION]
        if model.repos:
            args += ["-repository", ",".join(model.repos)]
        if model.metadata_repos:
            args += ["-metadataRepository", ",".join(model.metadata_repos)]
        if model.artifact_repos:
            args += ["-artifactRepository", ",".join(model.artifact_repos)]
        if model.ius:
            args += ["-installIU", ",".join(model.ius)]
        args += [
            "-profile",
            request.profile,
            "-profileProperties",
            "org.eclipse.update.install.features=true",
            "-destination",
            str(request.destination),
            "-bundlepool",
            str(request.bundle_pool),
            "-p2.os",
            request.platform.os,
            "-p2.ws",
            request.platform.ws,
            "-p2.arch",
            request.platform.arch,
        ]
        if request.console_log:
            args.append("-consoleLog")
        return args

    def install(self, request: DirectorRequest) -> None:
        if not request.model.ius:
            raise DirectorError("Nothing to install: the p2 model has no installable units")
        request.bundle_pool.mkdir(parents=True, exist_ok=True)
        args = self.build_args(request)
        try:
            subprocess.run(
                args,
                check=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
            )
        except FileNotFoundError as exc:
            raise DirectorError(f"p2 director executable missing: {self._director}") from exc
        except subprocess.CalledProcessError as exc:
            output = (exc.stdout or "").strip()
            raise DirectorError(
                f"p2 director failed with exit code {exc.returncode} installing into "
                f"{Path(request.destination)}:\n{output}"
            ) from exc


__all__ = ["DIRECTOR_APPLICATION", "P2DirectorInstaller"]
