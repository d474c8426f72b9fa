# lgbdl/installer/rpkg.py
"""
Todo lo que toca a R: preparar el paquete `lightgbm_r`, instalarlo con
`R CMD INSTALL` y consultar si `lightgbm` está en la librería de R.
"""
from __future__ import annotations

import logging
import re
import shutil
import subprocess
from pathlib import Path

from packaging.version import InvalidVersion, Version

from .errors import CommandError, InstallError

logger = logging.getLogger(__name__)

STAGE_DIRNAME = "lightgbm_r"

# Nombres de paquete válidos en R: letras, números y punto; empieza por letra.
_R_PKG_RE = re.compile(r"^[A-Za-z][A-Za-z0-9.]*[A-Za-z0-9]$")
_R_VERSION_RE = re.compile(r"version (\d+\.\d+(?:\.\d+)?)")


def stage_r_package(clone: str | Path) -> Path:
    """
    Arma `<clone>/lightgbm_r` con todo lo que necesita `R CMD INSTALL`:

    * el contenido de `R-package/`,
    * `include/` y `src/` dentro de `lightgbm_r/src/`,
    * `CMakeLists.txt` en `lightgbm_r/inst/bin/`.
    """
    clone = Path(clone)
    r_package = clone / "R-package"
    if not r_package.is_dir():
        raise InstallError(f"No existe {r_package}. ¿Es un checkout de LightGBM?")

    stage = clone / STAGE_DIRNAME
    shutil.copytree(r_package, stage, dirs_exist_ok=True)
    for sub in ("include", "src"):
        if (clone / sub).is_dir():
            shutil.copytree(clone / sub, stage / "src" / sub, dirs_exist_ok=True)

    cmake_lists = clone / "CMakeLists.txt"
    if cmake_lists.is_file():
        (stage / "inst" / "bin").mkdir(parents=True, exist_ok=True)
        shutil.copy2(cmake_lists, stage / "inst" / "bin" / "CMakeLists.txt")

    logger.debug("Paquete R preparado en %s", stage)
    return stage


def r_cmd_install(r_bin: str, pkg_dir: str | Path) -> None:
    cmd = [r_bin, "CMD", "INSTALL", str(pkg_dir)]
    logger.info("📦 R CMD INSTALL %s", pkg_dir)
    proc = subprocess.run(cmd, check=False)
    if proc.returncode != 0:
        raise CommandError("R CMD INSTALL", proc.returncode)


def r_package_installed(rscript: str, package: str = "lightgbm") -> bool:
    """True si `package` se resuelve en la librería de R (`system.file`)."""
    if not _R_PKG_RE.match(package):
        raise ValueError(f"Nombre de paquete R inválido: '{package}'")
    expr = f'cat(nzchar(system.file(package = "{package}")))'
    proc = subprocess.run(
        [rscript, "-e", expr],
        check=False,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    )
    if proc.returncode != 0:
        raise CommandError("Rscript system.file", proc.returncode, proc.stderr.strip())
    return proc.stdout.strip().endswith("TRUE")


def detect_r_version(rscript: str) -> Version | None:
    """Lee la versión de R de `Rscript --version` (sale por stderr en R < 4.2)."""
    try:
        proc = subprocess.run(
            [rscript, "--version"],
            check=False,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
        )
    except FileNotFoundError:
        return None
    match = _R_VERSION_RE.search(proc.stdout + proc.stderr)
    if not match:
        return None
    try:
        return Version(match.group(1))
    except InvalidVersion:
        return None
