"""
Fixtures y _monkey-patches_ compartidos por toda la suite PyTest.

Objetivo → correr los tests **sin** git, cmake ni R reales, de forma
rápida y estable en cualquier CI.
"""
from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from typing import Any, List

import pytest

INSTALL_LIBS_R = (
    "# User options\n"
    "use_precompile <- FALSE\n"
    "use_gpu <- FALSE\n"
    "use_mingw <- FALSE\n"
    "\n"
    "if (.Machine$sizeof.pointer != 8){\n"
    '  stop("Only support 64-bit R, please check your the version of your R and Rtools.")\n'
    "}\n"
    "\n"
    "R_int_UUID <- .Internal(internalsID())\n"
    "R_ver <- as.double(R.Version()$major) + as.double(R.Version()$minor)/10\n"
)


def make_clone(root: Path, install_libs: str = INSTALL_LIBS_R) -> Path:
    """Crea un árbol mínimo con la forma de un checkout de LightGBM."""
    (root / "R-package" / "src").mkdir(parents=True, exist_ok=True)
    (root / "R-package" / "DESCRIPTION").write_text("Package: lightgbm\n")
    (root / "R-package" / "src" / "install.libs.R").write_text(install_libs)
    (root / "include" / "LightGBM").mkdir(parents=True, exist_ok=True)
    (root / "include" / "LightGBM" / "c_api.h").write_text("// c api\n")
    (root / "src").mkdir(exist_ok=True)
    (root / "src" / "c_api.cpp").write_text("// impl\n")
    (root / "CMakeLists.txt").write_text("project(lightgbm)\n")
    return root


# ════════════════════════════════════════════════════════════════════════════
# Fixture: sin variables de entorno ni R del sistema
# ════════════════════════════════════════════════════════════════════════════
@pytest.fixture(autouse=True)
def _patch_env(monkeypatch: pytest.MonkeyPatch):  # noqa: D401
    """
    • Borra cualquier `LGBDL_*` del entorno del desarrollador.
    • Hace que `InstallOptions._resolve_r35()` no consulte Rscript.
    """
    from lgbdl import config as cfgmod

    for var in ("COMMIT", "REPO", "LIBDLL", "COMPILER", "USE_GPU", "CORES",
                "R35", "WORKDIR", "R", "RSCRIPT"):
        monkeypatch.delenv(f"LGBDL_{var}", raising=False)

    monkeypatch.setattr(cfgmod.InstallOptions, "_resolve_r35", lambda self: False)
    yield


# ════════════════════════════════════════════════════════════════════════════
# Fixture: git / cmake / make / R falsos
# ════════════════════════════════════════════════════════════════════════════
class FakeTools:
    """
    Sustituto de `subprocess.run` que simula el script de compilación
    y el registro de paquetes de R.
    """

    def __init__(self) -> None:
        self.calls: List[List[str]] = []
        self.scripts: List[str] = []
        self.installed = False
        self.script_rc = 0
        self.install_rc = 0
        # False: R CMD INSTALL sale con 0 pero el paquete no queda registrado
        self.registers = True
        self.r_version = "4.3.1"
        self.install_libs = INSTALL_LIBS_R

    def __call__(self, cmd, check=False, **kwargs: Any):  # noqa: D401
        cmd = [str(c) for c in cmd]
        self.calls.append(cmd)

        if cmd[0] in ("sh", "cmd"):
            script = Path(cmd[-1])
            self.scripts.append(script.read_text())
            if self.script_rc == 0:
                make_clone(script.parent / "LightGBM", self.install_libs)
            return subprocess.CompletedProcess(cmd, self.script_rc)

        if cmd[1:3] == ["CMD", "INSTALL"]:
            if self.install_rc == 0 and self.registers:
                self.installed = True
            return subprocess.CompletedProcess(cmd, self.install_rc)

        if cmd[1] == "-e":
            out = "TRUE" if self.installed else "FALSE"
            return subprocess.CompletedProcess(cmd, 0, stdout=out, stderr="")

        if cmd[1] == "--version":
            err = f"Rscript (R) version {self.r_version} (2023-06-16)\n"
            return subprocess.CompletedProcess(cmd, 0, stdout="", stderr=err)

        raise AssertionError(f"comando inesperado: {cmd}")

    def commands(self, *prefix: str) -> List[List[str]]:
        return [c for c in self.calls if c[1:1 + len(prefix)] == list(prefix)]


@pytest.fixture
def fake_tools(monkeypatch: pytest.MonkeyPatch) -> FakeTools:
    tools = FakeTools()
    monkeypatch.setattr(subprocess, "run", tools)
    monkeypatch.setattr(shutil, "which", lambda cmd: f"/usr/bin/{cmd}")
    return tools
