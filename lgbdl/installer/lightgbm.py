# lgbdl/installer/lightgbm.py
from __future__ import annotations

import logging
import shutil
import tempfile
from dataclasses import dataclass, replace
from pathlib import Path

from ..config import InstallOptions, _which_or_raise, find_r_tools
from .fetch import fetch_libdll, is_url
from .patch import INSTALL_LIBS, install_flags, patch_install_libs
from .rpkg import r_cmd_install, r_package_installed, stage_r_package
from .script import CLONE_DIRNAME, build_plan, run_script, write_script

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstallResult:
    installed: bool
    was_installed: bool
    workdir: Path

    @property
    def fresh(self) -> bool:
        """El paquete no estaba antes de la llamada y ahora sí."""
        return self.installed and not self.was_installed

    def __bool__(self) -> bool:
        return self.installed


def _preflight(opts: InstallOptions) -> None:
    _which_or_raise("git")
    if not opts.builds:
        return
    _which_or_raise("cmake")
    if not opts.uses_vs:
        _which_or_raise("mingw32-make.exe" if opts.windows else "make")


def _resolve_workdir(opts: InstallOptions) -> Path:
    if opts.workdir:
        workdir = Path(opts.workdir).expanduser().resolve()
        workdir.mkdir(parents=True, exist_ok=True)
        return workdir
    return Path(tempfile.mkdtemp(prefix="lgbdl-"))


def install(opts: InstallOptions | None = None, **overrides) -> InstallResult:
    """
    Descarga, compila e instala el paquete R de LightGBM.

    Args:
        opts: opciones de instalación. Por defecto `InstallOptions()`.
        **overrides: campos de `InstallOptions` a sobrescribir
            (p.ej. `install(commit="v4.3.0", cores=4)`).

    Returns:
        `InstallResult`; su valor de verdad indica si `lightgbm` quedó
        instalado. Cualquier paso fallido lanza una `InstallError`.
    """
    if opts is None:
        opts = InstallOptions(**overrides)
    elif overrides:
        opts = replace(opts, **overrides)
    logger.info("Instalando LightGBM: %r", opts)

    # ── 1) Herramientas
    _preflight(opts)
    r_bin, rscript = find_r_tools()
    was_installed = r_package_installed(rscript, opts.package)

    # ── 2) Directorio de trabajo (limpio)
    workdir = _resolve_workdir(opts)
    clone = workdir / CLONE_DIRNAME
    shutil.rmtree(clone, ignore_errors=True)
    # Ficheros propios de esta llamada dentro de un workdir explícito
    leftovers: list[Path] = []

    try:
        # ── 3) Script: clone → checkout → build | copy
        if not opts.builds:
            local = fetch_libdll(opts.libdll, workdir)
            if is_url(opts.libdll):
                leftovers.append(Path(local))
            opts = replace(opts, libdll=local)
        steps = build_plan(opts, workdir)
        script = write_script(steps, workdir, opts.windows)
        leftovers.append(script)

        # ── 4) Ejecutar
        logger.info("🛠️  Clonando y compilando en %s (pasos: %s)…", workdir, ", ".join(s.name for s in steps))
        run_script(script, opts.windows)

        # ── 5) Forzar el uso de la librería ya compilada
        flags = install_flags(
            use_gpu=opts.use_gpu,
            mingw=opts.windows and opts.compiler == "gcc",
        )
        patch_install_libs(clone / INSTALL_LIBS, flags)

        # ── 6) Instalar con R
        pkg_dir = stage_r_package(clone)
        r_cmd_install(r_bin, pkg_dir)
    finally:
        # ── 7) Limpieza
        if opts.keep_workdir:
            logger.info("Directorio de trabajo conservado en %s", workdir)
        elif opts.workdir:
            shutil.rmtree(clone, ignore_errors=True)
            for path in leftovers:
                path.unlink(missing_ok=True)
        else:
            shutil.rmtree(workdir, ignore_errors=True)

    # ── 8) Resultado
    installed = r_package_installed(rscript, opts.package)
    if installed:
        logger.info("✅ %s instalado.", opts.package)
    else:
        logger.error("R CMD INSTALL terminó sin error pero %s no aparece en la librería de R.", opts.package)
    return InstallResult(installed=installed, was_installed=was_installed, workdir=workdir)
