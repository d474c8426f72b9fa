# lgbdl/installer/script.py
"""
Plan de compilación de LightGBM y su script de shell.

El plan es una lista de `Step`: cada paso es un *argv* (nunca una cadena
concatenada) más su directorio de trabajo.  A partir del plan se genera
un script `sh` (POSIX) o `.bat` (Windows) que se ejecuta en un solo
subproceso.
"""
from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path, PurePath, PurePosixPath, PureWindowsPath
from typing import Sequence

from ..config import InstallOptions
from .errors import CommandError

logger = logging.getLogger(__name__)

CLONE_DIRNAME = "LightGBM"
BUILD_TARGET = "_lightgbm"

GPU_FLAG = "-DUSE_GPU=1"
R35_FLAG = "-DUSE_R35=ON"

# Caracteres con significado especial para cmd.exe
_CMD_SPECIAL = set(' \t&|<>^()%!",;=')


@dataclass(frozen=True)
class Step:
    name: str
    argv: tuple[str, ...]
    cwd: PurePath


def clone_dir(workdir: str | PurePath, windows: bool) -> PurePath:
    base = PureWindowsPath(workdir) if windows else PurePosixPath(workdir)
    return base / CLONE_DIRNAME


def build_plan(opts: InstallOptions, workdir: str | PurePath) -> list[Step]:
    """
    Traduce las opciones a la secuencia de comandos:

    clone → [checkout] → (mkdir → configure → build) | copy
    """
    win = opts.windows
    root = clone_dir(workdir, win)
    steps = [
        Step("clone", ("git", "clone", "--recursive", "--", opts.repo, CLONE_DIRNAME), root.parent),
    ]

    if opts.commit:
        steps.append(Step("checkout", ("git", "checkout", opts.commit), root))

    # ── Librería precompilada: sólo se copia
    if not opts.builds:
        copy = ("copy", "/Y") if win else ("cp",)
        steps.append(Step("copy", (*copy, opts.libdll, str(root)), root))
        return steps

    # ── Compilación completa con CMake
    build_dir = root / "build"
    steps.append(Step("mkdir", ("mkdir", "build") if win else ("mkdir", "-p", "build"), root))

    configure = ["cmake"]
    if opts.uses_vs:
        configure.append("-DCMAKE_GENERATOR_PLATFORM=x64")
    elif win:
        configure += ["-G", "MinGW Makefiles"]
    if opts.use_gpu:
        configure.append(GPU_FLAG)
    if opts.r35:
        configure.append(R35_FLAG)
    configure.append("..")
    steps.append(Step("configure", tuple(configure), build_dir))

    if opts.uses_vs:
        # MSBuild decide el paralelismo; `cores` no aplica.
        build = ("cmake", "--build", ".", "--target", BUILD_TARGET, "--config", "Release")
    else:
        driver = "mingw32-make.exe" if win else "make"
        build = (driver, BUILD_TARGET, "-j", str(opts.cores))
    steps.append(Step("build", build, build_dir))

    return steps


# ──────────────────────────────────────────────────────────────────────────────
# Render
# ──────────────────────────────────────────────────────────────────────────────
def _quote_cmd(arg: str) -> str:
    if arg and not (set(arg) & _CMD_SPECIAL):
        return arg
    return '"' + arg.replace('"', '""').replace("%", "%%") + '"'


def render_script(steps: Sequence[Step], windows: bool) -> str:
    if windows:
        lines = ["@echo off"]
        quote, cd = _quote_cmd, "cd /d"
        suffix = " || exit /b 1"
    else:
        lines = ["#!/bin/sh", "set -e"]
        quote, cd = shlex.quote, "cd"
        suffix = ""

    cwd: PurePath | None = None
    for step in steps:
        if step.cwd != cwd:
            lines.append(f"{cd} {quote(str(step.cwd))}{suffix}")
            cwd = step.cwd
        lines.append(" ".join(quote(a) for a in step.argv) + suffix)

    newline = "\r\n" if windows else "\n"
    return newline.join(lines) + newline


def write_script(steps: Sequence[Step], workdir: str | Path, windows: bool) -> Path:
    """Escribe `temp.bat` / `temp.sh` en `workdir` y lo devuelve."""
    path = Path(workdir) / ("temp.bat" if windows else "temp.sh")
    # newline="" → no traducir los \r\n ya presentes
    with open(path, "w", encoding="utf-8", newline="") as fh:
        fh.write(render_script(steps, windows))
    if not windows:
        path.chmod(path.stat().st_mode | 0o111)
    logger.debug("Script de compilación escrito en %s", path)
    return path


def run_script(path: str | Path, windows: bool) -> None:
    cmd = ["cmd", "/c", str(path)] if windows else ["sh", str(path)]
    logger.info("Ejecutando %s", path)
    proc = subprocess.run(cmd, check=False)
    if proc.returncode != 0:
        raise CommandError("build script", proc.returncode, f"Revisa la salida de {path}.")
