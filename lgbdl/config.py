# lgbdl/config.py

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass, field
from typing import Literal

logger = logging.getLogger(__name__)

DEFAULT_REPO = "https://github.com/microsoft/LightGBM"
COMPILERS = ("gcc", "vs")

Compiler = Literal["gcc", "vs"]


# --- Funciones de ayuda ---
def _getenv_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None: return default
    try: return int(raw)
    except (TypeError, ValueError): return default

def _getenv_bool(name: str, default: bool | None) -> bool | None:
    raw = os.getenv(name)
    if raw is None: return default
    val = raw.strip().lower()
    if val in ("1", "true", "yes", "on"): return True
    if val in ("0", "false", "no", "off"): return False
    return default

def _which_or_raise(cmd: str, env_var: str | None = None) -> str:
    """Devuelve la ruta de `cmd` (o la de `env_var` si está definida)."""
    explicit = os.getenv(env_var) if env_var else None
    path = explicit or shutil.which(cmd)
    if not path:
        raise RuntimeError(f"Falta '{cmd}' en el PATH. Instálalo para continuar.")
    return path


def find_r_tools() -> tuple[str, str]:
    """
    Localiza los ejecutables `R` y `Rscript`.

    Orden de búsqueda:
    1. Variables de entorno `LGBDL_R` / `LGBDL_RSCRIPT`.
    2. El PATH del sistema.
    """
    return _which_or_raise("R", "LGBDL_R"), _which_or_raise("Rscript", "LGBDL_RSCRIPT")


@dataclass(slots=True)
class InstallOptions:
    # --- Origen ---
    commit: str = field(default_factory=lambda: os.getenv("LGBDL_COMMIT", "master"))
    repo: str = field(default_factory=lambda: os.getenv("LGBDL_REPO", DEFAULT_REPO))
    libdll: str = field(default_factory=lambda: os.getenv("LGBDL_LIBDLL", ""))

    # --- Compilación ---
    compiler: Compiler = field(default_factory=lambda: os.getenv("LGBDL_COMPILER", "gcc"))
    use_gpu: bool = field(default_factory=lambda: bool(_getenv_bool("LGBDL_USE_GPU", False)))
    cores: int = field(default_factory=lambda: _getenv_int("LGBDL_CORES", 1))
    r35: bool | None = field(default_factory=lambda: _getenv_bool("LGBDL_R35", None))

    # --- Entorno ---
    workdir: str | None = field(default_factory=lambda: os.getenv("LGBDL_WORKDIR"))
    keep_workdir: bool = False
    windows: bool = field(default_factory=lambda: os.name == "nt")
    package: str = "lightgbm"


    def __post_init__(self) -> None:
        """Valida las opciones y resuelve `r35` si no se indicó."""
        if self.compiler not in COMPILERS:
            raise ValueError(f"Compilador no soportado: '{self.compiler}'. Usa 'gcc' o 'vs'.")
        if self.cores < 1:
            raise ValueError(f"`cores` debe ser un entero positivo (recibido {self.cores}).")
        for name in ("commit", "repo", "libdll"):
            if getattr(self, name).startswith("-"):
                # git o cp lo leerían como una opción
                raise ValueError(f"`{name}` no puede empezar por '-': '{getattr(self, name)}'")
        if self.use_gpu and self.libdll:
            logger.warning("use_gpu no tiene efecto con una librería precompilada (%s).", self.libdll)
        if self.r35 is None:
            self.r35 = self._resolve_r35()


    @property
    def builds(self) -> bool:
        """True si hay que compilar (no se usa una librería precompilada)."""
        return not self.libdll

    @property
    def uses_vs(self) -> bool:
        """Visual Studio sólo existe en Windows; en el resto siempre es make."""
        return self.windows and self.compiler == "vs"


    def _resolve_r35(self) -> bool:
        """Activa `USE_R35` si la versión de R del sistema es >= 3.5."""
        from packaging.version import Version

        from .installer.rpkg import detect_r_version

        rscript = os.getenv("LGBDL_RSCRIPT") or shutil.which("Rscript")
        if not rscript:
            logger.warning("No se encontró Rscript; se asume R < 3.5 (USE_R35 desactivado).")
            return False
        version = detect_r_version(rscript)
        if version is None:
            logger.warning("No se pudo leer la versión de R; USE_R35 desactivado.")
            return False
        logger.debug("Versión de R detectada: %s", version)
        return version >= Version("3.5")


    def __repr__(self) -> str:
        libdll_info = f", libdll='{self.libdll}'" if self.libdll else ""
        params = (
            f"repo='{self.repo}', commit='{self.commit}', compiler='{self.compiler}', "
            f"gpu={self.use_gpu}, cores={self.cores}, r35={self.r35}{libdll_info}"
        )
        return f"<InstallOptions {params}>"
