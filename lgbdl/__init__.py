"""
lgbdl – instalador de LightGBM para R
=====================================

Paquete raíz.  Clona LightGBM, lo compila (o usa una librería
precompilada) e instala el paquete R resultante:

```python
import lgbdl
lgbdl.install(commit="master", cores=4)
```
"""
from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as _pkg_version

# ---------------------------------------------------------------------------#
# Metadatos
# ---------------------------------------------------------------------------#
try:
    __version__: str = _pkg_version(__name__)
except PackageNotFoundError:  # running from source tree
    __version__ = "0.0.0.dev0"

# ---------------------------------------------------------------------------#
# API pública mínima
# ---------------------------------------------------------------------------#
from .config import InstallOptions  # noqa: E402
from .installer import InstallError, InstallResult, install  # noqa: E402


def run_cli() -> None:
    """Lanza la CLI desde código (`lgbdl.run_cli()`)."""
    # Importación diferida para no forzar Typer si sólo se usa `install`.
    from .cli import cli  # noqa: E402

    cli()


__all__ = [
    "__version__",
    "InstallOptions",
    "InstallError",
    "InstallResult",
    "install",
    "run_cli",
]
