# lgbdl/installer/patch.py
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Mapping

from .errors import PatchError

logger = logging.getLogger(__name__)

INSTALL_LIBS = Path("R-package") / "src" / "install.libs.R"

# `use_gpu <- FALSE`, `use_precompile<-TRUE  # comentario`, ...
_FLAG_RE = r"^(?P<head>[ \t]*{key}[ \t]*<-[ \t]*)(?P<value>TRUE|FALSE|T|F)\b"


def install_flags(*, use_gpu: bool, mingw: bool) -> dict[str, bool]:
    """Flags de `install.libs.R` que el instalador fuerza a TRUE."""
    flags = {"use_precompile": True}
    if use_gpu:
        flags["use_gpu"] = True
    if mingw:
        flags["use_mingw"] = True
    return flags


def patch_flags(text: str, flags: Mapping[str, bool]) -> str:
    """
    Sustituye el valor de cada flag en `text` buscando la línea por su
    nombre, no por su posición.  El resto del texto queda intacto.
    """
    for key, value in flags.items():
        pattern = re.compile(_FLAG_RE.format(key=re.escape(key)), re.MULTILINE)
        new_value = "TRUE" if value else "FALSE"
        text, n = pattern.subn(lambda m: m.group("head") + new_value, text, count=1)
        if n == 0:
            raise PatchError(f"No se encontró la línea '{key} <- ...' en install.libs.R.")
        logger.debug("Flag %s → %s", key, new_value)
    return text


def patch_install_libs(path: str | Path, flags: Mapping[str, bool]) -> None:
    """
    Parchea `install.libs.R` en el sitio:

    1. renombra el original a `<nombre>.orig`,
    2. sustituye los flags,
    3. escribe el resultado con el nombre original y borra el `.orig`.

    Si falla la escritura, el `.orig` se conserva para poder diagnosticar.
    """
    path = Path(path)
    if not path.is_file():
        raise PatchError(f"No existe {path}. ¿El clon de LightGBM está completo?")

    # newline="" conserva los finales de línea originales (\n o \r\n)
    with open(path, encoding="utf-8", newline="") as fh:
        patched = patch_flags(fh.read(), flags)

    backup = path.with_name(path.name + ".orig")
    path.replace(backup)
    with open(path, "w", encoding="utf-8", newline="") as fh:
        fh.write(patched)
    backup.unlink()
    logger.info("✓ %s parcheado (%s)", path.name, ", ".join(flags))
