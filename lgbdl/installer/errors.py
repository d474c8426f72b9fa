# lgbdl/installer/errors.py
from __future__ import annotations


class InstallError(RuntimeError):
    """Fallo durante la instalación de LightGBM."""


class CommandError(InstallError):
    """Un comando externo (git, cmake, make, R...) terminó con código != 0."""

    def __init__(self, step: str, returncode: int, detail: str = "") -> None:
        self.step = step
        self.returncode = returncode
        msg = f"El paso '{step}' falló con código {returncode}."
        if detail:
            msg += f"\n{detail}"
        super().__init__(msg)


class PatchError(InstallError):
    """No se pudo parchear el fichero de configuración del paquete R."""
