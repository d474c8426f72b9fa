# -*- coding: utf-8 -*-
"""
Permite ejecutar el paquete desde la línea de comandos:

  python -m lgbdl install --commit master --cores 4

"""
from .cli import cli

if __name__ == "__main__":
    cli()
