# lgbdl/installer/fetch.py

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import urlparse

import requests
from tqdm.auto import tqdm

from .errors import InstallError

logger = logging.getLogger(__name__)

_CHUNK = 2 << 20


def is_url(value: str) -> bool:
    return urlparse(value).scheme in ("http", "https")


def fetch_libdll(libdll: str, dest_dir: Path | str) -> str:
    """
    Devuelve una ruta local a la librería precompilada.

    * Ruta local → se devuelve absoluta (debe existir); el script la copia
      desde dentro del clon.
    * URL http(s) → se descarga en `dest_dir` y se devuelve la ruta.
    """
    if not is_url(libdll):
        if not Path(libdll).expanduser().exists():
            raise FileNotFoundError(f"No existe la librería precompilada: {libdll}")
        return str(Path(libdll).expanduser().resolve())

    dest_dir = Path(dest_dir)
    dest_dir.mkdir(parents=True, exist_ok=True)
    name = Path(urlparse(libdll).path).name or "lib_lightgbm"
    dest = dest_dir / name
    try:
        _download_with_resume(libdll, dest)
    except requests.RequestException as e:
        raise InstallError(f"No se pudo descargar {libdll}: {e}") from e
    return str(dest)


def _download_with_resume(url: str, dest: Path) -> None:
    tmp = dest.with_suffix(dest.suffix + ".part")
    headers = {}
    pos = tmp.stat().st_size if tmp.exists() else 0
    if pos:
        headers["Range"] = f"bytes={pos}-"

    logger.info("📥 Descargando %s", url)
    with requests.get(url, stream=True, headers=headers, timeout=30) as r:
        r.raise_for_status()
        # El servidor puede ignorar el Range y mandar el fichero completo
        if pos and r.status_code != 206:
            pos = 0
        total = int(r.headers.get("Content-Length", 0))
        mode = "ab" if pos else "wb"

        with open(tmp, mode) as fh, tqdm(
            total=total + pos,
            initial=pos,
            unit="B",
            unit_scale=True,
            unit_divisor=1024,
            desc=dest.name,
        ) as bar:
            for chunk in r.iter_content(chunk_size=_CHUNK):
                fh.write(chunk)
                bar.update(len(chunk))

    tmp.replace(dest)
