"""
Tests de la descarga de librerías precompiladas.
"""
from __future__ import annotations

import pytest
import requests

from lgbdl.installer import fetch
from lgbdl.installer.errors import InstallError


class _FakeResponse:
    def __init__(self, payload: bytes, status_code: int = 200) -> None:
        self.payload = payload
        self.status_code = status_code
        self.headers = {"Content-Length": str(len(payload))}

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code}")

    def iter_content(self, chunk_size):
        for i in range(0, len(self.payload), 4):
            yield self.payload[i:i + 4]


def test_local_path_is_returned(tmp_path) -> None:
    lib = tmp_path / "lib_lightgbm.so"
    lib.write_bytes(b"lib")
    assert fetch.fetch_libdll(str(lib), tmp_path / "dl") == str(lib.resolve())


def test_relative_local_path_is_resolved(monkeypatch, tmp_path) -> None:
    (tmp_path / "lib_lightgbm.so").write_bytes(b"lib")
    monkeypatch.chdir(tmp_path)
    path = fetch.fetch_libdll("lib_lightgbm.so", tmp_path / "dl")
    assert path == str((tmp_path / "lib_lightgbm.so").resolve())


def test_missing_local_path(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        fetch.fetch_libdll(str(tmp_path / "nope.dll"), tmp_path)


def test_url_is_downloaded(monkeypatch, tmp_path) -> None:
    captured = {}

    def _fake_get(url, **kwargs):
        captured["url"] = url
        captured["kwargs"] = kwargs
        return _FakeResponse(b"binary-lightgbm")

    monkeypatch.setattr(requests, "get", _fake_get)

    url = "https://example.org/releases/v4/lib_lightgbm.dll"
    path = fetch.fetch_libdll(url, tmp_path)

    assert path == str(tmp_path / "lib_lightgbm.dll")
    assert (tmp_path / "lib_lightgbm.dll").read_bytes() == b"binary-lightgbm"
    assert not (tmp_path / "lib_lightgbm.dll.part").exists()
    assert captured["url"] == url
    assert captured["kwargs"]["stream"] is True


def test_download_resumes_partial_file(monkeypatch, tmp_path) -> None:
    (tmp_path / "lib_lightgbm.so.part").write_bytes(b"binary-")
    captured = {}

    def _fake_get(url, headers, **kwargs):
        captured["headers"] = headers
        return _FakeResponse(b"lightgbm", status_code=206)

    monkeypatch.setattr(requests, "get", _fake_get)

    fetch.fetch_libdll("https://example.org/lib_lightgbm.so", tmp_path)

    assert captured["headers"] == {"Range": "bytes=7-"}
    assert (tmp_path / "lib_lightgbm.so").read_bytes() == b"binary-lightgbm"


def test_http_error_becomes_install_error(monkeypatch, tmp_path) -> None:
    monkeypatch.setattr(requests, "get", lambda url, **kw: _FakeResponse(b"", status_code=404))
    with pytest.raises(InstallError, match="404") as exc:
        fetch.fetch_libdll("https://example.org/lib_lightgbm.so", tmp_path)
    assert isinstance(exc.value.__cause__, requests.HTTPError)


def test_connection_error_becomes_install_error(monkeypatch, tmp_path) -> None:
    def _offline(url, **kwargs):
        raise requests.ConnectionError("no network")

    monkeypatch.setattr(requests, "get", _offline)
    with pytest.raises(InstallError, match="no network"):
        fetch.fetch_libdll("https://example.org/lib_lightgbm.so", tmp_path)


@pytest.mark.parametrize(
    "value,expected",
    [("https://x/lib.dll", True), ("http://x/lib.so", True), ("/opt/lib.so", False), (r"C:\lgb\lib.dll", False)],
)
def test_is_url(value, expected) -> None:
    assert fetch.is_url(value) is expected
