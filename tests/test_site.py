from __future__ import annotations

import pytest

from attendance_app.utils.static_files import (
    UnsafePathError,
    content_type_for,
    decode_request_path,
    resolve_static_path,
)


def test_root_serves_index_page(client):
    res = client.get("/")

    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/html")
    assert "<!DOCTYPE html>" in res.text


def test_script_served_with_javascript_type(client):
    res = client.get("/js/attendance.js")

    assert res.status_code == 200
    assert res.headers["content-type"].startswith("application/javascript")


def test_unknown_route_is_json_404(client):
    res = client.get("/unknown-route")

    assert res.status_code == 404
    assert res.json() == {"error": "Not Found"}


@pytest.mark.parametrize(
    "method, path",
    [
        ("GET", "/api/unknown"),
        ("POST", "/unknown-route"),
        ("DELETE", "/api/attendance"),
        ("PUT", "/api/attendance/E1"),
    ],
)
def test_unmatched_requests_are_json_404(client, method, path):
    res = client.request(method, path)

    assert res.status_code == 404
    assert res.json() == {"error": "Not Found"}


def test_traversal_is_rejected(client):
    res = client.get("/..%2f..%2fpyproject.toml")

    assert res.status_code == 400


def test_malformed_escape_is_rejected(client):
    res = client.get("/index%E0%A4%A")

    assert res.status_code == 400


def test_cors_headers_are_sent(client):
    res = client.get("/api/attendance", headers={"Origin": "http://example.com"})

    assert res.headers["access-control-allow-origin"] == "*"


def test_resolve_static_path(tmp_path):
    (tmp_path / "index.html").write_text("<html></html>")
    (tmp_path / "css").mkdir()
    (tmp_path / "css" / "site.css").write_text("body {}")

    assert resolve_static_path(tmp_path, "/") == (tmp_path / "index.html").resolve()
    assert resolve_static_path(tmp_path, "/css/site.css") == (tmp_path / "css" / "site.css").resolve()
    assert resolve_static_path(tmp_path, "/missing.js") is None
    assert resolve_static_path(tmp_path, "/css") is None


@pytest.mark.parametrize("path", ["/../secret.txt", "/css/../../secret.txt", "/a\x00b"])
def test_resolve_static_path_rejects_escapes(tmp_path, path):
    with pytest.raises(UnsafePathError):
        resolve_static_path(tmp_path, path)


def test_decode_request_path():
    assert decode_request_path("/a%20b.txt") == "/a b.txt"

    with pytest.raises(UnsafePathError):
        decode_request_path("/%zz")
    with pytest.raises(UnsafePathError):
        decode_request_path("/%ff")


def test_content_types(tmp_path):
    assert content_type_for(tmp_path / "logo.PNG") == "image/png"
    assert content_type_for(tmp_path / "notes.txt") == "text/plain; charset=utf-8"
    assert content_type_for(tmp_path / "archive.tar") == "application/octet-stream"
