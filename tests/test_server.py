import threading

import httpx
import pytest

from tempmatrix.server import DEFAULT_MIME_TYPE, content_type_for, make_server, resolve_path


@pytest.fixture
def site(tmp_path):
    root = tmp_path / "site"
    root.mkdir()
    (root / "index.html").write_text("<h1>matrix</h1>", encoding="utf-8")
    (root / "temperature_daily.csv").write_text("date,max_temperature,min_temperature\n")
    (root / "blob.bin").write_bytes(b"\x00\x01")
    (root / "assets").mkdir()
    (root / "assets" / "app.js").write_text("console.log(1);")
    (tmp_path / "secret.txt").write_text("top secret")
    return root


@pytest.fixture
def base_url(site):
    server = make_server(site, port=0)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    host, port = server.server_address[:2]
    yield f"http://{host}:{port}"
    server.shutdown()
    server.server_close()


@pytest.mark.parametrize(
    "name, expected",
    [
        ("index.html", "text/html"),
        ("app.js", "text/javascript"),
        ("style.css", "text/css"),
        ("data.csv", "text/csv"),
        ("data.json", "application/json"),
        ("chart.png", "image/png"),
        ("photo.JPG", "image/jpeg"),
        ("icon.svg", "image/svg+xml"),
        ("archive.tar.gz", DEFAULT_MIME_TYPE),
        ("README", DEFAULT_MIME_TYPE),
    ],
)
def test_content_type_for(name, expected):
    assert content_type_for(name) == expected


class TestResolvePath:
    def test_root_is_index(self, tmp_path):
        assert resolve_path(tmp_path, "/") == tmp_path / "index.html"

    def test_query_is_dropped(self, tmp_path):
        assert resolve_path(tmp_path, "/a.csv?v=2") == (tmp_path / "a.csv").resolve()

    def test_percent_escapes_decoded(self, tmp_path):
        assert resolve_path(tmp_path, "/my%20file.csv") == (tmp_path / "my file.csv").resolve()

    @pytest.mark.parametrize("url", ["/../secret.txt", "/assets/../../secret.txt", "/%2e%2e/secret.txt"])
    def test_dot_segments_stay_under_root(self, tmp_path, url):
        root = tmp_path / "site"

        assert resolve_path(root, url) == (root / "secret.txt").resolve()

    def test_relative_escape_is_rejected(self, tmp_path):
        assert resolve_path(tmp_path / "site", "../secret.txt") is None


class TestServe:
    def test_index(self, base_url):
        resp = httpx.get(base_url + "/")

        assert resp.status_code == 200
        assert resp.headers["content-type"] == "text/html"
        assert resp.text == "<h1>matrix</h1>"

    def test_csv(self, base_url):
        resp = httpx.get(base_url + "/temperature_daily.csv")

        assert resp.status_code == 200
        assert resp.headers["content-type"] == "text/csv"
        assert resp.text.startswith("date,")

    def test_nested_asset(self, base_url):
        resp = httpx.get(base_url + "/assets/app.js")

        assert resp.headers["content-type"] == "text/javascript"

    def test_unknown_extension_is_binary(self, base_url):
        resp = httpx.get(base_url + "/blob.bin")

        assert resp.headers["content-type"] == DEFAULT_MIME_TYPE
        assert resp.content == b"\x00\x01"

    def test_missing_file_is_404_naming_path(self, base_url):
        resp = httpx.get(base_url + "/nope.txt")

        assert resp.status_code == 404
        assert resp.text == "404: File Not Found -> /nope.txt"
        assert resp.headers["content-type"].startswith("text/plain")

    def test_directory_is_404(self, base_url):
        assert httpx.get(base_url + "/assets").status_code == 404

    def test_traversal_is_404(self, base_url):
        resp = httpx.get(base_url + "/%2e%2e/secret.txt")

        assert resp.status_code == 404
        assert "top secret" not in resp.text
