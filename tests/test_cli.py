import functools
import threading
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer

import pytest

from m3u8dl.cli import main
from m3u8dl.downloader import gen_file_name

PLAYLIST = "#EXTM3U\n#EXTINF:1.0,\nseg0.ts\n#EXTINF:1.0,\nseg1.ts\n"


class _QuietHandler(SimpleHTTPRequestHandler):
    def log_message(self, format, *args):
        pass


@pytest.fixture
def server(tmp_path):
    root = tmp_path / "www"
    root.mkdir()
    handler = functools.partial(_QuietHandler, directory=str(root))
    httpd = ThreadingHTTPServer(("127.0.0.1", 0), handler)
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    yield root, f"http://127.0.0.1:{httpd.server_address[1]}"
    httpd.shutdown()
    httpd.server_close()


def _publish(root):
    (root / "index.m3u8").write_text(PLAYLIST)
    (root / "seg0.ts").write_bytes(b"\x00\x47abc")
    (root / "seg1.ts").write_bytes(b"\x47def")


def test_missing_url_reports_error(tmp_path, capsys):
    assert main(["-o", str(tmp_path)]) == 0
    assert "[error] parameter 'u' is required" in capsys.readouterr().out


def test_missing_output_reports_error(capsys):
    assert main(["-u", "http://localhost/index.m3u8"]) == 0
    assert "[error] parameter 'o' is required" in capsys.readouterr().out


def test_non_positive_concurrency_rejected(tmp_path, capsys):
    assert main(["-u", "http://localhost/index.m3u8", "-o", str(tmp_path), "-c", "0"]) == 0
    assert "parameter 'c' must be greater than 0" in capsys.readouterr().out


def test_invalid_boolean_flag_exits():
    with pytest.raises(SystemExit):
        main(["-u", "http://localhost/x.m3u8", "-o", "out", "-C=maybe"])


def test_downloads_and_merges(server, tmp_path, capsys):
    root, base = server
    _publish(root)
    url = f"{base}/index.m3u8"
    out = tmp_path / "out"

    assert main(["-u", url, "-o", str(out), "-c", "2"]) == 0

    merged = out / gen_file_name(url)
    assert merged.read_bytes() == b"\x47abc" + b"\x47def"
    assert not (out / "ts").exists()
    assert "Done!" in capsys.readouterr().out


def test_existing_output_is_not_downloaded_again(server, tmp_path, capsys):
    root, base = server
    _publish(root)
    url = f"{base}/index.m3u8"
    out = tmp_path / "out"
    main(["-u", url, "-o", str(out), "-C=false"])
    capsys.readouterr()

    assert main(["-u", url, "-o", str(out)]) == 0
    assert f"*****{gen_file_name(url)}****exists" in capsys.readouterr().out


def test_missing_playlist_reports_fetch_error(server, tmp_path, capsys):
    _, base = server
    url = f"{base}/absent.m3u8"
    out = tmp_path / "out"

    assert main(["-u", url, "-o", str(out)]) == 0
    text = capsys.readouterr().out
    assert "request m3u8 URL failed" in text
    assert "Done!" not in text
    assert not (out / gen_file_name(url)).exists()