# tests/test_path_utils.py
from certscout.filetype import SAMPLE_SIZE
from certscout.path_utils import parse_file_uri, read_sample, resolve_path

def test_parse_file_uri(tmp_path):
    p = tmp_path / "a.pem"
    uri = f"file://{p}"
    assert parse_file_uri(uri) == p
    assert parse_file_uri(str(p)) == p

def test_resolve_path_is_absolute(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert resolve_path("leaf.pem") == (tmp_path / "leaf.pem").resolve()

def test_read_sample_reads_only_the_head(tmp_path):
    p = tmp_path / "big.bin"
    p.write_bytes(b"\x30\x82" + b"\x01" * 4096)
    head = read_sample(p)
    assert len(head) == SAMPLE_SIZE
    assert head.startswith(b"\x30\x82")

def test_read_sample_short_file(tmp_path):
    p = tmp_path / "short"
    p.write_bytes(b"MZ")
    assert read_sample(p) == b"MZ"

def test_parse_file_uri_unquotes(tmp_path):
    p = tmp_path / "my cert.pem"
    assert parse_file_uri(f"file://{tmp_path}/my%20cert.pem") == p

def test_resolve_path_expands_user(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert resolve_path("~/leaf.der") == (tmp_path / "leaf.der").resolve()
