import os
import pathlib
import re
from urllib.parse import unquote, urlparse

from .filetype import SAMPLE_SIZE

_FILE_SCHEME = "file://"
_WIN_DRIVE = re.compile(r"^/([A-Za-z]:/.*)$")


def parse_file_uri(uri_or_path: str) -> pathlib.Path:
    """Accept a plain path or a ``file://`` URI as sent by MCP clients."""
    if not uri_or_path.startswith(_FILE_SCHEME):
        return pathlib.Path(uri_or_path)
    path = unquote(urlparse(uri_or_path).path)
    m = _WIN_DRIVE.match(path) if os.name == "nt" else None
    return pathlib.Path(m.group(1) if m else path)


def resolve_path(path_like: str | os.PathLike[str]) -> pathlib.Path:
    return parse_file_uri(str(path_like)).expanduser().resolve(strict=False)


def read_sample(path: pathlib.Path, size: int = SAMPLE_SIZE) -> bytes:
    # Only the head of the file is read; large keystores stay on disk
    with path.open("rb") as fh:
        return fh.read(size)
