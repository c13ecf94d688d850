import base64
from pathlib import Path
from typing import Annotated, Any, Dict

from fastmcp import FastMCP
from pydantic import Field

from .common import sha256_hex
from .logging_conf import setup_logging
from .path_utils import read_sample, resolve_path
from .settings import Settings
from .summary import file_type_of, inspect_bytes

_settings = Settings.from_env()
_policy = _settings.policy()

mcp = FastMCP(
    name="CertScout",
    instructions=(
        "Purpose: identify certificate/key/keystore files by their content and check X.509 "
        f"certificates against the {_policy.name} policy. No network access, no file writes.\n\n"
        "Use me when: a file's extension is missing or untrusted and you need its real format, "
        "or you need to know whether a certificate uses approved signature algorithms and key sizes "
        "and whether it is inside its validity window.\n"
        "Do NOT use me for: directory scans, chain/revocation validation, trust-store checks, or conversions.\n\n"
        "How to call:\n"
        "- Format only → `identify_file_type(path=...)` or `identify_file_type_from_b64(filename=..., content_b64=...)`.\n"
        "- Certificate check → `check_certificate(path=...)` or `check_certificate_from_b64(filename=..., content_b64=...)`.\n"
        "  `content_b64` MUST be RFC 4648 raw base64 of the file bytes (no data: URI, no whitespace/newlines).\n\n"
        "Outputs: `file_type` (`extension`, `content_type`, `description`) and, for certificates, "
        "`x509`, `compliance` (`policy`, `is_compliant`, ordered `reasons`) and `validity` (`status`, `message`).\n\n"
        "Safety: read-only and idempotent; format detection reads only the first 512 bytes of a file."
    ),
)


def _identify(name_key: str, name_val: str, head: bytes, size: int) -> Dict[str, Any]:
    return {
        name_key: name_val,
        "size": size,
        "file_type": file_type_of(head).model_dump(),
    }


def _check(name_key: str, name_val: str, data: bytes) -> Dict[str, Any]:
    meta = inspect_bytes(data, policy=_policy)
    if "x509" not in meta:
        raise ValueError(
            f"No X.509 certificate found in {name_val} ({meta['file_type']['description']})"
        )
    return {name_key: name_val, **meta}


@mcp.tool(description="Health check. Returns \"pong\".", tags={"certscout"})
def ping() -> str:
    return "pong"


@mcp.tool(
    description=(
        "Identify the format of a local file from its leading bytes (JKS, JCEKS, PEM, DER, PKCS#12, "
        "executables, text). The file extension is ignored. Read-only and idempotent."
    ),
    tags={"certscout", "filetype", "filesystem"},
    annotations={
        "title": "Identify local file type",
        "readOnlyHint": True,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
def identify_file_type(
    path: Annotated[Path, Field(description="Local path to the target file.")],
) -> dict:
    """
    Example:
      { "path": "/etc/ssl/private/server" }
    """
    p = resolve_path(str(path))
    return _identify("path", str(p), read_sample(p), p.stat().st_size)


@mcp.tool(
    description=(
        "Identify the format of base64-encoded file content from its leading bytes. "
        "Read-only and idempotent."
    ),
    tags={"certscout", "filetype", "binary"},
    annotations={
        "title": "Identify base64 content type",
        "readOnlyHint": True,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
def identify_file_type_from_b64(
    filename: Annotated[
        str,
        Field(description="Original filename (reported back only; the extension is not used for detection)."),
    ],
    content_b64: Annotated[str, Field(description="RFC 4648 raw base64-encoded bytes of the file")],
) -> dict:
    data = base64.b64decode(content_b64, validate=True)
    out = _identify("filename", filename, data, len(data))
    out["digest_sha256"] = sha256_hex(data)
    return out


@mcp.tool(
    description=(
        "Check a local X.509 certificate (PEM or DER) against the configured FIPS 140-3 style policy "
        "and explain its validity window. Read-only and idempotent."
    ),
    tags={"certscout", "x509", "compliance", "filesystem"},
    annotations={
        "title": "Check local certificate",
        "readOnlyHint": True,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
def check_certificate(
    path: Annotated[Path, Field(description="Local path to a PEM or DER certificate.")],
) -> dict:
    """
    Example:
      { "path": "/tmp/certs/server.pem" }
    """
    p = resolve_path(str(path))
    return _check("path", str(p), p.read_bytes())


@mcp.tool(
    description=(
        "Check a base64-encoded X.509 certificate (PEM or DER) against the configured FIPS 140-3 style "
        "policy and explain its validity window. Read-only and idempotent."
    ),
    tags={"certscout", "x509", "compliance", "binary"},
    annotations={
        "title": "Check base64 certificate",
        "readOnlyHint": True,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
def check_certificate_from_b64(
    filename: Annotated[str, Field(description="Original filename, e.g. 'leaf.der'.")],
    content_b64: Annotated[str, Field(description="RFC 4648 raw base64-encoded bytes of the file")],
) -> dict:
    data = base64.b64decode(content_b64, validate=True)
    return _check("filename", filename, data)


@mcp.prompt(
    name="audit_certificate_file",
    description=(
        "Identify a local file with `identify_file_type`, check it with `check_certificate` when it is a "
        "certificate, then produce a short report."
    ),
    tags={"certscout", "prompt", "audit"},
)
def audit_certificate_file(
    path: Annotated[str, Field(description="Local path to the file to audit.")],
) -> str:
    return (
        "Task: Audit the file at the given local path.\n\n"
        f'1) Call `identify_file_type` with {{"path": "{path}"}}.\n'
        "2) If `file_type.description` mentions a certificate, call `check_certificate` with the same path.\n\n"
        "OUTPUT EXACTLY TWO SECTIONS:\n"
        "A) Summary (2–4 bullet points): detected format, compliance verdict with every reason in order, "
        "validity message.\n"
        "B) JSON on one line with keys: extension, description, is_compliant, reasons, validity_status\n"
        "If a tool call fails or returns an error, output ERROR: <message> and stop. Do not invent results.\n"
    )


def main() -> None:
    setup_logging(_settings)
    mcp.run()


if __name__ == "__main__":
    main()
