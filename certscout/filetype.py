"""Content-based file type detection for certificate and keystore candidates.

Only the leading bytes of a file are looked at. The checks run in a fixed
priority order and the first one that matches decides the classification.
"""
from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from typing import Dict, Optional, Union

log = logging.getLogger(__name__)

SAMPLE_SIZE = 512

_JKS_MAGIC = 0xFEEDFEED
_JCEKS_MAGIC = 0xCECECECE
_PEM_BEGIN = b"-----BEGIN "
_PEM_HEADER_WINDOW = 100

_ASN1_SEQUENCE = 0x30
_ASN1_LONG_LENGTH = 0x80
_ASN1_LENGTH_2 = 0x82
_X500_ATTR_OID = bytes([0x06, 0x03, 0x55, 0x04])  # id-at
_VERSION_ZERO = bytes([0x02, 0x01, 0x00])  # INTEGER 0
_RSA_OID_PREFIX = bytes([0x06, 0x09, 0x2A, 0x86, 0x48])  # 1.2.840...
_PKCS12_OID = bytes([0x06, 0x09, 0x2A, 0x86, 0x48, 0x86, 0xF7, 0x0D, 0x01, 0x0C])  # pkcs-12

_MZ = bytes([0x4D, 0x5A])
_ELF = bytes([0x7F, 0x45, 0x4C, 0x46])

_TEXT_CONTROL = frozenset(b"\t\n\r")


@dataclass(frozen=True)
class FormatClassification:
    extension: str
    content_type: str
    description: str

    def as_dict(self) -> Dict[str, str]:
        return {
            "extension": self.extension,
            "content_type": self.content_type,
            "description": self.description,
        }


JKS = FormatClassification(".jks", "application/x-java-keystore", "Java KeyStore (JKS)")
JCEKS = FormatClassification(
    ".jceks", "application/x-java-keystore", "Java Cryptography Extension KeyStore (JCEKS)"
)
PKCS12 = FormatClassification(".p12", "application/x-pkcs12", "PKCS#12 / PFX Certificate Store")
WINDOWS_EXECUTABLE = FormatClassification(".exe", "application/x-msdownload", "Windows Executable")
LINUX_EXECUTABLE = FormatClassification("", "application/x-executable", "Linux Executable")
TEXT = FormatClassification(".txt", "text/plain", "Text File")
UNKNOWN = FormatClassification("", "application/octet-stream", "Unknown File Type")


@dataclass(frozen=True)
class ByteSample:
    """At most ``SAMPLE_SIZE`` leading bytes of a file, trailing NULs removed.

    Files shorter than the sample window are often read into a zero-filled
    buffer; trimming keeps the padding from skewing the text heuristic.
    """

    data: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", bytes(self.data[:SAMPLE_SIZE]).rstrip(b"\x00"))

    def __len__(self) -> int:
        return len(self.data)


def _be_u32(buf: bytes) -> Optional[int]:
    if len(buf) < 4:
        return None
    return struct.unpack(">I", buf[:4])[0]


def _pem_subtype(buf: bytes) -> str:
    header = buf[:_PEM_HEADER_WINDOW]
    if b"CERTIFICATE" in header:
        return "Certificate"
    if b"PRIVATE KEY" in header:
        return "Private Key"
    if b"PUBLIC KEY" in header:
        return "Public Key"
    if b"CSR" in header or b"CERTIFICATE REQUEST" in header:
        return "Certificate Signing Request"
    return "Certificate"


def _der_subtype(buf: bytes) -> str:
    # Later checks overwrite earlier ones: a buffer that looks
    # like both a certificate and a private key is reported as a private key.
    subtype = "Unknown"
    if (
        len(buf) > 15
        and (buf[1] == _ASN1_LENGTH_2 or buf[1] >= _ASN1_LONG_LENGTH)
        and _X500_ATTR_OID in buf[:15]
    ):
        subtype = "Certificate"
    if len(buf) > 10 and buf[1] >= _ASN1_LONG_LENGTH and _VERSION_ZERO in buf[:10]:
        subtype = "Private Key"
    if len(buf) > 15 and _RSA_OID_PREFIX in buf[:15]:
        subtype = "Public Key"
    return subtype


def _is_der(buf: bytes) -> bool:
    return len(buf) >= 2 and buf[0] == _ASN1_SEQUENCE


def _is_pkcs12(buf: bytes) -> bool:
    return (
        len(buf) >= len(_PKCS12_OID)
        and buf[0] == _ASN1_SEQUENCE
        and buf[1] >= _ASN1_LONG_LENGTH
        and _PKCS12_OID in buf[:10]
    )


def is_text(buf: bytes) -> bool:
    printable = sum(1 for b in buf if 0x20 <= b <= 0x7E or b in _TEXT_CONTROL)
    return printable > len(buf) * 9 // 10


def classify(sample: Union[ByteSample, bytes]) -> FormatClassification:
    """Classify the leading bytes of a file. Never raises."""
    if not isinstance(sample, ByteSample):
        sample = ByteSample(sample)
    buf = sample.data

    result = _classify(buf)
    log.debug("classified %d byte sample as %s", len(buf), result.description)
    return result


def _classify(buf: bytes) -> FormatClassification:
    magic = _be_u32(buf)
    if magic == _JKS_MAGIC:
        return JKS
    if magic == _JCEKS_MAGIC:
        return JCEKS

    if buf.startswith(_PEM_BEGIN):
        return FormatClassification(".pem", "application/x-pem-file", f"PEM Encoded {_pem_subtype(buf)}")

    if _is_der(buf):
        return FormatClassification(".der", "application/x-x509-ca-cert", f"DER Encoded {_der_subtype(buf)}")

    # Shadowed by the DER branch: anything passing this check starts with
    # 0x30 and is at least two bytes long.
    if _is_pkcs12(buf):
        return PKCS12

    if buf.startswith(_MZ):
        return WINDOWS_EXECUTABLE
    if buf.startswith(_ELF):
        return LINUX_EXECUTABLE

    if is_text(buf):
        return TEXT
    return UNKNOWN
