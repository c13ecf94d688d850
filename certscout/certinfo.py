# certscout/certinfo.py
from __future__ import annotations

import datetime as dt
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import dsa, ec, ed448, ed25519, rsa
from cryptography.x509.oid import SignatureAlgorithmOID as SigOID

from .common import as_utc, iso_utc

log = logging.getLogger(__name__)

_PEM_CERT_RE = re.compile(
    rb"-----BEGIN CERTIFICATE-----\r?\n.*?\r?\n-----END CERTIFICATE-----",
    re.DOTALL,
)

# Identifier names for signature algorithms, as printed by most X.509 tooling
_SIG_NAMES: Dict[x509.ObjectIdentifier, str] = {
    SigOID.RSA_WITH_MD5: "MD5-RSA",
    SigOID.RSA_WITH_SHA1: "SHA1-RSA",
    SigOID.RSA_WITH_SHA224: "SHA224-RSA",
    SigOID.RSA_WITH_SHA256: "SHA256-RSA",
    SigOID.RSA_WITH_SHA384: "SHA384-RSA",
    SigOID.RSA_WITH_SHA512: "SHA512-RSA",
    SigOID.DSA_WITH_SHA1: "DSA-SHA1",
    SigOID.DSA_WITH_SHA224: "DSA-SHA224",
    SigOID.DSA_WITH_SHA256: "DSA-SHA256",
    SigOID.ECDSA_WITH_SHA1: "ECDSA-SHA1",
    SigOID.ECDSA_WITH_SHA224: "ECDSA-SHA224",
    SigOID.ECDSA_WITH_SHA256: "ECDSA-SHA256",
    SigOID.ECDSA_WITH_SHA384: "ECDSA-SHA384",
    SigOID.ECDSA_WITH_SHA512: "ECDSA-SHA512",
    SigOID.ED25519: "Ed25519",
    SigOID.ED448: "Ed448",
}

# RSASSA-PSS carries its digest in the algorithm parameters
_PSS_NAMES = {
    "sha256": "SHA256-RSAPSS",
    "sha384": "SHA384-RSAPSS",
    "sha512": "SHA512-RSAPSS",
}

_CURVE_NAMES = {
    "secp256r1": "P-256",
    "secp384r1": "P-384",
    "secp521r1": "P-521",
    "secp224r1": "P-224",
    "secp192r1": "P-192",
}


@dataclass(frozen=True)
class RSAKey:
    bits: int


@dataclass(frozen=True)
class ECKey:
    curve: str


@dataclass(frozen=True)
class DSAKey:
    bits: int


@dataclass(frozen=True)
class OtherKey:
    name: str


PublicKeyInfo = Union[RSAKey, ECKey, DSAKey, OtherKey]


@dataclass(frozen=True)
class ParsedCertificate:
    signature_algorithm: str
    public_key: PublicKeyInfo
    not_before: dt.datetime
    not_after: dt.datetime
    subject: str = ""
    issuer: str = ""
    serial_number: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "not_before", as_utc(self.not_before))
        object.__setattr__(self, "not_after", as_utc(self.not_after))

    def as_dict(self) -> Dict[str, Any]:
        return {
            "subject_dn": self.subject,
            "issuer_dn": self.issuer,
            "serial_number": None if self.serial_number is None else str(self.serial_number),
            "signature_algorithm": self.signature_algorithm,
            "public_key": describe_key(self.public_key),
            "not_before": iso_utc(self.not_before),
            "not_after": iso_utc(self.not_after),
        }


def describe_key(key: PublicKeyInfo) -> Dict[str, Any]:
    if isinstance(key, RSAKey):
        return {"type": "RSA", "size": key.bits}
    if isinstance(key, ECKey):
        return {"type": "EC", "curve": key.curve}
    if isinstance(key, DSAKey):
        return {"type": "DSA", "size": key.bits}
    return {"type": key.name}


def signature_algorithm_name(cert: x509.Certificate) -> str:
    oid = cert.signature_algorithm_oid
    if oid == SigOID.RSASSA_PSS:
        try:
            algo = cert.signature_hash_algorithm
        except UnsupportedAlgorithm:
            algo = None
        if isinstance(algo, hashes.HashAlgorithm) and algo.name in _PSS_NAMES:
            return _PSS_NAMES[algo.name]
        return "RSASSA-PSS"
    return _SIG_NAMES.get(oid, oid.dotted_string)


def public_key_info(cert: x509.Certificate) -> PublicKeyInfo:
    try:
        pk = cert.public_key()
    except (ValueError, UnsupportedAlgorithm) as e:
        log.debug("unsupported public key: %s", e)
        return OtherKey("Unsupported")

    if isinstance(pk, rsa.RSAPublicKey):
        return RSAKey(pk.key_size)
    if isinstance(pk, ec.EllipticCurvePublicKey):
        return ECKey(_CURVE_NAMES.get(pk.curve.name, pk.curve.name))
    if isinstance(pk, dsa.DSAPublicKey):
        return DSAKey(pk.key_size)
    if isinstance(pk, ed25519.Ed25519PublicKey):
        return OtherKey("Ed25519")
    if isinstance(pk, ed448.Ed448PublicKey):
        return OtherKey("Ed448")
    return OtherKey(pk.__class__.__name__)


def _validity(cert: x509.Certificate) -> tuple[dt.datetime, dt.datetime]:
    # compat cryptography>=42 (*_utc properties)
    if hasattr(cert, "not_valid_before_utc"):
        return cert.not_valid_before_utc, cert.not_valid_after_utc
    return as_utc(cert.not_valid_before), as_utc(cert.not_valid_after)


def from_x509(cert: x509.Certificate) -> ParsedCertificate:
    nb, na = _validity(cert)
    return ParsedCertificate(
        signature_algorithm=signature_algorithm_name(cert),
        public_key=public_key_info(cert),
        not_before=nb,
        not_after=na,
        subject=cert.subject.rfc4514_string(),
        issuer=cert.issuer.rfc4514_string(),
        serial_number=cert.serial_number,
    )


def _try_load_pem_cert(data: bytes) -> Optional[x509.Certificate]:
    # First CERTIFICATE block only, the rest of a bundle is ignored
    m = _PEM_CERT_RE.search(data)
    if not m:
        return None
    try:
        return x509.load_pem_x509_certificate(m.group(0))
    except ValueError as e:
        log.debug("PEM certificate block did not parse: %s", e)
        return None


def _try_load_der_cert(data: bytes) -> Optional[x509.Certificate]:
    try:
        return x509.load_der_x509_certificate(data)
    except ValueError as e:
        log.debug("not a DER certificate: %s", e)
        return None


def load_certificate(data: bytes) -> Optional[x509.Certificate]:
    """
    Decode a single X.509 certificate from PEM or DER bytes.
    Returns None when the bytes hold no certificate.
    """
    return _try_load_pem_cert(data) or _try_load_der_cert(data)
