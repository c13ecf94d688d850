from __future__ import annotations
import datetime as dt

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import rsa

from certscout.compliance import FIPS_140_3
from certscout.summary import inspect_bytes
from _util import NOW, der_of, make_cert, pem_of


def test_pem_certificate_summary():
    meta = inspect_bytes(pem_of(make_cert(cn="leaf.example.com")))
    assert meta["file_type"] == {
        "extension": ".pem",
        "content_type": "application/x-pem-file",
        "description": "PEM Encoded Certificate",
    }
    assert meta["size"] > 0 and len(meta["digest_sha256"]) == 64
    assert "CN=leaf.example.com" in meta["x509"]["subject_dn"]
    assert meta["compliance"] == {"policy": "FIPS 140-3", "is_compliant": True, "reasons": []}
    assert meta["validity"]["status"] == "valid"
    assert meta["validity"]["message"].startswith("Certificate is currently valid.")


def test_der_certificate_summary():
    meta = inspect_bytes(der_of(make_cert()))
    assert meta["file_type"]["extension"] == ".der"
    assert meta["file_type"]["description"].startswith("DER Encoded ")
    assert meta["x509"]["public_key"] == {"type": "EC", "curve": "P-256"}


def test_weak_expired_certificate_reports_every_reason():
    key = rsa.generate_private_key(public_exponent=65537, key_size=1024)
    x = make_cert(key, hashes.SHA256(), not_before=NOW - dt.timedelta(days=400), not_after=NOW - dt.timedelta(days=10))
    meta = inspect_bytes(pem_of(x), now=NOW)
    assert meta["compliance"]["is_compliant"] is False
    assert meta["compliance"]["reasons"] == [
        "Public key type or size is not FIPS 140-3 compliant",
        "Certificate is expired or not yet valid",
    ]
    assert meta["validity"] == {
        "status": "expired",
        "message": "Certificate has expired 10 days ago (on May 22, 2025)",
    }


def test_non_certificate_has_no_certificate_sections():
    meta = inspect_bytes(b"\xfe\xed\xfe\xed\x00\x00\x00\x02\x00\x00\x00\x00")
    assert meta["file_type"]["description"] == "Java KeyStore (JKS)"
    for key in ("x509", "compliance", "validity"):
        assert key not in meta


def test_only_the_sample_window_is_classified():
    data = b"A" * 600 + b"\x00\x01\x02" * 200
    assert inspect_bytes(data, policy=FIPS_140_3)["file_type"]["extension"] == ".txt"
