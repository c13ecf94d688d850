"""Policy evaluation for a single, already parsed certificate.

``evaluate`` produces the verdict. ``explain_validity`` is a separate
informational helper: a certificate can be expired and still pass every
algorithm check, and the two are reported side by side, never merged.
"""
from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Literal, Optional, Tuple, assert_never

from .certinfo import DSAKey, ECKey, OtherKey, ParsedCertificate, PublicKeyInfo, RSAKey
from .common import as_utc, human_date, utc_now, whole_days

log = logging.getLogger(__name__)

ValidityStatus = Literal["not_yet_valid", "expired", "valid"]

VALIDITY_REASON = "Certificate is expired or not yet valid"


@dataclass(frozen=True)
class CompliancePolicy:
    name: str
    allowed_signature_algorithms: FrozenSet[str]
    allowed_curves: FrozenSet[str]
    min_rsa_bits: int
    allow_dsa: bool = False


FIPS_140_3 = CompliancePolicy(
    name="FIPS 140-3",
    allowed_signature_algorithms=frozenset(
        {
            "SHA256-RSA",
            "SHA384-RSA",
            "SHA512-RSA",
            "ECDSA-SHA256",
            "ECDSA-SHA384",
            "ECDSA-SHA512",
        }
    ),
    allowed_curves=frozenset({"P-256", "P-384", "P-521"}),
    min_rsa_bits=2048,
)


@dataclass(frozen=True)
class ComplianceResult:
    is_compliant: bool
    reasons: Tuple[str, ...] = field(default_factory=tuple)

    def as_dict(self) -> Dict[str, Any]:
        return {"is_compliant": self.is_compliant, "reasons": list(self.reasons)}


def signature_compliant(algorithm: str, policy: CompliancePolicy) -> bool:
    return algorithm in policy.allowed_signature_algorithms


def public_key_compliant(key: PublicKeyInfo, policy: CompliancePolicy) -> bool:
    match key:
        case RSAKey(bits=bits):
            return bits >= policy.min_rsa_bits
        case ECKey(curve=curve):
            return curve in policy.allowed_curves
        case DSAKey():
            return policy.allow_dsa
        case OtherKey():
            return False
        case _:
            assert_never(key)


def within_validity(cert: ParsedCertificate, now: dt.datetime) -> bool:
    return cert.not_before < now < cert.not_after


def evaluate(
    cert: ParsedCertificate,
    policy: CompliancePolicy = FIPS_140_3,
    now: Optional[dt.datetime] = None,
) -> ComplianceResult:
    """
    Score ``cert`` against ``policy``.

    Checks run in a fixed order (signature algorithm, public key, validity
    window) and every failed check contributes exactly one reason, so the
    reasons list is stable across runs.
    """
    now = as_utc(now) if now else utc_now()
    reasons: List[str] = []

    if not signature_compliant(cert.signature_algorithm, policy):
        reasons.append(f"Signature algorithm {cert.signature_algorithm} is not {policy.name} compliant")

    if not public_key_compliant(cert.public_key, policy):
        reasons.append(f"Public key type or size is not {policy.name} compliant")

    if not within_validity(cert, now):
        reasons.append(VALIDITY_REASON)

    result = ComplianceResult(is_compliant=not reasons, reasons=tuple(reasons))
    log.debug("%s against %s: compliant=%s reasons=%d", cert.subject or "certificate", policy.name,
              result.is_compliant, len(result.reasons))
    return result


def validity_status(cert: ParsedCertificate, now: Optional[dt.datetime] = None) -> ValidityStatus:
    now = as_utc(now) if now else utc_now()
    if now < cert.not_before:
        return "not_yet_valid"
    if now > cert.not_after:
        return "expired"
    return "valid"


def explain_validity(cert: ParsedCertificate, now: Optional[dt.datetime] = None) -> str:
    now = as_utc(now) if now else utc_now()
    status = validity_status(cert, now)
    if status == "not_yet_valid":
        days = whole_days(cert.not_before - now)
        return (
            f"Certificate is not yet valid. Will become valid in {days} days "
            f"(on {human_date(cert.not_before)})"
        )
    if status == "expired":
        days = whole_days(now - cert.not_after)
        return f"Certificate has expired {days} days ago (on {human_date(cert.not_after)})"
    days = whole_days(cert.not_after - now)
    return f"Certificate is currently valid. Expires in {days} days (on {human_date(cert.not_after)})"
