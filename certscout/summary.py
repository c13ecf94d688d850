import datetime as dt
import logging
from typing import Any, Dict, Optional

from .certinfo import ParsedCertificate, from_x509, load_certificate
from .common import sha256_hex
from .compliance import FIPS_140_3, CompliancePolicy, evaluate, explain_validity, validity_status
from .filetype import ByteSample, classify
from .mcp_contracts import CertificateMeta, ComplianceReport, FileSummary, FileType, ValidityReport

log = logging.getLogger(__name__)


def file_type_of(data: bytes) -> FileType:
    return FileType(**classify(ByteSample(data)).as_dict())


def certificate_sections(
    cert: ParsedCertificate,
    policy: CompliancePolicy = FIPS_140_3,
    now: Optional[dt.datetime] = None,
) -> Dict[str, Any]:
    # Compliance and validity are computed independently and reported side by side
    result = evaluate(cert, policy, now=now)
    return {
        "x509": CertificateMeta(**cert.as_dict()),
        "compliance": ComplianceReport(policy=policy.name, **result.as_dict()),
        "validity": ValidityReport(
            status=validity_status(cert, now=now),
            message=explain_validity(cert, now=now),
        ),
    }


def inspect_bytes(
    data: bytes,
    policy: CompliancePolicy = FIPS_140_3,
    now: Optional[dt.datetime] = None,
) -> Dict[str, Any]:
    file_type = file_type_of(data)
    sections: Dict[str, Any] = {}

    x = load_certificate(data)
    if x is None:
        log.debug("no certificate in %d bytes (%s)", len(data), file_type.description)
    else:
        sections = certificate_sections(from_x509(x), policy, now=now)

    summary = FileSummary(size=len(data), digest_sha256=sha256_hex(data), file_type=file_type, **sections)
    return summary.model_dump(exclude_none=True)
