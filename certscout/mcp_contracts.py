# certscout/mcp_contracts.py
from __future__ import annotations
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field


class FileType(BaseModel):
    extension: str = Field(..., examples=[".pem", ".der", ".jks", ""])
    content_type: str = Field(..., examples=["application/x-pem-file"])
    description: str = Field(..., examples=["PEM Encoded Certificate"])


class CertificateMeta(BaseModel):
    subject_dn: str
    issuer_dn: str
    serial_number: Optional[str] = None
    signature_algorithm: str = Field(..., examples=["SHA256-RSA", "ECDSA-SHA384"])
    public_key: Dict[str, Any]
    not_before: str
    not_after: str


class ComplianceReport(BaseModel):
    policy: str = Field(..., examples=["FIPS 140-3"])
    is_compliant: bool
    reasons: List[str] = []


class ValidityReport(BaseModel):
    status: Literal["not_yet_valid", "expired", "valid"]
    message: str


class FileSummary(BaseModel):
    size: int
    digest_sha256: str
    file_type: FileType
    x509: Optional[CertificateMeta] = None
    compliance: Optional[ComplianceReport] = None
    validity: Optional[ValidityReport] = None
