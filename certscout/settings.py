import os
from dataclasses import dataclass, field, replace

from .compliance import FIPS_140_3, CompliancePolicy

_MIN_RSA_FLOOR = 1024


@dataclass(frozen=True)
class Settings:
    LOG_LEVEL: str = field(default="INFO")
    MIN_RSA_BITS: int = field(default=FIPS_140_3.min_rsa_bits)

    @staticmethod
    def from_env() -> "Settings":
        log_level = os.getenv("CERTSCOUT_LOG_LEVEL", "INFO").upper()
        try:
            bits = int(os.getenv("CERTSCOUT_MIN_RSA_BITS", str(FIPS_140_3.min_rsa_bits)))
            if bits < _MIN_RSA_FLOOR:
                raise ValueError
        except ValueError:
            bits = FIPS_140_3.min_rsa_bits
        return Settings(LOG_LEVEL=log_level, MIN_RSA_BITS=bits)

    def policy(self) -> CompliancePolicy:
        if self.MIN_RSA_BITS == FIPS_140_3.min_rsa_bits:
            return FIPS_140_3
        return replace(FIPS_140_3, min_rsa_bits=self.MIN_RSA_BITS)
