# tests/test_settings.py
from certscout.compliance import FIPS_140_3
from certscout.settings import Settings

def test_settings_defaults(monkeypatch):
    monkeypatch.delenv("CERTSCOUT_LOG_LEVEL", raising=False)
    monkeypatch.delenv("CERTSCOUT_MIN_RSA_BITS", raising=False)

    s = Settings.from_env()
    assert s.LOG_LEVEL == "INFO"
    assert s.MIN_RSA_BITS == 2048
    assert s.policy() is FIPS_140_3

def test_settings_parsing(monkeypatch):
    monkeypatch.setenv("CERTSCOUT_LOG_LEVEL", "debug")
    monkeypatch.setenv("CERTSCOUT_MIN_RSA_BITS", "3072")

    s = Settings.from_env()
    assert s.LOG_LEVEL == "DEBUG"
    assert s.MIN_RSA_BITS == 3072
    policy = s.policy()
    assert policy.min_rsa_bits == 3072
    assert policy.allowed_curves == FIPS_140_3.allowed_curves
    assert FIPS_140_3.min_rsa_bits == 2048

def test_settings_invalid_rsa_bits_fall_back(monkeypatch):
    for raw in ("abc", "512", "-1"):
        monkeypatch.setenv("CERTSCOUT_MIN_RSA_BITS", raw)
        assert Settings.from_env().MIN_RSA_BITS == 2048
