"""Tests for settings and funnel-rule loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from travelfunnel.errors import ConfigurationError
from travelfunnel.utils.config_loader import FunnelRules, Settings, load_funnel_rules, load_settings, validate_startup

REPO_RULES = Path(__file__).parent.parent / "config" / "funnel_rules.yml"

_ENV_VARS = (
    "CORIS_URL", "CORIS_LOGIN", "CORIS_SENHA", "PAYMENT_INGEST_URL", "PAYMENT_TENANT_ID", "PAYMENT_ORIGIN_TAG",
    "EZSIM_API_URL", "EZSIM_USER", "EZSIM_PASS", "DATABASE_URL", "INTEGRATIONS_MODE", "HTTP_TIMEOUT_SECONDS",
    "STRICT_CONFIG",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_repository_rules_file_loads():
    rules = load_funnel_rules(REPO_RULES)

    assert rules.origin_tiers["sempre_unico"].min_coverage == 60_000
    assert rules.origin_tiers["index"].max_coverage == 700_000
    assert [t.limit for t in rules.baggage_tiers] == [1000, 1500, 2000, 3000]
    assert rules.esim.target_plan == "eSIM, 2GB, 15 Days, Global, V2"


def test_rules_file_matches_built_in_defaults():
    assert load_funnel_rules(REPO_RULES) == FunnelRules()


def test_baggage_tiers_are_sorted(tmp_path):
    path = tmp_path / "rules.yml"
    path.write_text(
        "baggage_tiers:\n"
        "  - {min_coverage: 100000, limit: 2000}\n"
        "  - {min_coverage: 0, limit: 1000}\n",
        encoding="utf-8",
    )

    rules = load_funnel_rules(path)

    assert [t.min_coverage for t in rules.baggage_tiers] == [0, 100_000]


def test_empty_baggage_tiers_are_rejected(tmp_path):
    path = tmp_path / "rules.yml"
    path.write_text("baggage_tiers: []\n", encoding="utf-8")

    with pytest.raises(ValidationError):
        load_funnel_rules(path)


def test_explicit_missing_rules_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_funnel_rules(tmp_path / "nope.yml")


def test_load_settings_reads_environment(clean_env):
    clean_env.setenv("CORIS_LOGIN", "user")
    clean_env.setenv("CORIS_SENHA", "secret")
    clean_env.setenv("EZSIM_API_URL", "https://esim.test/")
    clean_env.setenv("HTTP_TIMEOUT_SECONDS", "12.5")
    clean_env.setenv("STRICT_CONFIG", "true")
    clean_env.setenv("INTEGRATIONS_MODE", " MOCK ")

    settings = load_settings(rules=FunnelRules())

    assert settings.coris_login == "user"
    assert settings.coris_password == "secret"
    assert settings.coris_url == "https://ws.coris.com.br/webservice2/service.asmx"
    assert settings.payment_tenant_id == "RODQ19"
    assert settings.ezsim_api_url == "https://esim.test"
    assert settings.http_timeout_seconds == 12.5
    assert settings.strict_config is True
    assert settings.integrations_mode == "mock"
    assert not settings.use_real_integrations


def test_invalid_timeout_means_no_timeout(clean_env):
    clean_env.setenv("HTTP_TIMEOUT_SECONDS", "soon")
    assert load_settings(rules=FunnelRules()).http_timeout_seconds is None


def test_missing_credentials_per_component():
    settings = Settings(ezsim_user="ops")

    assert settings.missing_for("quotes") == ["CORIS_LOGIN", "CORIS_SENHA"]
    assert settings.missing_for("checkout") == ["CORIS_LOGIN", "CORIS_SENHA"]
    with pytest.raises(ConfigurationError) as exc:
        settings.require("quotes")
    assert exc.value.missing == ["CORIS_LOGIN", "CORIS_SENHA"]


def test_mock_mode_needs_no_credentials():
    settings = Settings(integrations_mode="mock")

    assert settings.missing_for("checkout") == []
    settings.require("checkout")


def test_validate_startup_reports_without_strict():
    report = validate_startup(Settings(coris_login="u"))
    assert report == {"quotes": ["CORIS_SENHA"], "checkout": ["CORIS_SENHA"]}


def test_validate_startup_raises_when_strict():
    with pytest.raises(ConfigurationError):
        validate_startup(Settings(strict_config=True))


def test_validate_startup_passes_with_credentials():
    report = validate_startup(Settings(coris_login="u", coris_password="p"))
    assert report == {"quotes": [], "checkout": []}
