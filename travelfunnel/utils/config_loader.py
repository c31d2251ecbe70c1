"""
Configuration loader for the funnel backend.

Two sources:
- environment variables (credentials, vendor base URLs, mode switches), read
  once into a Settings object that is passed to each component
- config/funnel_rules.yml (filter tiers, baggage table, eSIM plan), validated
  into FunnelRules
"""

import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from travelfunnel.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_RULES_PATH = Path(__file__).parent.parent.parent / "config" / "funnel_rules.yml"


class OriginTier(BaseModel):
    """Coverage window (inclusive) for one pricing-origin tag"""

    min_coverage: Optional[int] = Field(default=None, ge=0)
    max_coverage: Optional[int] = Field(default=None, ge=0)

    def accepts(self, coverage: int) -> bool:
        if self.min_coverage is not None and coverage < self.min_coverage:
            return False
        if self.max_coverage is not None and coverage > self.max_coverage:
            return False
        return True


class BaggageTier(BaseModel):
    min_coverage: int = Field(ge=0)
    limit: int = Field(gt=0)


class EsimRules(BaseModel):
    target_plan: str = "eSIM, 2GB, 15 Days, Global, V2"
    fallback_keywords: List[str] = Field(default_factory=lambda: ["Global", "2GB"])


def _default_origin_tiers() -> Dict[str, OriginTier]:
    return {
        "sempre_unico": OriginTier(min_coverage=60_000, max_coverage=1_000_000),
        "index": OriginTier(max_coverage=700_000),
    }


def _default_baggage_tiers() -> List[BaggageTier]:
    return [
        BaggageTier(min_coverage=0, limit=1_000),
        BaggageTier(min_coverage=60_000, limit=1_500),
        BaggageTier(min_coverage=100_000, limit=2_000),
        BaggageTier(min_coverage=250_000, limit=3_000),
    ]


class FunnelRules(BaseModel):
    """Complete business-rule configuration"""

    origin_tiers: Dict[str, OriginTier] = Field(default_factory=_default_origin_tiers)
    baggage_tiers: List[BaggageTier] = Field(default_factory=_default_baggage_tiers)
    esim: EsimRules = Field(default_factory=EsimRules)

    @field_validator("baggage_tiers")
    @classmethod
    def _sorted_tiers(cls, tiers: List[BaggageTier]) -> List[BaggageTier]:
        if not tiers:
            raise ValueError("baggage_tiers must not be empty")
        return sorted(tiers, key=lambda t: t.min_coverage)


def load_funnel_rules(config_path: Optional[Path] = None) -> FunnelRules:
    """
    Load and validate business rules from YAML

    Args:
        config_path: Path to the rules file. Defaults to config/funnel_rules.yml;
            when the default file is absent the built-in rules are used.

    Returns:
        Validated FunnelRules object

    Raises:
        FileNotFoundError: If an explicit config file doesn't exist
        ValidationError: If config doesn't match schema
    """
    if config_path is None:
        config_path = DEFAULT_RULES_PATH
        if not config_path.exists():
            logger.warning("Rules file %s not found; using built-in funnel rules", config_path)
            return FunnelRules()

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        config_data = yaml.safe_load(f) or {}

    try:
        rules = FunnelRules(**config_data)
        logger.info(f"Successfully loaded funnel rules from {config_path}")
        return rules
    except ValidationError as e:
        logger.error(f"Funnel rules validation failed: {e}")
        raise


# ---------------------------------------------------------------------------
# Environment settings
# ---------------------------------------------------------------------------

_REQUIRED_CREDENTIALS = {
    "quotes": ("coris_login", "coris_password"),
    "checkout": ("coris_login", "coris_password"),
}

# Without these the checkout still charges and issues, but provisioning always fails.
_DEGRADING_CREDENTIALS = {
    "checkout": ("ezsim_user", "ezsim_password"),
}

_ENV_NAMES = {
    "coris_login": "CORIS_LOGIN",
    "coris_password": "CORIS_SENHA",
    "ezsim_user": "EZSIM_USER",
    "ezsim_password": "EZSIM_PASS",
}


class Settings(BaseModel):
    coris_url: str = "https://ws.coris.com.br/webservice2/service.asmx"
    coris_login: str = ""
    coris_password: str = ""

    payment_ingest_url: str = "https://portalv2.modoseguro.digital/api/ingest"
    payment_tenant_id: str = "RODQ19"
    payment_origin_tag: str = "lp_remessa_prod"

    ezsim_api_url: str = "https://beta.ezsimconnect.com"
    ezsim_user: str = ""
    ezsim_password: str = ""

    database_url: str = ""

    integrations_mode: str = "real"
    http_timeout_seconds: Optional[float] = None
    strict_config: bool = False

    rules: FunnelRules = Field(default_factory=FunnelRules)

    @property
    def use_real_integrations(self) -> bool:
        return self.integrations_mode not in {"mock", "test"}

    def missing_for(self, component: str) -> List[str]:
        """Environment variable names still missing for `component` in the current mode."""
        if not self.use_real_integrations:
            return []
        return [_ENV_NAMES[attr] for attr in _REQUIRED_CREDENTIALS[component] if not getattr(self, attr)]

    def require(self, component: str) -> None:
        missing = self.missing_for(component)
        if missing:
            raise ConfigurationError(component, missing)


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes")


def _env_float(name: str) -> Optional[float]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r", name, raw)
        return None


def load_settings(rules: Optional[FunnelRules] = None) -> Settings:
    """Build Settings from the process environment (call load_dotenv() first)."""
    defaults = Settings()
    settings = Settings(
        coris_url=os.getenv("CORIS_URL", defaults.coris_url),
        coris_login=os.getenv("CORIS_LOGIN", ""),
        coris_password=os.getenv("CORIS_SENHA", ""),
        payment_ingest_url=os.getenv("PAYMENT_INGEST_URL", defaults.payment_ingest_url),
        payment_tenant_id=os.getenv("PAYMENT_TENANT_ID", defaults.payment_tenant_id),
        payment_origin_tag=os.getenv("PAYMENT_ORIGIN_TAG", defaults.payment_origin_tag),
        ezsim_api_url=os.getenv("EZSIM_API_URL", defaults.ezsim_api_url).rstrip("/"),
        ezsim_user=os.getenv("EZSIM_USER", ""),
        ezsim_password=os.getenv("EZSIM_PASS", ""),
        database_url=os.getenv("DATABASE_URL", ""),
        integrations_mode=os.getenv("INTEGRATIONS_MODE", "real").strip().lower() or "real",
        http_timeout_seconds=_env_float("HTTP_TIMEOUT_SECONDS"),
        strict_config=_env_flag("STRICT_CONFIG"),
        rules=rules or load_funnel_rules(),
    )
    return settings


def validate_startup(settings: Settings) -> Dict[str, List[str]]:
    """Check every component once at startup.

    Missing credentials are logged; with strict_config they abort startup.
    Returns component -> missing variable names.
    """
    report = {component: settings.missing_for(component) for component in _REQUIRED_CREDENTIALS}
    for component, missing in report.items():
        if not missing:
            continue
        logger.error("%s endpoint is not configured; missing %s", component, ", ".join(missing))
        if settings.strict_config:
            raise ConfigurationError(component, missing)

    if settings.use_real_integrations:
        for component, attrs in _DEGRADING_CREDENTIALS.items():
            missing = [_ENV_NAMES[attr] for attr in attrs if not getattr(settings, attr)]
            if missing:
                logger.warning("%s will run degraded; missing %s", component, ", ".join(missing))
    return report
