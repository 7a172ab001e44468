"""Central configuration loader for Portfolio Builder."""

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv

# Package directory holds the bundled configs/ and report templates
PACKAGE_ROOT = Path(__file__).resolve().parent
PROJECT_ROOT = PACKAGE_ROOT.parent

load_dotenv(PROJECT_ROOT / ".env")


def load_settings(path: Path | None = None) -> dict:
    """Load settings from configs/settings.yaml (or PORTFOLIO_BUILDER_SETTINGS)."""
    override = os.getenv("PORTFOLIO_BUILDER_SETTINGS", "")
    settings_path = path or (Path(override) if override else PACKAGE_ROOT / "configs" / "settings.yaml")
    with open(settings_path) as f:
        return yaml.safe_load(f) or {}


SETTINGS = load_settings()


# --- Environment overrides ---
class Env:
    RISK_FREE_RATE = os.getenv("PORTFOLIO_RISK_FREE_RATE", "")
    LOG_LEVEL = os.getenv("PORTFOLIO_LOG_LEVEL", "")


# --- Paths ---
class Paths:
    DATA_RAW = PROJECT_ROOT / "data" / "raw"
    REPORTS_OUTPUT = PROJECT_ROOT / "reports" / "output"
    REPORTS_TEMPLATES = PACKAGE_ROOT / "reports" / "templates"


def engine_setting(key: str, default):
    """Read an ``engine.*`` value, honouring environment overrides."""
    if key == "risk_free_rate" and Env.RISK_FREE_RATE:
        return float(Env.RISK_FREE_RATE)
    return SETTINGS.get("engine", {}).get(key, default)


def log_level() -> str:
    return Env.LOG_LEVEL or SETTINGS.get("app", {}).get("log_level", "INFO")
