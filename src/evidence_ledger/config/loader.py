"""YAML configuration loading utilities."""

from pathlib import Path

import yaml

from evidence_ledger.config.models import EvidenceLedgerConfig


def load_config(path: Path | str) -> EvidenceLedgerConfig:
    """Load configuration from YAML file.

    Args:
        path: Path to YAML config file.

    Returns:
        Validated EvidenceLedgerConfig. An empty file yields all defaults.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If config is invalid.
    """
    path = Path(path)
    with path.open() as f:
        raw = yaml.safe_load(f)

    return EvidenceLedgerConfig.model_validate(raw or {})


def get_default_config_path() -> Path:
    """Get path to default config file."""
    return Path(__file__).parent.parent.parent.parent / "configs" / "default.yaml"
