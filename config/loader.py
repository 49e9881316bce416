"""config/loader.py

Loader for the circuit YAML in config/iv_circuit.yaml.

Deterministic config hash (sha256 of file bytes) so a proof can be tied to
the exact circuit parameters it was built with.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from config.circuit_schema import IvCircuitConfig

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_CONFIG_PATH = REPO_ROOT / "config" / "iv_circuit.yaml"


class ConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class LoadedCircuitConfig:
    path: str
    config: IvCircuitConfig
    config_hash: str  # sha256 hex
    circuit_name: str
    version: str


def _sha256_file(path: Path) -> str:
    b = path.read_bytes()
    return hashlib.sha256(b).hexdigest()


def _require(d: Dict[str, Any], key: str) -> Any:
    if key not in d:
        raise ConfigError(f"Missing required key: {key}")
    return d[key]


def _as_int(value: Any, key: str) -> int:
    """Accept ints and hex strings (addresses, topics)."""
    if isinstance(value, bool):
        raise ConfigError(f"{key} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value, 0)
        except ValueError:
            raise ConfigError(f"{key} must be an integer or 0x-prefixed hex, got {value!r}")
    raise ConfigError(f"{key} must be an integer, got {value!r}")


def _require_mapping(raw: Dict[str, Any], key: str) -> Dict[str, Any]:
    sub = _require(raw, key)
    if not isinstance(sub, dict):
        raise ConfigError(f"{key} must be a mapping")
    return sub


def load_circuit_config(path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> LoadedCircuitConfig:
    """Load and validate the circuit config."""
    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Config not found: {p}")

    raw = yaml.safe_load(p.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ConfigError(f"{p.name} must be a YAML mapping (dict at top-level)")

    version = str(_require(raw, "version"))
    circuit_name = str(_require(raw, "circuit_name"))

    capacities = _require_mapping(raw, "capacities")
    pool = _require_mapping(raw, "pool")
    formula = raw.get("formula", {}) or {}
    if not isinstance(formula, dict):
        raise ConfigError("formula must be a mapping")

    kwargs: Dict[str, Any] = {
        "max_receipts": _as_int(_require(capacities, "receipts"), "capacities.receipts"),
        "max_storage": _as_int(_require(capacities, "storage"), "capacities.storage"),
        "max_transactions": _as_int(capacities.get("transactions", 0), "capacities.transactions"),
        "pool_address": _as_int(pool.get("address", 0), "pool.address"),
        "fee_tier": _as_int(_require(pool, "fee_tier"), "pool.fee_tier"),
    }
    if "swap_event_id" in pool:
        kwargs["swap_event_id"] = _as_int(pool["swap_event_id"], "pool.swap_event_id")
    for key in ("volume_field", "amount1_data_index", "tick_band_width", "sqrt_365", "output_bits"):
        if key in formula:
            kwargs[key] = _as_int(formula[key], f"formula.{key}")

    try:
        cfg = IvCircuitConfig(**kwargs)
    except ValueError as e:
        raise ConfigError(f"Invalid circuit config {p}: {e}")

    loaded = LoadedCircuitConfig(
        path=str(p),
        config=cfg,
        config_hash=_sha256_file(p),
        circuit_name=circuit_name,
        version=version,
    )
    logger.info(f"[config] Loaded {circuit_name} v{version} from {p} (hash {loaded.config_hash[:12]})")
    return loaded
