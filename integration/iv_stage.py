#!/usr/bin/env python3
"""integration/iv_stage.py

Runs the IV circuit over a swap/storage fixture and prints the result.

Pipeline flow:
1. Load circuit config (config/iv_circuit.yaml)
2. Compile the circuit (capacity checks)
3. Keep the swaps inside the lookback window (when the fixture names its
   latest block) and build the padded proof request
4. Evaluate and decode the output

Typical use:
  python integration/iv_stage.py \
    --fixture integration/fixtures/iv/usdc_weth_5bps.json

Exit codes:
    - 0: metric computed
    - 1: config, input or constraint error
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from circuit.api import CircuitAPI, CircuitError
from circuit.app import IvCircuit
from circuit.output import decode_output_uint
from circuit.runner import compile_circuit
from circuit.slots import decode_slot0
from config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_circuit_config
from ingestion.blocks import MAINNET_CHAIN_ID, lookback_start_block
from ingestion.proof_request import ProofRequestError, build_iv_request, load_swap_fixture, swaps_since

logger = logging.getLogger(__name__)

DEFAULT_FIXTURE = PROJECT_ROOT / "integration" / "fixtures" / "iv" / "usdc_weth_5bps.json"


def _window_start(data: Dict[str, Any]) -> Optional[int]:
    """First block of the one-day swap window, when the fixture names its latest block."""
    latest = data.get("latest_block")
    if latest is None:
        return None
    try:
        return lookback_start_block(latest, data.get("interval", "1d"), int(data.get("chain_id", MAINNET_CHAIN_ID)))
    except (KeyError, TypeError, ValueError) as e:
        raise ProofRequestError(f"Bad latest_block in fixture: {e}")


def run_iv_stage(fixture_path: Path, config_path: Path = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """Evaluate the IV circuit over one fixture. Returns a JSON-friendly summary."""
    loaded = load_circuit_config(config_path)
    cfg = loaded.config

    compiled = compile_circuit(IvCircuit(cfg))

    data = json.loads(Path(fixture_path).read_text(encoding="utf-8"))
    swap_logs, slot0, liquidity_slot = load_swap_fixture(data)

    window_start = _window_start(data)
    if window_start is not None:
        in_window = swaps_since(swap_logs, window_start)
        if len(in_window) < len(swap_logs):
            logger.warning(f"[iv] dropped {len(swap_logs) - len(in_window)} swaps before block {window_start}")
        swap_logs = in_window

    req = build_iv_request(
        swap_logs,
        slot0,
        liquidity_slot,
        max_receipts=cfg.max_receipts,
        field_index=cfg.amount1_data_index,
        pool_address=data.get("pool_address", cfg.pool_address),
    )
    result = compiled.evaluate(req.build_input(compiled.capacities))
    metric = decode_output_uint(result.output, cfg.output_bits)

    logger.info(f"[iv] metric={metric} from {len(req.receipts)} swaps (config {loaded.config_hash[:12]})")

    return {
        "circuit": loaded.circuit_name,
        "config_hash": loaded.config_hash,
        "fixture": str(fixture_path),
        "window_start_block": window_start,
        "swaps": len(req.receipts),
        "metric": metric,
        "slot0": decode_slot0(CircuitAPI(), req.storage[0].value).to_dict(),
        "input": {
            "receipts": [r.to_dict() for r in req.receipts],
            "storage": [s.to_dict() for s in req.storage],
        },
        **result.to_dict(),
    }


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Evaluate the Uniswap V3 IV circuit over a fixture")
    ap.add_argument("--fixture", default=str(DEFAULT_FIXTURE), help="Swap/storage fixture JSON")
    ap.add_argument("--config", default=str(DEFAULT_CONFIG_PATH), help="Circuit config YAML")
    ap.add_argument("--verbose", "-v", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s %(message)s',
        datefmt='%H:%M:%S',
    )

    try:
        summary = run_iv_stage(Path(args.fixture), Path(args.config))
    except (ConfigError, CircuitError, ProofRequestError) as e:
        logger.error(f"[iv] {type(e).__name__}: {e}")
        return 1
    except FileNotFoundError as e:
        logger.error(f"[iv] fixture not found: {e}")
        return 1
    except json.JSONDecodeError as e:
        logger.error(f"[iv] fixture is not valid JSON: {e}")
        return 1

    print(json.dumps(summary, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
