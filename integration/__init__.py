"""Integration package.

IMPORTANT:
Run CLI entrypoints via module execution from the repository root, e.g.:
  python3 -m integration.iv_stage --fixture integration/fixtures/iv/usdc_weth_5bps.json

This avoids Python import-path ambiguity when running files by relative path.
"""
