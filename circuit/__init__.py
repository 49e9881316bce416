"""circuit/__init__.py

Uniswap V3 implied-volatility circuit.

Submodules:
- api: branch-free integer primitives and circuit errors
- records / streams: padded receipt and storage inputs
- slots: pool storage layout decoding
- volume, liquidity, volatility: the IV pipeline
- output: output buffer encoding
- app / runner: circuit interface, IV circuit, setup and evaluation
"""

from .api import CircuitAPI, CircuitError, CircuitSetupError, ConstraintViolationError
from .app import AppCircuit, IvCircuit, IvWitness
from .records import DataInput, LogField, ReceiptRecord, StorageRecord
from .runner import CircuitResult, CompiledCircuit, compile_circuit

__all__ = [
    "CircuitAPI",
    "CircuitError",
    "CircuitSetupError",
    "ConstraintViolationError",
    "AppCircuit",
    "IvCircuit",
    "IvWitness",
    "DataInput",
    "LogField",
    "ReceiptRecord",
    "StorageRecord",
    "CircuitResult",
    "CompiledCircuit",
    "compile_circuit",
]
