"""circuit/runner.py

Setup and evaluation entry points for app circuits.

compile_circuit reads the declared capacities once and rejects invalid ones.
CompiledCircuit.evaluate runs the definition over one padded input with a
fresh CircuitAPI; nothing carries over between evaluations.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .api import CircuitAPI, CircuitSetupError, ConstraintViolationError
from .app import AppCircuit
from .output import OutputBuffer
from .records import DataInput
from .streams import check_capacities

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CircuitResult:
    output: bytes
    witness: Any
    op_count: int

    def to_dict(self) -> Dict[str, Any]:
        witness = self.witness.to_dict() if hasattr(self.witness, "to_dict") else self.witness
        return {
            "output_hex": "0x" + self.output.hex(),
            "witness": witness,
            "op_count": self.op_count,
        }


class CompiledCircuit:
    def __init__(self, circuit: AppCircuit, capacities: Tuple[int, int, int]):
        self.circuit = circuit
        self.max_receipts, self.max_storage, self.max_transactions = capacities

    @property
    def capacities(self) -> Tuple[int, int, int]:
        return self.max_receipts, self.max_storage, self.max_transactions

    def _check_shape(self, data: DataInput) -> None:
        for name, items, capacity in (
            ("receipts", data.receipts, self.max_receipts),
            ("storage_slots", data.storage_slots, self.max_storage),
            ("transactions", data.transactions, self.max_transactions),
        ):
            if len(items) != capacity:
                raise CircuitSetupError(
                    f"{name}: got {len(items)} records, circuit allocates {capacity} (pad the input first)"
                )

    def evaluate(self, data: DataInput, api: Optional[CircuitAPI] = None) -> CircuitResult:
        """
        Evaluate the circuit over one padded input.

        Raises:
            CircuitSetupError: input streams do not match the allocated capacities
            ConstraintViolationError: a witness fails an assertion; no output is produced
        """
        self._check_shape(data)
        api = api or CircuitAPI()
        out = OutputBuffer(api)
        try:
            witness = self.circuit.define(api, data, out)
        except ConstraintViolationError as e:
            logger.error(f"[circuit] constraint violation: {e}")
            raise
        return CircuitResult(output=out.to_bytes(), witness=witness, op_count=len(api.trace))


def compile_circuit(circuit: AppCircuit) -> CompiledCircuit:
    """Read and validate the circuit's declared capacities."""
    capacities = check_capacities(*circuit.allocate())
    logger.info(
        f"[circuit] {type(circuit).__name__} allocated receipts={capacities[0]} "
        f"storage={capacities[1]} transactions={capacities[2]}"
    )
    return CompiledCircuit(circuit, capacities)
