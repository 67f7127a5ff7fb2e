# game/ai/features.py
"""
Board -> (entropy, purity) feature transform.

The board is encoded on a tiny 4-qubit state vector: one RY rotation per cell,
a CX chain, then one RX rotation per cell (cell i acts on qubit i % 4).
The measurement distribution over the 16 basis states gives
  entropy = -sum(p * log2 p)   in [0, 4]
  purity  = sum(p ** 2)        in [1/16, 1]
Everything is deterministic: same board, same numbers.
These values only break ties in the scorer and feed the analysis display.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np

from .board import AI, BOARD_CELLS, HUMAN, Board

N_QUBITS = 4
N_STATES = 2 ** N_QUBITS
TOP_STATES = 3
PROB_EPSILON = 1e-10

ENTANGLERS: Tuple[Tuple[int, int], ...] = ((0, 1), (1, 2), (2, 3))


@dataclass(frozen=True)
class QuantumFeatures:
    probabilities: List[float]
    entropy: float
    purity: float
    dominant_states: List[Tuple[int, float]] = field(default_factory=list)

    @property
    def top_probability(self) -> float:
        return self.dominant_states[0][1] if self.dominant_states else 0.0

    def is_dominant(self, state: int) -> bool:
        return any(s == state for s, _ in self.dominant_states)


def _cell_value(cell: str) -> int:
    if cell == HUMAN:
        return 1
    if cell == AI:
        return -1
    return 0


def _ry(theta: float) -> np.ndarray:
    c, s = math.cos(theta / 2), math.sin(theta / 2)
    return np.array([[c, -s], [s, c]], dtype=complex)


def _rx(theta: float) -> np.ndarray:
    c, s = math.cos(theta / 2), math.sin(theta / 2)
    return np.array([[c, -1j * s], [-1j * s, c]], dtype=complex)


def _apply_single(state: np.ndarray, gate: np.ndarray, qubit: int) -> np.ndarray:
    state = np.tensordot(gate, state, axes=([1], [qubit]))
    return np.moveaxis(state, 0, qubit)


def _apply_cx(state: np.ndarray, control: int, target: int) -> np.ndarray:
    state = state.copy()
    idx: List[object] = [slice(None)] * N_QUBITS
    idx[control] = 1
    sub = state[tuple(idx)]
    # control axis is gone from `sub`
    axis = target if target < control else target - 1
    state[tuple(idx)] = np.flip(sub, axis=axis).copy()
    return state


def encode_board(board: Board) -> np.ndarray:
    """Run the encoding circuit and return the 16-amplitude state vector."""
    state = np.zeros((2,) * N_QUBITS, dtype=complex)
    state[(0,) * N_QUBITS] = 1.0

    # rotations about the same axis on the same qubit add up
    ry_angles = [0.0] * N_QUBITS
    rx_angles = [0.0] * N_QUBITS
    for i in range(BOARD_CELLS):
        v = _cell_value(board[i])
        ry_angles[i % N_QUBITS] += (v + 1) * math.pi
        rx_angles[i % N_QUBITS] += (v + 1) * math.pi / 2

    for qubit, theta in enumerate(ry_angles):
        state = _apply_single(state, _ry(theta), qubit)

    for control, target in ENTANGLERS:
        state = _apply_cx(state, control, target)

    for qubit, theta in enumerate(rx_angles):
        state = _apply_single(state, _rx(theta), qubit)

    # qubit 0 is the most significant bit of the basis index
    return state.reshape(N_STATES)


def extract_features(board: Board) -> QuantumFeatures:
    amplitudes = encode_board(board)
    probs = np.abs(amplitudes) ** 2
    probs = probs / probs.sum()

    nonzero = probs[probs > PROB_EPSILON]
    entropy = max(0.0, float(-np.sum(nonzero * np.log2(nonzero))))
    purity = float(np.clip(np.sum(probs ** 2), 0.0, 1.0))

    ranked = sorted(range(N_STATES), key=lambda s: -probs[s])
    dominant = [(s, float(probs[s])) for s in ranked[:TOP_STATES]]

    return QuantumFeatures(
        probabilities=[float(p) for p in probs],
        entropy=entropy,
        purity=purity,
        dominant_states=dominant,
    )
