"""Random source for procedural field generation.

PCG-XSH-RR (32-bit output, 64-bit state). Field generation takes the
generator as an argument: tests pass a fixed seed so a skyline is
reproducible, the viewer uses ``PCG32.from_entropy()`` so every launch
draws a fresh one.
Reference: https://www.pcg-random.org/
"""

from __future__ import annotations

import secrets


class PCG32:
    _MASK32 = 0xFFFFFFFF
    _MASK64 = 0xFFFFFFFFFFFFFFFF
    _MUL = 6364136223846793005

    def __init__(self, seed: int, seq: int = 0) -> None:
        self.seed = seed
        self._state: int = 0
        self._inc: int = ((seq << 1) | 1) & self._MASK64
        self._advance()
        self._state = (self._state + seed) & self._MASK64
        self._advance()

    @classmethod
    def from_entropy(cls) -> PCG32:
        """Unseeded generator: seed drawn from the OS entropy pool."""
        return cls(secrets.randbits(64))

    def _advance(self) -> None:
        self._state = (self._state * self._MUL + self._inc) & self._MASK64

    def next_u32(self) -> int:
        old = self._state
        self._advance()
        xorshifted = (((old >> 18) ^ old) >> 27) & self._MASK32
        rot = (old >> 59) & 31
        return (
            (xorshifted >> rot) | (xorshifted << ((-rot) & 31))
        ) & self._MASK32

    def next_float(self) -> float:
        """Uniform float in [0, 1)."""
        return self.next_u32() / (self._MASK32 + 1)

    def uniform(self, lo: float, hi: float) -> float:
        """Uniform float in [lo, hi)."""
        return lo + self.next_float() * (hi - lo)
