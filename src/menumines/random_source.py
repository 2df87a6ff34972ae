"""
Seeded random source for MenuMines.

Mine placement must be bit-for-bit reproducible from a seed on every
platform, so the generator is fixed here instead of relying on
``random.Random`` whose algorithm is an implementation detail.

Algorithm:
    48-bit linear congruential generator

        state' = (state * 0x5DEECE66D + 0xB) mod 2**48

    seeded with ``(seed ^ 0x5DEECE66D) mod 2**48``. ``next_int`` takes the
    top 31 bits of the next state and rejects the tail of the range that
    would bias the modulo.
"""


# ============================================================================
# Constants
# ============================================================================

MULTIPLIER = 0x5DEECE66D
INCREMENT = 0xB
STATE_BITS = 48
STATE_MASK = (1 << STATE_BITS) - 1
MAX_BOUND = (1 << 31) - 1


# ============================================================================
# Linear Congruential Random
# ============================================================================

class LinearCongruentialRandom:
    """
    Deterministic integer generator driven by a 64-bit seed.

    The same seed and the same sequence of calls always produce the
    same values. Negative seeds use their two's-complement low bits.
    """

    def __init__(self, seed: int) -> None:
        """
        Initialize the generator.

        Args:
            seed: Any integer; only its low 48 bits influence the state.
        """
        self._state = (seed ^ MULTIPLIER) & STATE_MASK

    def _next_bits(self, bits: int) -> int:
        """Advance the state and return its top ``bits`` bits."""
        self._state = (self._state * MULTIPLIER + INCREMENT) & STATE_MASK
        return self._state >> (STATE_BITS - bits)

    def next_int(self, upper_bound: int) -> int:
        """
        Draw a uniform integer in ``[0, upper_bound)``.

        Args:
            upper_bound: Exclusive upper bound, between 1 and 2**31 - 1.

        Returns:
            The next value of the sequence.

        Raises:
            ValueError: If the bound is out of range.
        """
        if upper_bound < 1 or upper_bound > MAX_BOUND:
            raise ValueError(f"upper_bound must be in [1, {MAX_BOUND}]")

        if upper_bound & (upper_bound - 1) == 0:
            return (upper_bound * self._next_bits(31)) >> 31

        bits = self._next_bits(31)
        value = bits % upper_bound
        while bits - value + (upper_bound - 1) > MAX_BOUND:
            bits = self._next_bits(31)
            value = bits % upper_bound
        return value
