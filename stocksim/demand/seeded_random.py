"""
Seedable pseudo-random number generator.

Produces the same [0, 1) sequence for the same seed on every platform, using
the 32-bit mulberry32 algorithm.
"""

_MASK_32 = 0xFFFFFFFF
_GOLDEN_GAMMA = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0


class SeededRandom:
    """
    mulberry32 generator with a single 32-bit unsigned state.

    Every intermediate value is masked to 32 bits; Python integers are
    unbounded, so skipping a mask changes the sequence.
    """

    def __init__(self, seed: int):
        """
        Args:
            seed: Initial seed, truncated to an unsigned 32-bit value
        """
        self._state = int(seed) & _MASK_32

    @property
    def state(self) -> int:
        """Current 32-bit internal state."""
        return self._state

    def next(self) -> float:
        """
        Return the next pseudo-random float in [0, 1).

        Returns:
            Next value of the deterministic sequence
        """
        self._state = (self._state + _GOLDEN_GAMMA) & _MASK_32
        t = self._state
        t = ((t ^ (t >> 15)) * (t | 1)) & _MASK_32
        t = (t ^ ((t + (((t ^ (t >> 7)) * (t | 61)) & _MASK_32)) & _MASK_32)) & _MASK_32
        self._state = (t ^ (t >> 14)) & _MASK_32
        return self._state / _TWO_POW_32
