from __future__ import annotations

import math
import random
from typing import Callable


class InvalidSampleRateError(ValueError):
    """Raised when a sample rate is not a finite number in [0.0, 1.0]."""


def validate_sample_rate(rate: float) -> float:
    if isinstance(rate, bool) or not isinstance(rate, (int, float)):
        raise InvalidSampleRateError(f"sample rate must be a number, got {type(rate).__name__}")

    value = float(rate)
    if math.isnan(value) or not 0.0 <= value <= 1.0:
        raise InvalidSampleRateError(f"sample rate must be within [0.0, 1.0], got {rate!r}")
    return value


class Sampler:
    """Per-request sampling decision for a fixed rate.

    The default random source is ``SystemRandom``, which reads from the OS
    entropy pool on every draw and keeps no generator state, so concurrent
    requests can draw without a lock.
    """

    def __init__(self, rate: float, random_source: Callable[[], float] | None = None) -> None:
        self.rate = validate_sample_rate(rate)
        self._random = random_source or random.SystemRandom().random

    def should_sample(self) -> bool:
        if self.rate >= 1.0:
            return True
        if self.rate <= 0.0:
            return False
        return self._random() < self.rate
