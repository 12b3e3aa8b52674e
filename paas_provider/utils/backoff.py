"""Backoff utilities for polling remote operations."""

import random
from dataclasses import dataclass


@dataclass
class BackoffConfig:
    """Configuration for the interval between status probes."""
    base_delay: float = 0.1  # Base delay in seconds
    max_delay: float = 10.0  # Maximum delay in seconds
    exponential_base: float = 2.0  # Exponential backoff multiplier
    jitter: bool = False  # Add random jitter to delays
    backoff_strategy: str = "exponential"  # exponential, linear, fixed
    min_delay: float = 0.0  # Lower bound applied after the strategy


class Backoff:
    """Calculates delays between consecutive probes."""

    def __init__(self, config: BackoffConfig):
        """Initialize backoff calculator.

        Args:
            config: Backoff configuration
        """
        self.config = config

    def calculate_delay(self, attempt: int) -> float:
        """Calculate delay after the given attempt number (1-based)."""
        if self.config.backoff_strategy == "exponential":
            delay = self.config.base_delay * (self.config.exponential_base ** (attempt - 1))
        elif self.config.backoff_strategy == "linear":
            delay = self.config.base_delay * attempt
        else:  # fixed
            delay = self.config.base_delay

        # Apply maximum delay limit
        delay = min(delay, self.config.max_delay)

        if self.config.jitter:
            jitter_range = delay * 0.1  # 10% jitter
            delay += random.uniform(-jitter_range, jitter_range)

        return max(self.config.min_delay, delay, 0)

    @classmethod
    def fixed(cls, interval: float) -> 'Backoff':
        """Backoff that always waits the same interval."""
        return cls(BackoffConfig(base_delay=interval, max_delay=interval, backoff_strategy="fixed"))
