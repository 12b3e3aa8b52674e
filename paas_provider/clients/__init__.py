"""Remote control-plane clients."""

from .base import PaaSClient

__all__ = [
    'PaaSClient'
]
