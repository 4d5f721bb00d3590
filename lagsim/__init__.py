"""Client-side prediction, reconciliation and interpolation over a simulated laggy network."""

__version__ = "0.1.0"
__all__ = ["netcode", "client", "server", "app"]