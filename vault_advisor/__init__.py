"""DeFindex vault risk clustering, recommendation and projection engine for Stellar."""

__version__ = "0.1.0"
