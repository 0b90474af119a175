"""Arma 3 installation, mod, config and Steam library helpers for Unix systems."""

__version__ = "0.1.0"