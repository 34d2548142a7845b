"""Shared helpers for Matchy Pairing."""

from matchypairing.utils.logging import setup_logger

__all__ = ["setup_logger"]
