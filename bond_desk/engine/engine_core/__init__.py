"""
Engine core - service graph wiring and run loop
"""

from .orchestrator import TradingSystem

__all__ = ['TradingSystem']
