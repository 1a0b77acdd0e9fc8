"""
Shared desk services
"""

from .instrument_master import InstrumentMaster

__all__ = ['InstrumentMaster']
