"""
bond_desk - fixed-income desk service graph
"""

__version__ = "0.1.0"
