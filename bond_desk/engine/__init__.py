"""
Desk engine: DTO contracts, configuration and pipeline orchestration
"""
