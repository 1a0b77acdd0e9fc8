"""
Desk domain packages
"""
