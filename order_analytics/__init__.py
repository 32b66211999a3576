"""
Order Analytics Service

Windowed order and transaction reporting for funnel accounts.
"""

__version__ = "1.0.0"
