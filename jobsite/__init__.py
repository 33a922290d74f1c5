"""
Jobsite - Project staffing and billing.
"""

__version__ = "1.0.0"
