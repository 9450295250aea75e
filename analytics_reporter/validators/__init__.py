"""
analytics_reporter/validators package marker.
"""

from analytics_reporter.validators.data_contract import DataContractViolation, parse_int

__all__ = [
    "DataContractViolation",
    "parse_int",
]
