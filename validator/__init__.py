"""
validator — statyczny walidator zestawów reguł DomFacts.

Interfejs publiczny:
    RulesetValidator — główny walidator (etapy A–D)
    ValidationReport, ValidationError, ErrorCode — typy raportu

Typowe użycie:
    from validator import RulesetValidator

    report = RulesetValidator().validate(rules)
    if not report.is_valid:
        for e in report.errors:
            print(e.code, e.path, e.message)
"""

from .types import ErrorCode, ValidationError, ValidationReport
from .ruleset_validator import RulesetValidator

__all__ = [
    "ErrorCode",
    "ValidationError",
    "ValidationReport",
    "RulesetValidator",
]
