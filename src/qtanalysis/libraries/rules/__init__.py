"""
Rules Library.

Boolean trading rules evaluated at a bar index:
- Base: Rule
- Indicator rules: OverIndicatorRule
- Trading record rules: WaitForRule
"""

from qtanalysis.libraries.rules.base import Rule
from qtanalysis.libraries.rules.buildin.indicator_rules import OverIndicatorRule
from qtanalysis.libraries.rules.buildin.record_rules import WaitForRule

__all__ = [
    "Rule",
    "OverIndicatorRule",
    "WaitForRule",
]
