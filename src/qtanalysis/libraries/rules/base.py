"""
Base Rule Abstract Class.

A rule answers one yes/no question at a bar index, optionally looking at
the trading record (e.g. "has the price closed above the SMA?", "have five
bars passed since the last buy?").

Philosophy:
- Rules read indicators and the trading record, never mutate them
- Rules do NOT place trades; callers decide what to do with the answer
- Every evaluation is traced at debug level

Log Name: Derived from class name (e.g., OverIndicatorRule → "over_indicator")
"""

import re
from abc import ABC, abstractmethod

import structlog

from qtanalysis.services.trading.models import TradingRecord

logger = structlog.get_logger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


class Rule(ABC):
    """
    Abstract base class for all trading rules.

    Example Implementation:
        ```python
        class IsPositiveRule(Rule):
            def __init__(self, indicator: Indicator[Num]):
                self.indicator = indicator

            def is_satisfied(self, index: int, trading_record: TradingRecord | None = None) -> bool:
                satisfied = self.indicator.get_value(index).is_positive()
                self._trace(index, satisfied)
                return satisfied
        ```
    """

    @abstractmethod
    def is_satisfied(self, index: int, trading_record: TradingRecord | None = None) -> bool:
        """
        Evaluate the rule at a bar index.

        Args:
            index: Bar index
            trading_record: Trades made so far (only used by record-aware rules)

        Returns:
            True if the rule is satisfied
        """
        pass

    @property
    def name(self) -> str:
        """snake_case class name without the "Rule" suffix."""
        name = self.__class__.__name__
        if name.endswith("Rule"):
            name = name[:-4]
        return _CAMEL_BOUNDARY.sub("_", name).lower()

    def _trace(self, index: int, satisfied: bool) -> None:
        logger.debug("rule.evaluated", rule=self.name, index=index, satisfied=satisfied)

    def __repr__(self) -> str:
        return self.__class__.__name__
