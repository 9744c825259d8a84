import logging
from typing import List, Optional, Sequence

from kundli_core.domain.kundali.schemas import NatalChart
from kundli_core.domain.rules.chart_context import ChartContext
from kundli_core.domain.rules.dosha_rules import DOSHA_RULES
from kundli_core.domain.rules.schemas import (
    Dosha,
    RuleDescriptor,
    RuleEvaluation,
    Yoga,
)
from kundli_core.domain.rules.yoga_rules import YOGA_RULES

logger = logging.getLogger(__name__)


DEFAULT_RULES: List[RuleDescriptor] = YOGA_RULES + DOSHA_RULES


class RuleEngine:
    """
    Evaluates the yoga and dosha catalog against a natal chart.

    This engine:
    - Runs every rule as a pure predicate over the chart
    - Is deterministic
    - Isolates failures so one broken rule never hides the others
    """

    def __init__(self, rules: Optional[Sequence[RuleDescriptor]] = None):
        self.rules = list(rules) if rules is not None else list(DEFAULT_RULES)

    def evaluate(self, chart: NatalChart) -> RuleEvaluation:
        """
        Evaluate all rules against a natal chart.
        """
        context = ChartContext(chart)
        result = RuleEvaluation()

        for rule in self.rules:
            try:
                detection = rule.predicate(context)
            except Exception:
                logger.exception("Rule %s failed; skipping", rule.key)
                result.failed_rules.append(rule.key)
                continue

            if detection is None:
                continue

            if isinstance(detection, Yoga):
                result.yogas.append(detection)
            elif isinstance(detection, Dosha):
                result.doshas.append(detection)

        logger.debug(
            "Rules evaluated: %d yogas, %d doshas, %d failed",
            len(result.yogas),
            len(result.doshas),
            len(result.failed_rules),
        )
        return result

    def yogas(self, chart: NatalChart) -> List[Yoga]:
        return self.evaluate(chart).yogas

    def doshas(self, chart: NatalChart) -> List[Dosha]:
        return self.evaluate(chart).doshas
