from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


# ─────────────────────────────────────────────
# Classifications
# ─────────────────────────────────────────────

class Nature(str, Enum):
    BENEFIC = "benefic"
    MALEFIC = "malefic"
    NEUTRAL = "neutral"
    MIXED = "mixed"


class YogaStrength(str, Enum):
    STRONG = "strong"
    MODERATE = "moderate"
    WEAK = "weak"


class Severity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    CANCELLED = "cancelled"


# ─────────────────────────────────────────────
# Detections
# ─────────────────────────────────────────────

class Cancellation(BaseModel):
    """
    A classical condition that weakens or removes a detection.
    """
    model_config = ConfigDict(frozen=True)

    rule: str
    description: str


class Detection(BaseModel):
    """
    Common shape of a yoga or dosha produced by rule evaluation.
    """
    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    sanskrit_name: str
    category: str
    nature: Nature
    forming_planets: List[str] = Field(default_factory=list)
    description: str
    cancelled: bool = False
    cancellations: List[Cancellation] = Field(default_factory=list)

    @property
    def cancellation_reason(self) -> Optional[str]:
        if not self.cancellations:
            return None
        return "; ".join(c.description for c in self.cancellations)


class Yoga(Detection):
    """
    Represents a yoga formed in the chart.
    """
    nature: Nature = Nature.BENEFIC
    strength: YogaStrength = YogaStrength.MODERATE


class Dosha(Detection):
    """
    Represents a dosha present in the chart.
    """
    nature: Nature = Nature.MALEFIC
    severity: Severity = Severity.MEDIUM
    details: Dict[str, Any] = Field(default_factory=dict)


# ─────────────────────────────────────────────
# Rule Catalog
# ─────────────────────────────────────────────

RuleKind = Literal["yoga", "dosha"]


@dataclass(frozen=True)
class RuleDescriptor:
    """
    One catalog entry: a pure predicate over the chart plus metadata.

    The predicate returns a detection, or None when the rule does not
    apply.
    """
    key: str
    kind: RuleKind
    name: str
    category: str
    predicate: Callable[[Any], Optional[Detection]]


class RuleEvaluation(BaseModel):
    """
    Result of running a rule catalog against one chart.
    """
    yogas: List[Yoga] = Field(default_factory=list)
    doshas: List[Dosha] = Field(default_factory=list)
    failed_rules: List[str] = Field(default_factory=list)
