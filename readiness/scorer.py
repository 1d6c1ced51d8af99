# ============================================================================
# READINESS SCORER
# ============================================================================
# EPOCH: 1 - HEALTH & READINESS
# STATUS: Readiness - Weighted category scoring
# PURPOSE: Run every category validator and fold into a composite score
# CREATED: 19 OCT 2026
# ============================================================================
"""
Readiness Scorer

Per category:  pass -> 100, warning -> 70, fail -> 0

Composite:

    composite = floor(sum(weight * score) / sum(weight) + 0.5)

Every declared category contributes. A validator that raises is scored
as fail with the error as its message, never dropped.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from core.config import DEFAULT_CATEGORY_WEIGHTS
from core.contracts import CheckStatus
from core.logging import log_context
from readiness.validators import (
    DEFAULT_VALIDATORS,
    CategoryCheck,
    ReadinessContext,
    Validator,
)

logger = logging.getLogger(__name__)

CATEGORY_SCORES: Dict[CheckStatus, int] = {
    CheckStatus.PASS: 100,
    CheckStatus.WARNING: 70,
    CheckStatus.FAIL: 0,
}


@dataclass(frozen=True)
class CategoryScore:
    """Scored outcome of one readiness category."""
    category: str
    status: CheckStatus
    score: int
    weight: int
    message: str = ""
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "score": self.score,
            "weight": self.weight,
            "message": self.message,
            "details": self.details,
        }


class ReadinessScorer:
    """
    Evaluates readiness categories in declaration order.

    Args:
        validators: (category, validator) pairs; order is the report order
        weights: Category weights; categories absent from it weigh 0
    """

    def __init__(
        self,
        validators: Sequence[Tuple[str, Validator]] = DEFAULT_VALIDATORS,
        weights: Optional[Mapping[str, int]] = None,
    ):
        names = [name for name, _ in validators]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate readiness category in {names}")

        self.validators = tuple(validators)
        self.weights = dict(DEFAULT_CATEGORY_WEIGHTS if weights is None else weights)

    @property
    def categories(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.validators)

    def evaluate(self, context: ReadinessContext) -> Tuple[CategoryScore, ...]:
        """Run every validator; one CategoryScore per declared category."""
        return tuple(self._score(name, validator, context) for name, validator in self.validators)

    def _score(self, name: str, validator: Validator, context: ReadinessContext) -> CategoryScore:
        with log_context(category=name):
            try:
                check = validator(context)
                if not isinstance(check, CategoryCheck):
                    raise TypeError(f"validator returned {type(check).__name__}")
            except Exception as e:
                logger.error(f"Readiness category {name} could not be evaluated: {e}")
                check = CategoryCheck.failed(
                    f"Validation error: {e}",
                    exception_type=type(e).__name__,
                )

            logger.debug(f"Readiness category {name}: {check.status.value}")

        return CategoryScore(
            category=name,
            status=check.status,
            score=CATEGORY_SCORES[check.status],
            weight=self.weights.get(name, 0),
            message=check.message,
            details=check.details,
        )

    @staticmethod
    def composite(scores: Sequence[CategoryScore]) -> int:
        """Weighted average rounded half-up; 0 when total weight is 0."""
        total_weight = sum(s.weight for s in scores)
        if total_weight <= 0:
            return 0
        weighted = sum(s.weight * s.score for s in scores)
        return int(math.floor(weighted / total_weight + 0.5))


__all__ = [
    "CATEGORY_SCORES",
    "CategoryScore",
    "ReadinessScorer",
]
