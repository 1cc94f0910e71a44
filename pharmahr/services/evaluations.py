"""
Annual evaluations.

One evaluation per employee and year.  The check runs against the loaded
evaluations before anything is sent, so a duplicate never reaches the
gateway.
"""

from __future__ import annotations

import logging

from pharmahr.core.exceptions import DuplicateEvaluation
from pharmahr.schemas.employee import EmployeeSchema
from pharmahr.schemas.records import EvaluationSchema, evaluation_id
from pharmahr.services.gateway_client import GatewayClient

logger = logging.getLogger(__name__)


def average_score(*scores: float) -> float:
    """Mean of the scores, one decimal."""
    if not scores:
        return 0.0
    return round(sum(scores) / len(scores), 1)


class EvaluationBook:
    def __init__(self, gateway: GatewayClient) -> None:
        self._gateway = gateway
        self.evaluations: list[EvaluationSchema] = []

    async def load(self) -> list[EvaluationSchema]:
        rows = await self._gateway.call("getEvaluations")
        self.evaluations = [EvaluationSchema.model_validate(r) for r in rows or []]
        return self.evaluations

    def for_year(self, year: int) -> list[EvaluationSchema]:
        return [e for e in self.evaluations if e.year == year]

    def exists(self, employee_id: str, year: int) -> bool:
        return any(e.employee_id == employee_id and e.year == year for e in self.evaluations)

    async def submit(
        self,
        employee: EmployeeSchema,
        year: int,
        *,
        professional: float,
        attitude: float,
        discipline: float,
        rank: str | None = None,
        reward_proposal: str | None = None,
        reward_title: str | None = None,
        notes: str | None = None,
    ) -> EvaluationSchema:
        if self.exists(employee.id, year):
            raise DuplicateEvaluation(
                f"{employee.full_name} ({employee.id}) already has an evaluation for {year}"
            )

        evaluation = EvaluationSchema(
            id=evaluation_id(year, employee.id),
            year=year,
            employee_id=employee.id,
            full_name=employee.full_name,
            position=employee.position,
            score_professional=professional,
            score_attitude=attitude,
            score_discipline=discipline,
            average_score=average_score(professional, attitude, discipline),
            rank=rank,
            reward_proposal=reward_proposal,
            reward_title=reward_title,
            notes=notes,
        )
        await self._gateway.call("addEvaluation", **evaluation.to_wire())
        self.evaluations.append(evaluation)
        logger.info("Evaluation %s saved (avg %.1f)", evaluation.id, evaluation.average_score)
        return evaluation
