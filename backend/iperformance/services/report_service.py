"""Risk & Challenge Services — reported items; the reporter is always the current user."""

from pydantic import BaseModel

from iperformance.core.domain_types import EntityKind
from iperformance.services.listing import CHALLENGES, RISKS
from iperformance.services.record_service import RecordService


class _ReportService(RecordService):
    def build(self, body: BaseModel):
        row = super().build(body)
        row.reported_by = self.tenant.user_id
        row.created_by = self.tenant.user_id
        return row


class RiskService(_ReportService):
    kind = EntityKind.RISK
    label = "Risk"
    listing = RISKS


class ChallengeService(_ReportService):
    kind = EntityKind.CHALLENGE
    label = "Challenge"
    listing = CHALLENGES
