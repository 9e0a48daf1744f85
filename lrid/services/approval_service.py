"""
LRID — Human approval gate.

An expert reviews each draft and records a decision (APPROVE / ADJUST /
DEBRIEF), optional narrative overrides and optional per-dimension score
overrides.  ``finalize`` merges the approval onto the draft into the payload
the report renderer consumes.

Score overrides replace the engine value for that dimension only.  Nothing is
recomputed: aggregate indices and confidence are carried from the draft as-is.
"""

from __future__ import annotations

from datetime import datetime, timezone

import structlog

from lrid.config import get_settings
from lrid.schemas.instrument import Instrument
from lrid.schemas.report import (
    Adjustments,
    Approval,
    ApprovalMeta,
    DecisionStatus,
    Draft,
    ReportPayload,
    SubjectMeta,
)
from lrid.services.banding import BandClassifier

logger = structlog.get_logger("lrid.approval_service")


class ApprovalService:

    def __init__(self, instrument: Instrument) -> None:
        self.instrument = instrument
        self.band_classifier = BandClassifier()

    def create_template(self, draft: Draft, expert_name: str | None = None) -> Approval:
        """Blank approval for a draft: APPROVE, no overrides."""
        return Approval(
            meta=ApprovalMeta(
                case_id=draft.meta.case_id,
                created_at=datetime.now(timezone.utc),
                expert_name=expert_name or get_settings().DEFAULT_EXPERT_NAME,
            ),
            adjustments=Adjustments(
                dimension_scores_override={code: None for code in self.instrument.dimension_codes}
            ),
        )

    def finalize(self, draft: Draft, approval: Approval) -> ReportPayload | None:
        """Merge the approval onto the draft.

        Returns
        -------
        ReportPayload | None
            None when the decision is DEBRIEF (no report is produced).

        Raises
        ------
        ValueError
            If the approval belongs to another case or overrides a dimension
            the instrument does not define.
        """
        log = logger.bind(case_id=draft.meta.case_id)
        if approval.meta.case_id != draft.meta.case_id:
            raise ValueError(
                f"Approval for case {approval.meta.case_id!r} cannot finalize draft "
                f"{draft.meta.case_id!r}"
            )

        status = approval.decision.status
        if status is DecisionStatus.DEBRIEF:
            log.info("finalize_debrief")
            return None

        overrides = approval.adjustments.dimension_scores_override
        unknown = sorted(set(overrides) - set(self.instrument.dimension_codes))
        if unknown:
            raise ValueError(f"Score override for unknown dimension(s): {', '.join(unknown)}")

        effective = dict(draft.scoring.dimension_scores)
        overridden: list[str] = []
        for code, value in overrides.items():
            if value is not None:
                effective[code] = round(value, 2)
                overridden.append(code)
        if overridden:
            log.info("dimension_scores_overridden", dimensions=overridden)

        bands = self.instrument.bands
        payload = ReportPayload(
            case_id=draft.meta.case_id,
            generated_at=datetime.now(timezone.utc),
            decision_status=status,
            meta=SubjectMeta(
                subject_name=draft.meta.respondent_name or "Unknown",
                subject_email=draft.meta.respondent_email,
                organization=draft.meta.respondent_org,
                expert_name=approval.meta.expert_name,
            ),
            dimension_scores=effective,
            dimension_bands=self.band_classifier.band_all(effective, bands),
            overridden_dimensions=overridden,
            aggregate_indices=dict(draft.scoring.aggregate_indices),
            index_bands=dict(draft.bands.indices),
            confidence=draft.consistency.confidence,
            hits=list(draft.consistency.hits),
            overrides=approval.overrides,
            operator_notes=approval.decision.operator_notes,
        )
        log.info("finalize_complete", decision=status.value, overridden=len(overridden))
        return payload
