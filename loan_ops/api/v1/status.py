"""GET /v1/status/classify - Inspect how a raw status is categorised"""

from typing import Optional
from fastapi import APIRouter, Query

from loan_ops.api.v1.schemas import ClassificationResponse
from loan_ops.domain.status import matching_rule

router = APIRouter()


@router.get("/status/classify", response_model=ClassificationResponse)
def classify_status(raw_status: Optional[str] = Query(None, description="Status as stored on the application")):
    """Return the canonical category and the rule that produced it"""
    rule = matching_rule(raw_status)
    return ClassificationResponse(raw_status=raw_status, category=rule.category, rule=rule.name)
