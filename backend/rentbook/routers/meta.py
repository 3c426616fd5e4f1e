# backend/rentbook/routers/meta.py
from __future__ import annotations

from fastapi import APIRouter

from ..models import PROPERTY_ROLES, UNIT_ROLES, UNIT_TYPES
from ..schemas import VocabulariesOut

router = APIRouter(prefix="/meta", tags=["meta"])


@router.get("/vocabularies", response_model=VocabulariesOut)
def vocabularies():
    """Unit types and the role names offered for property/unit assignments."""
    return {
        "unit_types": list(UNIT_TYPES),
        "property_roles": list(PROPERTY_ROLES),
        "unit_roles": list(UNIT_ROLES),
    }
