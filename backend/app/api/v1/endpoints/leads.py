"""
Lead Endpoints
Read-only catalog access and `#` lookup
"""
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.v1.dependencies import AppServices, get_services
from app.domain.models.chat_api import (
    ApplySuggestionRequest,
    ApplySuggestionResponse,
    LeadSuggestionResponse,
)

router = APIRouter(prefix="/leads", tags=["Leads"])


@router.get("/", response_model=List[Dict[str, Any]])
async def list_leads(services: AppServices = Depends(get_services)):
    """All leads in catalog order"""
    return [lead.to_catalog_dict() for lead in services.catalog.all()]


@router.get("/suggest", response_model=LeadSuggestionResponse)
async def suggest_leads(
    q: str = Query("", description="Input text containing a # lookup"),
    services: AppServices = Depends(get_services),
):
    """
    Autocomplete for the text after the last `#`.

    RM-actionable leads come first; at most six results.
    """
    leads = services.resolver.suggest(q)
    return LeadSuggestionResponse(query=q, leads=[lead.to_catalog_dict() for lead in leads])


@router.post("/suggest/apply", response_model=ApplySuggestionResponse)
async def apply_suggestion(request: ApplySuggestionRequest, services: AppServices = Depends(get_services)):
    """Replace the in-progress `#token` with the chosen lead id"""
    return ApplySuggestionResponse(text=services.resolver.apply_suggestion(request.text, request.lead_id))


@router.get("/{lead_id}", response_model=Dict[str, Any])
async def get_lead(lead_id: str, services: AppServices = Depends(get_services)):
    lead = services.catalog.get(lead_id)
    if lead is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Lead not found: {lead_id}")
    return lead.to_catalog_dict()
