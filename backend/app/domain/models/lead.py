"""
Lead Domain Models
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict, List, Any


RM_OWNER = "RM"


class VerificationDetail(BaseModel):
    """Status of one sub-stage of a parallel verification lead"""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    status: str
    owner: str
    days_in_stage: int = Field(0, alias="daysInStage", ge=0)
    issue: Optional[str] = None
    completed_date: Optional[str] = Field(None, alias="completedDate")
    action_required: bool = Field(False, alias="actionRequired")


class LeadRecord(BaseModel):
    """
    Loan lead as held in the catalog.

    Stage-specific fields (pending docs, query details, rejection info...)
    vary by stage and are kept as extra fields so the catalog round-trips
    without loss.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    id: str
    name: str
    stage: str
    amount: str
    status: str
    days_in_stage: int = Field(0, alias="daysInStage", ge=0)
    phone: Optional[str] = None
    product_type: Optional[str] = Field(None, alias="productType")
    progress: Optional[int] = Field(None, ge=0, le=100)
    action_required: bool = Field(False, alias="actionRequired")
    action_owner: str = Field("", alias="actionOwner")
    notes: Optional[str] = None
    substages: Optional[List[str]] = None
    verification_details: Optional[Dict[str, VerificationDetail]] = Field(
        None, alias="verificationDetails"
    )

    @property
    def needs_rm_action(self) -> bool:
        """True when the next move is the RM's"""
        return self.action_required and self.action_owner == RM_OWNER

    def to_catalog_dict(self) -> Dict[str, Any]:
        """Canonical serialized form (wire names, no empty fields)"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
