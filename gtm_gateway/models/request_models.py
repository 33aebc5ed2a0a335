"""Request models for the GTM consultation API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


REQUIRED_FIELDS: tuple[str, ...] = (
    "client_name",
    "company_name",
    "gtm_challenge",
    "business_stage",
)

OPTIONAL_TEXT_FIELDS: tuple[str, ...] = (
    "client_designation",
    "company_description",
    "industry",
    "current_team_size",
    "budget_range",
    "specific_focus",
)


class ConsultationRequest(BaseModel):
    """A validated consultation submission, shaped like the actor's input schema."""

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True, extra="ignore")

    client_name: str = Field(..., min_length=1, examples=["Jane Doe"])
    client_designation: str = Field(default="", examples=["Head of Growth"])
    company_name: str = Field(..., min_length=1, examples=["Acme"])
    company_description: str = ""
    gtm_challenge: str = Field(..., min_length=1, examples=["Expanding into EU mid-market"])
    business_stage: str = Field(..., min_length=1, examples=["seed"])
    industry: str = ""
    current_team_size: str = ""
    budget_range: str = ""
    specific_focus: str = ""
    confirm_new_consultation: bool = False

    def to_actor_input(self) -> dict[str, Any]:
        """Return the actor input payload; every key is always present."""
        return self.model_dump()
