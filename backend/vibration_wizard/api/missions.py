"""
Mission profile endpoints.

Provides endpoints for:
- Browsing built-in industry mission templates
- Rescaling a profile to its intended field life
- Saving, listing, updating and deleting user mission profiles
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from vibration_wizard.core.templates import (
    get_default_mission_template,
    get_mission_template,
    list_mission_templates,
)
from vibration_wizard.core.types import Industry
from vibration_wizard.db.crud import saved_profiles
from vibration_wizard.db.database import get_db
from vibration_wizard.schemas.mission import (
    MissionProfileResponse,
    MissionTemplateResponse,
    MissionTemplateSummary,
    RescaleRequest,
    SavedProfileCreate,
    SavedProfileResponse,
    SavedProfileUpdate,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/missions", tags=["missions"])


@router.get("/templates", response_model=List[MissionTemplateSummary])
async def get_templates(industry: Optional[Industry] = None):
    """List mission templates, optionally for one industry."""
    return [MissionTemplateSummary.from_domain(t) for t in list_mission_templates(industry)]


@router.get("/templates/default/{industry}", response_model=MissionTemplateResponse)
async def get_default_template(industry: Industry):
    """Starting template for an industry."""
    return MissionTemplateResponse.from_domain(get_default_mission_template(industry))


@router.get("/templates/{template_id}", response_model=MissionTemplateResponse)
async def get_template(template_id: str):
    """Get a mission template with its full profile."""
    template = get_mission_template(template_id)
    if template is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Mission template {template_id} not found"
        )
    return MissionTemplateResponse.from_domain(template)


@router.post("/rescale", response_model=MissionProfileResponse)
async def rescale_profile(request: RescaleRequest):
    """Scale state durations so they sum to the intended life.

    The profile is returned unchanged when either total is zero.
    """
    profile = request.profile.to_domain()
    return MissionProfileResponse.from_domain(profile.rescaled_to_intended_life())


@router.get("/saved", response_model=List[SavedProfileResponse])
async def get_saved_profiles(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db)
):
    """List saved mission profiles."""
    try:
        return saved_profiles.get_multi(db, skip=skip, limit=limit)
    except Exception as e:
        logger.error(f"Error fetching saved profiles: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to fetch saved profiles: {str(e)}"
        )


@router.get("/saved/{profile_id}", response_model=SavedProfileResponse)
async def get_saved_profile(profile_id: int, db: Session = Depends(get_db)):
    profile = saved_profiles.get(db, profile_id)
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Saved profile {profile_id} not found"
        )
    return profile


@router.post("/saved", response_model=SavedProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_saved_profile(
    request: SavedProfileCreate,
    db: Session = Depends(get_db)
):
    """Save a mission profile."""
    try:
        profile = saved_profiles.create(db, request)
        logger.info(f"Saved mission profile {profile.id} '{profile.name}'")
        return profile
    except Exception as e:
        logger.error(f"Error saving profile: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to save profile: {str(e)}"
        )


@router.put("/saved/{profile_id}", response_model=SavedProfileResponse)
async def update_saved_profile(
    profile_id: int,
    request: SavedProfileUpdate,
    db: Session = Depends(get_db)
):
    """Update fields of a saved mission profile."""
    profile = saved_profiles.get(db, profile_id)
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Saved profile {profile_id} not found"
        )

    try:
        return saved_profiles.update(db, profile, request)
    except Exception as e:
        logger.error(f"Error updating profile {profile_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update profile: {str(e)}"
        )


@router.delete("/saved/{profile_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_saved_profile(profile_id: int, db: Session = Depends(get_db)):
    profile = saved_profiles.get(db, profile_id)
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Saved profile {profile_id} not found"
        )

    saved_profiles.delete(db, profile_id)
    return None
