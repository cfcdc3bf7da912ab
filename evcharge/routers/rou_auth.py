from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from evcharge.configuration.database import get_db
from evcharge.dependencies.dep_auth import get_current_caller
from evcharge.models.mod_auth import Caller
from evcharge.schemas.sch_auth import ErrorDetail, ProfileResponse, RoleUpdateRequest
from evcharge.services.svc_auth import ProfileService

router = APIRouter(prefix="/auth", tags=["Authentication"],
                   responses={401: {"model": ErrorDetail}})

@router.get("/me", response_model=ProfileResponse)
def get_profile(current_caller: Caller = Depends(get_current_caller)):
    """
    Get the profile of the signed-in caller.

    The profile is created with the 'user' role on the first authenticated request.
    """
    return ProfileResponse(
        id=current_caller.id,
        name=current_caller.name,
        email=current_caller.email,
        role=current_caller.role
    )

@router.put("/me/role", response_model=ProfileResponse, responses={503: {"model": ErrorDetail}})
def update_role(
    request: RoleUpdateRequest,
    db: Session = Depends(get_db),
    current_caller: Caller = Depends(get_current_caller)
):
    """
    Switch the caller between the 'user' and 'owner' roles.
    """
    return ProfileService.update_role(db, current_caller, request.role)
