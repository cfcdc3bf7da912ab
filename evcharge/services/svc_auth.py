from typing import Optional
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from evcharge.configuration.monitor import log_event, log_exception, start_span
from evcharge.models.mod_auth import Caller, TokenData, UserProfile, UserRole
from evcharge.models.mod_tables import UserProfileRecord
from evcharge.services.svc_errors import AuthenticationRequired, StoreUnavailable

class ProfileService:
    @staticmethod
    def _display_name(token_data: TokenData) -> str:
        if token_data.name:
            return token_data.name
        if token_data.email:
            return token_data.email.split("@")[0]
        return "Unknown User"

    @staticmethod
    def get_or_create_profile(db: Session, token_data: TokenData) -> UserProfile:
        """Load the caller's profile, creating it with the default role on first sign-in"""
        try:
            with start_span("get_or_create_profile", attributes={"user_id": token_data.id}):
                record = db.get(UserProfileRecord, token_data.id)
                if record is None:
                    record = UserProfileRecord(
                        id=token_data.id,
                        name=ProfileService._display_name(token_data),
                        email=token_data.email,
                        role=UserRole.USER.value
                    )
                    db.add(record)
                    try:
                        db.commit()
                        log_event("Profile created", {"user_id": token_data.id})
                    except IntegrityError:
                        # A concurrent first request created it
                        db.rollback()
                        record = db.get(UserProfileRecord, token_data.id)
                        if record is None:
                            raise
                        log_event("Profile created by a concurrent request", {"user_id": token_data.id})
                return UserProfile.model_validate(record)
        except SQLAlchemyError as e:
            db.rollback()
            log_exception(e, {"operation": "get_or_create_profile", "user_id": token_data.id})
            raise StoreUnavailable("Failed to load user data. Please try again.") from e

    @staticmethod
    def to_caller(profile: UserProfile, token_data: TokenData) -> Caller:
        return Caller(
            id=profile.id,
            name=profile.name or ProfileService._display_name(token_data),
            email=token_data.email,
            role=profile.role
        )

    @staticmethod
    def update_role(db: Session, caller: Optional[Caller], role: UserRole) -> UserProfile:
        if caller is None:
            raise AuthenticationRequired("You must be logged in to change your role")
        try:
            with start_span("update_role", attributes={"user_id": caller.id}):
                record = db.get(UserProfileRecord, caller.id)
                if record is None:
                    record = UserProfileRecord(id=caller.id, name=caller.name, email=caller.email)
                    db.add(record)
                record.role = role.value
                db.commit()

                log_event("User role updated", {"user_id": caller.id, "role": role.value})
                return UserProfile.model_validate(record)
        except SQLAlchemyError as e:
            db.rollback()
            log_exception(e, {"operation": "update_role", "user_id": caller.id})
            raise StoreUnavailable("Failed to update your role. Please try again.") from e
