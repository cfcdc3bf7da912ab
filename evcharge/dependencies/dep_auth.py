from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt, JWTError
from sqlalchemy.orm import Session
from evcharge.configuration.config import Config
from evcharge.configuration.database import get_db
from evcharge.configuration.monitor import log_event
from evcharge.models.mod_auth import Caller, TokenData
from evcharge.services.svc_auth import ProfileService
from evcharge.services.svc_errors import AuthenticationRequired
import httpx
from functools import lru_cache
from typing import Optional

# Tokens are issued by the external auth provider; a missing header is not an error here
bearer_scheme = HTTPBearer(auto_error=False)

@lru_cache(maxsize=1)
def get_jwks() -> dict:
    """
    Fetch and cache the JSON Web Key Set published by the auth provider.
    Only used for asymmetrically signed tokens.
    """
    response = httpx.get(Config.JWT_JWKS_URL, timeout=Config.DATABASE_TIMEOUT_SECONDS)
    response.raise_for_status()
    return response.json()

def get_key(kid: str) -> dict:
    """Get the public key matching the key ID from the JWKS"""
    for key in get_jwks().get("keys", []):
        if key.get("kid") == kid:
            return key
    raise AuthenticationRequired("Unable to verify credentials")

def _extract_name(payload: dict) -> Optional[str]:
    metadata = payload.get("user_metadata") or {}
    return metadata.get("full_name") or metadata.get("name") or payload.get("name")

def verify_token(token: str) -> TokenData:
    """
    Verify the JWT and extract the claims the services need.
    Raises AuthenticationRequired if the token is invalid or expired.
    """
    try:
        header = jwt.get_unverified_header(token)
        algorithm = str(header.get("alg") or "").upper()
        if algorithm not in Config.allowed_algorithms():
            log_event("Token verification failed", {"reason": f"algorithm '{algorithm}' not allowed"})
            raise AuthenticationRequired("Could not validate credentials")
        if algorithm.startswith("HS"):
            if not Config.JWT_SECRET_KEY:
                raise AuthenticationRequired("Could not validate credentials")
            key = Config.JWT_SECRET_KEY
        else:
            if not Config.JWT_JWKS_URL:
                raise AuthenticationRequired("Could not validate credentials")
            key = get_key(header.get("kid"))
        algorithms = [algorithm]

        # jose checks the exp claim while decoding
        payload = jwt.decode(
            token,
            key,
            algorithms=algorithms,
            audience=Config.JWT_AUDIENCE
        )
        if not payload.get("sub"):
            raise AuthenticationRequired("Could not validate credentials")

        return TokenData(
            id=payload["sub"],
            email=payload.get("email") or None,
            name=_extract_name(payload),
            exp=payload.get("exp")
        )
    except (JWTError, httpx.HTTPError) as e:
        log_event("Token verification failed", {"reason": str(e)})
        raise AuthenticationRequired("Could not validate credentials")

def get_optional_caller(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> Optional[Caller]:
    """
    Resolve the caller for this request, or None when no token was sent.
    Services decide whether an anonymous call is allowed.
    """
    if credentials is None:
        return None
    token_data = verify_token(credentials.credentials)
    profile = ProfileService.get_or_create_profile(db, token_data)
    return ProfileService.to_caller(profile, token_data)

def get_current_caller(caller: Optional[Caller] = Depends(get_optional_caller)) -> Caller:
    """Dependency for endpoints that always require a signed-in caller"""
    if caller is None:
        raise AuthenticationRequired()
    return caller
