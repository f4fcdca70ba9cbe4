"""
Auth service.

Handles signup, login and profile management. Passwords are stored as
werkzeug salted hashes; access tokens come from the injected TokenProvider.
No Flask request/response objects are used here.
"""

from typing import Any, Dict, Tuple

from werkzeug.security import check_password_hash, generate_password_hash

from audit import log_event
from enums import ErrorCode
from infra.token_provider import TokenProvider
from repositories import users_repo
from schemas import LoginPayload, SignupPayload, UserUpdatePayload
from security import BusinessError, validate_payload

# Checked for unknown emails so both failure paths do the same hashing work.
_DUMMY_PASSWORD_HASH = generate_password_hash("momentum-placeholder-password")


def signup(payload: Dict[str, Any]) -> Tuple[Dict[str, Any], int]:
    data = validate_payload(SignupPayload, payload)

    if users_repo.email_exists(data.email):
        log_event(
            "auth.signup_failed",
            "Email already registered",
            level="warning",
            context={"email": data.email},
        )
        raise BusinessError(ErrorCode.DUPLICATE_EMAIL)

    try:
        user = users_repo.create_user(
            data.email, generate_password_hash(data.password), data.name
        )
    except users_repo.ConflictError:
        raise BusinessError(ErrorCode.DUPLICATE_EMAIL)

    log_event("auth.signup", "User registered", user_id=user.id, context={"email": user.email})
    return user.to_dict(), 201


def login(payload: Dict[str, Any], *, token_provider: TokenProvider) -> Tuple[Dict[str, Any], int]:
    data = validate_payload(LoginPayload, payload)

    user = users_repo.get_user_by_email(data.email)
    if user is None:
        check_password_hash(_DUMMY_PASSWORD_HASH, data.password)
        password_ok = False
    else:
        password_ok = check_password_hash(user.password_hash, data.password)

    if not password_ok:
        log_event(
            "auth.login_failed",
            "Invalid email or password",
            user_id=user.id if user is not None else None,
            level="warning",
            context={"email": data.email},
        )
        raise BusinessError(ErrorCode.INVALID_CREDENTIALS)

    access_token = token_provider.generate_token(user.email, user.authorities)
    log_event(
        "auth.login",
        "User logged in",
        user_id=user.id,
        context={"email": user.email, "role": user.role.value},
    )
    return (
        {
            "accessToken": access_token,
            "tokenType": "Bearer",
            "expiresIn": token_provider.expiration_seconds,
        },
        200,
    )


def _require_user(user_id: int):
    user = users_repo.get_user_by_id(user_id)
    if user is None:
        raise BusinessError(ErrorCode.USER_NOT_FOUND)
    return user


def get_profile(user_id: int) -> Dict[str, Any]:
    return _require_user(user_id).to_dict()


def update_profile(user_id: int, payload: Dict[str, Any]) -> Tuple[Dict[str, Any], int]:
    data = validate_payload(UserUpdatePayload, payload)
    user = _require_user(user_id)

    updates: Dict[str, Any] = {}
    if data.name is not None:
        updates["name"] = data.name
    if data.password is not None:
        if not check_password_hash(user.password_hash, data.current_password or ""):
            log_event(
                "user.password_change_failed",
                "Current password does not match",
                user_id=user_id,
                level="warning",
            )
            raise BusinessError(ErrorCode.INVALID_PASSWORD)
        updates["password_hash"] = generate_password_hash(data.password)

    user = users_repo.update_user(user_id, updates)
    if user is None:
        raise BusinessError(ErrorCode.USER_NOT_FOUND)

    log_event(
        "user.update",
        "Profile updated",
        user_id=user_id,
        context={"fields": ",".join(sorted(updates))},
    )
    return user.to_dict(), 200


def delete_account(user_id: int) -> Tuple[Dict[str, Any], int]:
    if users_repo.delete_user(user_id) == 0:
        raise BusinessError(ErrorCode.USER_NOT_FOUND)
    log_event("user.delete", "Account deleted", context={"deleted_user_id": user_id})
    return {"message": "Account deleted"}, 200
