"""
Auth routes.

Defines the account service endpoints used by the desktop client:
- POST /api/auth/register - Create an account
- GET /api/auth/check-field - Live email/username availability
- POST /api/auth/login - Check credentials

Endpoints are plain ``def`` so FastAPI runs them in its threadpool;
hashing itself runs on the dedicated hashing pool.
"""

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse

from authcore.api.dependencies import (
    get_authenticator,
    get_availability_checker,
    get_registration_coordinator,
)
from authcore.api.models import (
    CheckFieldResponse,
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    UserModel,
)
from authcore.domain.availability import FieldAvailabilityChecker
from authcore.domain.login import INVALID_CREDENTIALS, Authenticator
from authcore.domain.models import Field, RegistrationRequest
from authcore.domain.registration import RegistrationCoordinator

router = APIRouter(tags=["auth"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    responses={
        200: {"model": RegisterResponse, "description": "Email or username already taken"},
        400: {"model": ErrorResponse, "description": "Validation error"},
        503: {"model": ErrorResponse, "description": "Account store unavailable"},
    },
    summary="Register a new account",
    description="Create an account with a unique email and username. "
    "Every conflicting field is reported in field_errors.",
)
def register(
    request_data: RegisterRequest,
    response: Response,
    coordinator: RegistrationCoordinator = Depends(get_registration_coordinator),
) -> RegisterResponse:
    """
    Register a new account.

    - **email**: Email address, unique across accounts
    - **username**: Username, unique across accounts
    - **password**: Password (hashed with Argon2id, never stored)
    """
    result = coordinator.register(
        RegistrationRequest(
            email=request_data.email,
            username=request_data.username,
            password=request_data.password,
        )
    )
    if not result.success:
        response.status_code = status.HTTP_200_OK
    return RegisterResponse.model_validate(result.to_dict())


@router.get(
    "/check-field",
    response_model=CheckFieldResponse,
    responses={400: {"model": CheckFieldResponse, "description": "Missing or unknown field"}},
    summary="Check email or username availability",
)
def check_field(
    field: str | None = None,
    value: str | None = None,
    checker: FieldAvailabilityChecker = Depends(get_availability_checker),
):
    """
    Report whether a value is still free.

    ``available`` is null when the account store could not be queried.
    """
    if not field or not (value or "").strip() or field not in {member.value for member in Field}:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"available": None},
        )

    return CheckFieldResponse(available=checker.check(Field(field), value))


@router.post(
    "/login",
    response_model=LoginResponse,
    response_model_exclude_none=True,
    responses={
        400: {"model": ErrorResponse, "description": "Validation error"},
        503: {"model": ErrorResponse, "description": "Account store unavailable"},
    },
    summary="Check login credentials",
)
def login(
    request_data: LoginRequest,
    authenticator: Authenticator = Depends(get_authenticator),
) -> LoginResponse:
    """
    Verify an email-or-username and password.

    Unknown accounts and wrong passwords get the same generic answer.
    """
    user = authenticator.authenticate(request_data.identifier, request_data.password)
    if user is None:
        return LoginResponse(success=False, message=INVALID_CREDENTIALS)
    return LoginResponse(
        success=True,
        message="Login successful.",
        user=UserModel(**user.to_dict()),
    )
