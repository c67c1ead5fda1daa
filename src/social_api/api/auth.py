"""Registration API endpoints."""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends

from social_api.api.deps import get_storage
from social_api.config import get_settings
from social_api.schemas.user import UserCreate, UserResponse
from social_api.services.mailer import MailError, SendGridMailer, get_mailer
from social_api.store import Storage
from social_api.utils.security import generate_invitation_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/authentication", tags=["authentication"])


async def deliver_invitation(
    mailer: SendGridMailer, username: str, email: str, activation_url: str
) -> None:
    """Send the invitation email; delivery failures never undo the registration."""
    async with mailer:
        try:
            await mailer.send_invitation(
                username=username, email=email, activation_url=activation_url
            )
        except MailError as e:
            logger.error("Invitation email for %s could not be delivered: %s", username, e)
            return
    logger.info("Invitation email sent to %s", username)


@router.post("/user", response_model=UserResponse, status_code=201)
async def register(
    user_data: UserCreate,
    background_tasks: BackgroundTasks,
    storage: Storage = Depends(get_storage),
    mailer: SendGridMailer | None = Depends(get_mailer),
) -> UserResponse:
    """Register a new user.

    Creates an inactive account together with its invitation in one atomic
    step, then emails the activation link in the background. The password
    is securely hashed before storage.

    Raises:
        HTTPException 409: If username or email already exists
    """
    token = generate_invitation_token()
    user = await storage.invitations.create_and_invite(
        username=user_data.username,
        email=str(user_data.email),
        password=user_data.password,
        token=token,
    )

    settings = get_settings()
    activation_url = f"{settings.frontend_url.rstrip('/')}/confirm/{token}"
    if mailer is None:
        logger.warning("Mail is not configured - invitation for user %s was not sent", user.id)
    else:
        background_tasks.add_task(
            deliver_invitation, mailer, user.username, user.email, activation_url
        )

    return UserResponse.model_validate(user)
