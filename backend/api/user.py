"""User Registration API

Accepts a registration request wrapped in an envelope. By the time the
handler runs, the payload has passed every constraint; failures never reach
it and are answered by the ``ValidationFailure`` handler instead.
"""
from fastapi import APIRouter, Depends

from core.envelope import Envelope
from core.logging import api_logger
from core.validation import parse_ingress
from models.user import RegisterRequest

router = APIRouter()

log = api_logger()


def valid_registration(body: Envelope[RegisterRequest]) -> RegisterRequest:
    """Dependency: parse the envelope and run the payload's constraints."""
    return parse_ingress(body.data, field="data")


@router.post(
    "",
    response_model=Envelope[RegisterRequest],
    response_model_exclude_unset=True,
)
async def register(payload: RegisterRequest = Depends(valid_registration)) -> Envelope[RegisterRequest]:
    """Echo a valid registration request back in a success envelope."""
    log.info("register_request", payload=payload.model_dump(mode="json", exclude_unset=True))
    return Envelope[RegisterRequest].success(payload)
