from typing import Annotated

from fastapi import APIRouter, Depends, status

from api.dependencies import get_auth_service
from api.schemas import TokenRequest, TokenResponse
from application.services import AuthService

router = APIRouter(prefix='/api/v1/auth', tags=['auth'])


@router.post(
	'/token',
	response_model=TokenResponse,
	status_code=status.HTTP_200_OK,
	summary='Exchange credentials for an access token',
)
async def issue_token(
	body: TokenRequest,
	service: Annotated[AuthService, Depends(get_auth_service)],
) -> TokenResponse:
	token = service.sign_in(body.username, body.password)
	return TokenResponse.from_token(token)
