from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class UserCredential:
	username: str
	password: str
	roles: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class IssuedToken:
	access_token: str
	expires_at: datetime
	roles: list[str]
	token_type: str = 'bearer'
