from pydantic import BaseModel, ConfigDict, Field


class TokenRequest(BaseModel):
	username: str = Field(..., min_length=1)
	password: str = Field(..., min_length=1)

	model_config = ConfigDict(
		json_schema_extra={'example': {'username': 'admin', 'password': 'secret'}}
	)
