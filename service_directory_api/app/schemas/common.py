"""
Shared schema pieces used by several domains.
"""

from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, BeforeValidator, EmailStr


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


# Syntax is checked by email-validator; the address is stored lower-cased.
NormalizedEmail = Annotated[EmailStr, BeforeValidator(_strip), AfterValidator(str.lower)]


class MessageResponse(BaseModel):
    success: bool = True
    message: str
