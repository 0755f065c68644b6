from typing import Annotated, Literal, Union

from fastapi import HTTPException
from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from ..utils.error_handlers import get_error_message
from ..utils.validation import validate_role


class Applicant(BaseModel):
    role: Literal["user"]

    @property
    def company_name(self) -> None:
        return None


class Employer(BaseModel):
    role: Literal["employer"]
    company_name: str = Field(min_length=1, max_length=255)


class Admin(BaseModel):
    role: Literal["admin"]

    @property
    def company_name(self) -> None:
        return None


Account = Annotated[Union[Applicant, Employer, Admin], Field(discriminator="role")]

_account_adapter = TypeAdapter(Account)


def parse_account(role: str | None, company_name: str | None) -> Applicant | Employer | Admin:
    """
    Turn the flat registration fields into one account variant.

    Only `Employer` carries a company name; for other roles it is dropped.
    """
    role = validate_role(role)
    raw: dict = {"role": role}
    if role == "employer":
        company = (company_name or "").strip() if isinstance(company_name, str) else ""
        if not company:
            raise HTTPException(status_code=400, detail=get_error_message("company_required"))
        raw["company_name"] = company

    try:
        return _account_adapter.validate_python(raw)
    except ValidationError:
        raise HTTPException(status_code=400, detail=get_error_message("validation_error")) from None


def user_view(user) -> dict:  # noqa: ANN001
    """Sanitized user projection; never includes the password hash."""
    return {
        "id": user.id,
        "email": user.email,
        "role": user.role,
        "companyName": user.company_name,
    }
