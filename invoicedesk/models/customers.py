# invoicedesk/models/customers.py

from typing import Dict, List, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, field_validator

from invoicedesk.validation import custom_error, require_text

CUSTOMER_FIELDS = ("name", "email")

CUSTOMER_MESSAGES = {
    "name": "Please enter a valid customer name.",
    "email": "Please enter a valid email address.",
}


class CustomerForm(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    customer_name: Optional[str] = Field(default=None, alias="name")
    email: Optional[str] = None

    @field_validator("customer_name", mode="before")
    @classmethod
    def _check_name(cls, value):
        return require_text(value, CUSTOMER_MESSAGES["name"])

    @field_validator("email", mode="before")
    @classmethod
    def _check_email(cls, value):
        address = require_text(value, CUSTOMER_MESSAGES["email"])
        try:
            validate_email(address, check_deliverability=False)
        except EmailNotValidError:
            raise custom_error(CUSTOMER_MESSAGES["email"])
        return address


class CustomerState(BaseModel):
    errors: Optional[Dict[str, List[str]]] = None
    message: Optional[str] = None


class CustomerOut(BaseModel):
    id: str
    name: str
    email: str
    image_url: str

    class Config:
        from_attributes = True
