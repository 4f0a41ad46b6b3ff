from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CustomerRecord(BaseModel):
    """
    Shared configuration for the customer payload records.

    Wire names are camelCase. Every field is optional and unknown
    fields are ignored; no required-field enforcement takes place here.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class PersonalInfo(_CustomerRecord):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    date_of_birth: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None


class AccountInfo(_CustomerRecord):
    account_number: Optional[str] = None
    account_type: Optional[str] = None
    balance: Optional[float] = None
    currency: Optional[str] = None
    status: Optional[str] = None


class ContactPreferences(_CustomerRecord):
    email_notifications: Optional[bool] = None
    sms_notifications: Optional[bool] = None
    preferred_language: Optional[str] = None


class CustomerInput(_CustomerRecord):
    """
    Structured customer record accepted by POST /api/transform/customer.
    """

    customer_id: Optional[str] = Field(
        default=None,
        description="Customer identifier, logged with every request.",
    )

    personal_info: Optional[PersonalInfo] = None

    accounts: Optional[List[AccountInfo]] = None

    preferences: Optional[ContactPreferences] = None
