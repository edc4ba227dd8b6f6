"""Customer intake form validation."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, Field

PHONE_PATTERN = r"^[\d\s\-+()]+$"


class IntakeForm(BaseModel):
    """Flat intake form as submitted by the client."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=100)
    company: str | None = Field(default=None, max_length=100)
    phone: str = Field(min_length=1, pattern=PHONE_PATTERN)
    email: EmailStr
    address: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=10, max_length=1000)
    difficult_access: bool = Field(default=False, alias="difficultAccess")

    def to_customer_intake(self) -> CustomerIntake:
        return CustomerIntake(
            customer=Customer(
                name=self.name,
                company=self.company or None,
                phone=self.phone,
                email=self.email,
                address=self.address,
            ),
            description=self.description,
            site=Site(difficult_access=self.difficult_access),
        )


class Customer(BaseModel):
    name: str
    company: str | None = None
    phone: str
    email: str
    address: str


class Site(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    difficult_access: bool = Field(default=False, alias="difficultAccess")


class CustomerIntake(BaseModel):
    customer: Customer
    description: str
    site: Site


# Pre-filled demo values
DEFAULT_INTAKE = IntakeForm(
    name="Max Mustermann",
    company="Mustermann GmbH",
    phone="+49 123 456789",
    email="max@mustermann.de",
    address="Musterstraße 123, 12345 Berlin",
    description=(
        "We have water damage on the bathroom ceiling. The paint is peeling and "
        "there might be a leak in the roof above. We need someone to check and "
        "repair both the roof and repaint the ceiling."
    ),
    difficult_access=True,
)

# Blank form values; not a valid intake
EMPTY_INTAKE: dict[str, str | bool] = {
    "name": "",
    "company": "",
    "phone": "",
    "email": "",
    "address": "",
    "description": "",
    "difficultAccess": False,
}
