"""Pydantic schemas for the contact form relay."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ContactSubmission(BaseModel):
    """Contact form fields as posted by the website.

    Required fields are validated by the contact service so that a missing
    name or email yields the form's own error message rather than a schema error.
    """

    model_config = ConfigDict(populate_by_name=True)

    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    email: str | None = Field(default=None, description="Reply-to address of the visitor.")
    user_type: str | None = Field(
        default=None,
        alias="userType",
        description="Interest tag: 'team' for enterprise, anything else for individual.",
    )
    message: str | None = Field(default=None, description="Optional free-text message.")


class ContactResponse(BaseModel):
    success: bool = True
    message: str = "Email sent successfully"
