"""
Pydantic models for the ACORD 25 analysis pipeline.

Defines strict types for the certificate data returned by the model and
for the API request/response envelopes.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

try:
    from .normalization import (
        digits_only,
        first_line,
        is_positive_amount,
        normalize_date,
        parse_currency,
    )
except ImportError:
    from normalization import (
        digits_only,
        first_line,
        is_positive_amount,
        normalize_date,
        parse_currency,
    )


def _none_as_empty_list(v: Any) -> Any:
    return [] if v is None else v


def _normalize_date_or_keep(v: str) -> str:
    # Unparseable dates are kept as transcribed rather than dropped
    return normalize_date(v) or v


# =============================================================================
# Certificate Models
# =============================================================================


class CertificateInformation(BaseModel):
    """Header block of the certificate."""

    certificate_holder: str = Field(
        ...,
        description="First line under CERTIFICATE HOLDER (business name only)",
    )
    certificate_number: str
    revision_number: str | None = None
    issue_date: str = Field(..., description="MM/DD/YYYY")

    @field_validator("certificate_holder")
    @classmethod
    def keep_first_line(cls, v: str) -> str:
        """Drop address lines that follow the holder's name."""
        return first_line(v)

    @field_validator("issue_date")
    @classmethod
    def normalize_issue_date(cls, v: str) -> str:
        return _normalize_date_or_keep(v)


class Insurer(BaseModel):
    """One row of INSURER(S) AFFORDING COVERAGE."""

    insurer_letter: str = Field(..., description="A, B, C, ...")
    insurer_name: str
    naic_code: str | None = Field(
        default=None,
        description="Digits only, null when not clearly numeric",
    )

    @field_validator("naic_code", mode="before")
    @classmethod
    def naic_digits_only(cls, v: Any) -> Any:
        if isinstance(v, str):
            return digits_only(v)
        return v


class PolicyInformation(BaseModel):
    """Identifying details of a single policy row."""

    policy_type: str
    policy_number: str
    effective_date: str = Field(..., description="MM/DD/YYYY")
    expiry_date: str = Field(..., description="MM/DD/YYYY")

    @field_validator("effective_date", "expiry_date")
    @classmethod
    def normalize_policy_dates(cls, v: str) -> str:
        return _normalize_date_or_keep(v)


class Coverage(BaseModel):
    """A single coverage limit, e.g. EACH OCCURRENCE = 1000000."""

    limit_type: str = Field(..., description="Label exactly as printed on the form")
    limit_value: float = Field(..., description="Amount without currency formatting")

    @field_validator("limit_value", mode="before")
    @classmethod
    def parse_amount(cls, v: Any) -> Any:
        """Accept currency strings such as "$1,000,000"."""
        amount = parse_currency(v)
        return v if amount is None else amount

    @field_validator("limit_value")
    @classmethod
    def require_positive_amount(cls, v: float) -> float:
        if not is_positive_amount(v):
            raise ValueError("limit_value must be a finite amount greater than zero")
        return v


class Policy(BaseModel):
    """A policy row together with its coverage limits."""

    policy_information: PolicyInformation
    insurer_letter: str = Field(..., description="INSR LTR column value")
    coverages: list[Coverage] = Field(default_factory=list)

    @field_validator("coverages", mode="before")
    @classmethod
    def drop_empty_coverages(cls, v: Any) -> Any:
        """
        Omit coverage lines whose amount is zero, blank, a bare currency
        symbol or otherwise not a usable number.
        """
        if v is None:
            return []
        if not isinstance(v, list):
            return v
        return [
            entry
            for entry in v
            if not isinstance(entry, dict)
            or is_positive_amount(parse_currency(entry.get("limit_value")))
        ]


class PrimaryDetails(BaseModel):
    full_name: str | None = None
    email_address: str | None = None
    doing_business_as: str | None = None


class ContactInformation(BaseModel):
    phone_number: str = Field(..., description="Digits only")
    fax_number: str | None = Field(default=None, description="Digits only")
    license_number: str | None = None

    @field_validator("phone_number", mode="before")
    @classmethod
    def phone_digits_only(cls, v: Any) -> Any:
        if isinstance(v, str):
            return digits_only(v) or v
        return v

    @field_validator("fax_number", mode="before")
    @classmethod
    def fax_digits_only(cls, v: Any) -> Any:
        if isinstance(v, str):
            return digits_only(v)
        return v


class AddressDetails(BaseModel):
    address_line_1: str
    address_line_2: str | None = None
    address_line_3: str | None = None
    city: str
    state: str
    zip_code: str
    country: Literal["USA"]


class ProducerInformation(BaseModel):
    """The PRODUCER block (agency or broker issuing the certificate)."""

    primary_details: PrimaryDetails
    contact_information: ContactInformation
    address_details: AddressDetails


class AcordCertificate(BaseModel):
    """
    Structured contents of an ACORD 25 Certificate of Liability Insurance.

    Fields absent from the document are null; list fields absent from the
    model answer default to empty lists.
    """

    certificate_information: CertificateInformation
    insurers: list[Insurer] = Field(default_factory=list)
    policies: list[Policy] = Field(default_factory=list)
    producer_information: ProducerInformation

    @field_validator("insurers", "policies", mode="before")
    @classmethod
    def default_empty_lists(cls, v: Any) -> Any:
        return _none_as_empty_list(v)


# =============================================================================
# API Models
# =============================================================================


class AnalyzeResponse(BaseModel):
    """
    Successful response of the analyze endpoint.

    `data` is null when the document is not recognised as an ACORD 25.
    """

    data: AcordCertificate | None = Field(
        ...,
        description="Extracted certificate, or null if not an ACORD 25",
    )


class ErrorResponse(BaseModel):
    """Error envelope returned with every non-2xx analyze response."""

    error: str = Field(..., description="Human readable error message")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(default="healthy")
    version: str = Field(default="1.0.0")
