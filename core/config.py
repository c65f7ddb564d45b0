"""Invoicing configuration."""

from pydantic import BaseModel, Field, field_validator


class InvoicingConfig(BaseModel):
    """
    Invoicing configuration.

    Defaults match a single-currency euro business with 30-day aging
    buckets.
    """

    currency: str = Field(
        default="EUR",
        description="ISO 4217 code used when formatting amounts",
        min_length=3,
        max_length=3,
    )

    # Listing
    default_list_limit: int = Field(
        default=50,
        description="Rows returned by list endpoints when no limit is given",
        ge=1,
        le=500,
    )
    max_list_limit: int = Field(
        default=500,
        description="Upper bound on any list request",
        ge=1,
    )

    # Receivables aging
    aging_bucket_bounds: tuple[int, ...] = Field(
        default=(30, 60, 90),
        description="Upper day bound of each closed aging bucket; a final open bucket follows",
    )

    @field_validator("aging_bucket_bounds")
    @classmethod
    def bounds_increasing(cls, value: tuple[int, ...]) -> tuple[int, ...]:
        if not value:
            raise ValueError("aging_bucket_bounds needs at least one bound")
        if value[0] < 1 or any(b <= a for a, b in zip(value, value[1:])):
            raise ValueError("aging_bucket_bounds must be positive and strictly increasing")
        return value
