"""Common schema types."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict


class PartyEnum(str, Enum):
    """Political party enum for API."""

    BJP = "BJP"
    JDU = "JDU"
    RJD = "RJD"
    INC = "INC"
    LJP = "LJP"


class ElectionTypeEnum(str, Enum):
    """Election type enum."""

    ASSEMBLY = "assembly"
    LOK_SABHA = "lok_sabha"
    BY_ELECTION = "by_election"


class PredictionStatusEnum(str, Enum):
    """Prediction set status enum."""

    DRAFT = "draft"
    SUBMITTED = "submitted"
    COMPLETED = "completed"
    VERIFIED = "verified"


class SortOrderEnum(str, Enum):
    ASC = "asc"
    DESC = "desc"


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(from_attributes=True)


class TimestampSchema(BaseSchema):
    """Schema with timestamp fields."""

    created_at: datetime
    updated_at: datetime
