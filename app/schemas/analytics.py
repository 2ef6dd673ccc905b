from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CategoryTotal(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    category: str = Field(alias="_id")
    total: float
    count: int


class StatusCount(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str = Field(alias="_id")
    count: int


class AnalyticsResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_monthly_spend: float
    category_breakdown: list[CategoryTotal]
    status_counts: list[StatusCount]
