from pydantic import BaseModel, Field


class DashboardStatsResponse(BaseModel):
    total: int
    pending: int
    paid: int
    total_amount: float = Field(alias="totalAmount")

    model_config = {"populate_by_name": True}
