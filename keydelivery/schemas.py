from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TOTAL_COST_LIMIT = 20.0
DEFAULT_CLAUDE_CONSOLE_ACCOUNT_ID = "570f1b57-bf82-4652-a0ab-0dd4ff71c0de"
DEFAULT_EXPIRATION_DAYS = 7
DEFAULT_DESCRIPTION = "20刀体验组周卡-共享账户"
MAX_EXPIRATION_DAYS = 36500

API_KEY_PERMISSIONS = ["claude"]
API_KEY_TAGS = ["20刀体验组"]


class DeliveryOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    total_cost_limit: float = Field(DEFAULT_TOTAL_COST_LIMIT, ge=0, allow_inf_nan=False)
    claude_console_account_id: str = DEFAULT_CLAUDE_CONSOLE_ACCOUNT_ID
    expiration_days: int = Field(DEFAULT_EXPIRATION_DAYS, ge=0, le=MAX_EXPIRATION_DAYS)
    description: str = DEFAULT_DESCRIPTION
    output: Path


class CreatedApiKey(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, coerce_numbers_to_str=True)

    id: str
    api_key: str = Field(..., alias="apiKey")
    name: str
    expires_at: str | None = Field(None, alias="expiresAt")
    total_cost_limit: Any = Field(None, alias="totalCostLimit")
