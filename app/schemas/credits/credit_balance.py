"""
Description:
This module defines the schema for the credit balance response, including the flag
the client uses to show the out-of-credits banner.

Dependencies:
- pydantic: For data validation and settings management.
- typing: For type annotations.

Author: @kcaparas1630
"""
from pydantic import BaseModel
from typing import Optional


class CreditBalanceResponse(BaseModel):
    """
    Schema for credit balance responses.
    """
    credits: Optional[int] = None
    out_of_credits: bool
    credits_route: str
