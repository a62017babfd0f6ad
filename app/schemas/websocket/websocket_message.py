"""
Description: 
This module defines the schema for messages the session WebSocket sends to the client.

# "state" carries the session snapshot after every relayed event.
# "navigate" carries the route the client must move to.
# "error" carries a short, user-safe error description.

Dependencies:
- pydantic: For data validation and settings management.
- typing: For type annotations.

Author: @kcaparas1630
"""

from pydantic import BaseModel
from typing import Any, Dict, Literal, Union

# Base model for all websocket messages
class WebSocketMessage(BaseModel):
    type: Literal["state", "navigate", "error"]
    content: Union[str, Dict[str, Any]]
    timestamp: str
