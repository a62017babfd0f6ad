"""
Description:
Call lifecycle states for a voice interview session.

Dependencies:
- enum: For the string-valued state enumeration.

Author: @kcaparas1630
"""
from enum import Enum


class CallStatus(str, Enum):
    """Lifecycle of one voice call. FINISHED is terminal."""
    INACTIVE = "INACTIVE"
    CONNECTING = "CONNECTING"
    ACTIVE = "ACTIVE"
    FINISHED = "FINISHED"
