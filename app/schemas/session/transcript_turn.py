"""
Description:
Transcript turn schema. One final utterance recorded from the voice-agent event stream.

Dependencies:
- pydantic: For data validation and settings management.
- typing: For type annotations.

Author: @kcaparas1630
"""
from pydantic import BaseModel
from typing import Literal, get_args

TranscriptRole = Literal["user", "system", "assistant"]
TRANSCRIPT_ROLES = get_args(TranscriptRole)


class TranscriptTurn(BaseModel):
    role: TranscriptRole
    content: str
