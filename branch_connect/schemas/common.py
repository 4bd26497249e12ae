from typing import Optional

from pydantic import BaseModel


class Notice(BaseModel):
    """Transient message for the client to show as a toast."""
    title: str
    description: str
    variant: str = "destructive"


class MessageResponse(BaseModel):
    message: str
    notice: Optional[Notice] = None
