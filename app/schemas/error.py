from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class ErrorDetail(BaseModel):
    path: str
    message: str
    type: Optional[str] = None


class ErrorResponse(BaseModel):
    error: str
    details: Optional[List[Dict[str, Any]]] = None
