from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

class ClassificationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    confidence: float = Field(ge=0.0, le=1.0)

class ClassificationOutcome(BaseModel):
    """Completion payload handed back to the UI thread.

    ``observations is None`` means the request failed; an empty list means
    the model ran but recognized nothing.
    """
    model_config = ConfigDict(frozen=True)

    observations: Optional[List[ClassificationResult]] = None
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.observations is None
