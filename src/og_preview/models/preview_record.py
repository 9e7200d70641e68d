from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


# Field order is the order of keys in the JSON response
class PreviewRecord(BaseModel):
    ok: bool = False
    title: Optional[str] = None
    image: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    description: Optional[str] = None
    cached: Optional[bool] = None

    @classmethod
    def failed(cls) -> "PreviewRecord":
        """Empty record returned for every fetch or parse failure."""
        return cls()

    def as_cached(self) -> "PreviewRecord":
        return self.model_copy(update={"cached": True}, deep=True)

    def to_wire(self) -> Dict[str, Any]:
        """Serializable dict with absent optional fields dropped, not nulled."""
        return self.model_dump(exclude_none=True)
