"""User session data model."""

from pydantic import BaseModel, ConfigDict, Field

GUEST_NAME = "Guest"


class User(BaseModel):
    """Identity under which history is scoped."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = Field(..., min_length=1, description="Trimmed display name")
    is_guest: bool = Field(default=False, alias="isGuest")

    @classmethod
    def guest(cls) -> "User":
        """The guest sentinel. All guests share one history partition."""
        return cls(name=GUEST_NAME, is_guest=True)

    @property
    def display_name(self) -> str:
        return GUEST_NAME if self.is_guest else self.name
