from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from typing import Optional, List
from datetime import datetime

from storefront.utils.timestamps import UTCDateTime, utcnow


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    password: str
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)

    reset_token: Optional[str] = Field(default=None, index=True)
    reset_token_expires: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)

    # in-flight checkout attempt (PendingSession); both set or both None
    pending_session_id: Optional[str] = Field(default=None, index=True)
    pending_session_items: Optional[List[dict]] = Field(
        default=None, sa_column=Column(JSON)
    )

    @property
    def has_pending_session(self) -> bool:
        return self.pending_session_id is not None
