"""
Revoked JWT tokens.

Refresh tokens are single-use: on refresh the presented token is stored here
and a new pair is issued. Logout stores the presented access token.
"""
from sqlalchemy import Column, String, DateTime, Index
from sqlalchemy.sql import func

from tablebook.db.base import Base


class TokenBlacklist(Base):
    __tablename__ = "token_blacklist"

    # sha256 of the raw token
    token_hash = Column(String(64), primary_key=True)
    blacklisted_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    # Rows past this point can be purged
    expires_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index('idx_token_blacklist_expires', 'expires_at'),
    )
