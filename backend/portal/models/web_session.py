from sqlalchemy import Column, DateTime, Index, String, Text

from portal.db.base import Base


class WebSession(Base):
    __tablename__ = "sessions"

    sid = Column(String, primary_key=True)
    sess = Column(Text, nullable=False)  # JSON
    expire = Column(DateTime, nullable=False)

    __table_args__ = (Index("IDX_session_expire", "expire"),)
