from sqlalchemy import Column, String

from portal.db.base import Base

REGISTRATION_OPEN_KEY = "registration_open"


class Setting(Base):
    __tablename__ = "settings"

    key = Column(String, primary_key=True)
    value = Column(String, nullable=False)
