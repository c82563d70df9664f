import json
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import relationship

from portal.db.base import Base

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"

# "Vivo" = cuenta para el límite de un equipo por líder
LIVE_STATUSES = {STATUS_PENDING, STATUS_APPROVED}


class Team(Base):
    __tablename__ = "teams"

    id = Column(Integer, primary_key=True, index=True)
    team_name = Column(String, nullable=False)
    leader_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)

    # JSON: [{"ign": "...", "discord": "..."}]
    members_json = Column(Text, nullable=False)
    payment_proof_path = Column(String, nullable=True)

    status = Column(String, nullable=False, default=STATUS_PENDING)
    rejection_reason = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    leader = relationship("User")

    __table_args__ = (
        # Un único equipo vivo por líder; los rechazados no cuentan
        Index(
            "uq_team_live_leader",
            "leader_id",
            unique=True,
            sqlite_where=text("status != 'rejected'"),
            postgresql_where=text("status != 'rejected'"),
        ),
        # Un id borrado nunca se reutiliza
        {"sqlite_autoincrement": True},
    )

    @property
    def members(self) -> list[dict]:
        return json.loads(self.members_json or "[]")
