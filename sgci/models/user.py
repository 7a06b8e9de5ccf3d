"""
S.G.C.I. - User Model
Usuários do painel (administradores e corretores)
"""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime

from sgci.database import Base
from sgci.core.permissions import UserRole, UserStatus


class User(Base):
    """Modelo de usuário do painel"""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    name = Column(String(255))

    role = Column(String(20), nullable=False, default=UserRole.CORRETOR.value)
    status = Column(String(20), nullable=False, default=UserStatus.PENDING.value)

    # Corretor vinculado (quando role == CORRETOR)
    corretor_id = Column(String(64))

    last_login_at = Column(DateTime)
    approved_at = Column(DateTime)
    approved_by = Column(String(255))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "status": self.status,
            "corretorId": self.corretor_id,
            "lastLoginAt": self.last_login_at.isoformat() if self.last_login_at else None,
            "approvedAt": self.approved_at.isoformat() if self.approved_at else None,
            "approvedBy": self.approved_by,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
