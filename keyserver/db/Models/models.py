from sqlalchemy import Column, String, Integer, DateTime, Date, Boolean, ForeignKey
from sqlalchemy.ext.declarative import declarative_base
from datetime import datetime

Base = declarative_base()

class DailyKey(Base):
    __tablename__ = "daily_keys"

    id = Column(Integer, primary_key=True, autoincrement=True)
    license_key = Column(String(64), unique=True, index=True, nullable=False)
    url_path = Column(String(128), unique=True, nullable=False)
    # One key per UTC calendar day; concurrent creators race on this constraint
    date = Column(Date, unique=True, index=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

class PremiumKey(Base):
    __tablename__ = "premium_keys"

    id = Column(Integer, primary_key=True, autoincrement=True)
    license_key = Column(String(64), unique=True, index=True, nullable=False)
    url_path = Column(String(128), unique=True, index=True, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    expires_at = Column(DateTime, nullable=False)
    created_by_admin = Column(Integer, ForeignKey("admin_users.id", ondelete="SET NULL"), nullable=True)

class AdminKey(Base):
    __tablename__ = "admin_keys"

    id = Column(Integer, primary_key=True, autoincrement=True)
    license_key = Column(String(64), unique=True, index=True, nullable=False)
    url_path = Column(String(128), unique=True, index=True, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    # Admin keys never expire
    expires_at = Column(DateTime, nullable=True)
    created_by_admin = Column(Integer, ForeignKey("admin_users.id", ondelete="SET NULL"), nullable=True)

class AdminUser(Base):
    __tablename__ = "admin_users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(64), unique=True, index=True, nullable=False)
    password_hash = Column(String(128), nullable=False)
    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

class AdminSession(Base):
    __tablename__ = "admin_sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    token = Column(String(128), unique=True, index=True, nullable=False)
    admin_id = Column(Integer, ForeignKey("admin_users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False)
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(String(512), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

class AccessLog(Base):
    __tablename__ = "key_access_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(String(512), nullable=True)
    accessed_at = Column(DateTime, default=datetime.utcnow, index=True)
