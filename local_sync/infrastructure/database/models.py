"""
Modelos de base de datos (ORM) de las tablas sincronizadas.

Las columnas declaradas aqui son las que se copian del entorno remoto:
cualquier columna nueva se sincroniza sin cambiar el pipeline.
"""
from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func

from local_sync.infrastructure.database.session import Base


# JSONB en PostgreSQL, JSON generico en el resto (SQLite en tests)
JSONData = JSON().with_variant(JSONB(), "postgresql")


class AssetModel(Base):
    """
    Modelo de base de datos para assets.

    `uuid` es la clave estable entre entornos; `id` lo asigna cada base.
    `data` puede referenciar un title via data.title.title_id.
    """

    __tablename__ = "assets"

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), nullable=False, unique=True, index=True)
    data = Column(JSONData, nullable=True)
    status = Column(String(50), nullable=False, default="active")  # active | inactive
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())
    soft_deleted_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<Asset(id={self.id}, uuid={self.uuid}, status={self.status})>"


class SourceAssetModel(Base):
    """
    Modelo de base de datos para source assets.

    Un asset tiene muchos source assets; dentro de un asset se identifican
    por (source_system, source_id).
    """

    __tablename__ = "source_assets"
    __table_args__ = (
        UniqueConstraint("asset_id", "source_system", "source_id", name="uq_source_assets_asset_source"),
    )

    id = Column(Integer, primary_key=True, index=True)
    asset_id = Column(Integer, ForeignKey("assets.id"), nullable=False, index=True)
    source_system = Column(String(50), nullable=False)  # system_1 | system_2 | system_3
    source_id = Column(String(255), nullable=False)
    data = Column(JSONData, nullable=True)
    status = Column(String(50), nullable=False, default="active")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())
    soft_deleted_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<SourceAsset(id={self.id}, asset_id={self.asset_id}, source={self.source_system}:{self.source_id})>"


class TitleModel(Base):
    """Modelo de base de datos para titles (compartidos entre assets)."""

    __tablename__ = "titles"

    id = Column(Integer, primary_key=True, index=True)
    title_id = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    data = Column(JSONData, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())
    soft_deleted_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<Title(id={self.id}, title_id={self.title_id}, name={self.name})>"
