from sqlalchemy import Column, String, DateTime, JSON
from perangkat_ajar.database import Base
from perangkat_ajar.utils.time_utils import get_jakarta_time

class StoredDocument(Base):
    __tablename__ = "documents"

    # Full address, segments joined with "/" (schoolData/2024-2025/kelas-iv/data/kktp/mtk_ganjil)
    path = Column(String, primary_key=True, index=True)
    data = Column(JSON, nullable=False)

    created_at = Column(DateTime, default=get_jakarta_time)
    updated_at = Column(DateTime, default=get_jakarta_time, onupdate=get_jakarta_time)
