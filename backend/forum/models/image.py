from sqlalchemy import Column, DateTime, Index, String

from forum.database import Base


class Image(Base):
    __tablename__ = "images"

    # Assigned by ImageRepository.create, never by the caller
    id = Column(String(36), primary_key=True)
    # Not a foreign key: posts live in another subsystem and are trusted as given
    post_id = Column(String(36), nullable=False)
    user_id = Column(String(36), nullable=False)
    path = Column(String(500), nullable=False)  # public URL of the original
    thumbnail_path = Column(String(500), nullable=False)  # public URL of the thumbnail
    created_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (Index("ix_images_post_id_created_at", "post_id", "created_at"),)

    def __repr__(self) -> str:
        return f"<Image(id={self.id}, post_id='{self.post_id}')>"
