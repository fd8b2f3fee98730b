"""Property listing model — the catalog the engine ranks. Read-only here."""

from sqlalchemy import Column, String, Float, Integer, Text, Index

from smartrec.models.base import Base, JSONType, TimestampMixin, UUIDMixin


class Property(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "properties"

    title = Column(Text, nullable=False)
    description = Column(Text)

    price = Column(Float)
    location = Column(String(255))
    city = Column(String(100), index=True)
    state = Column(String(100))
    property_type = Column(String(50), index=True)  # house, apartment, villa, land, ...
    bedrooms = Column(Integer)
    bathrooms = Column(Integer)
    area_sqm = Column(Float)

    # Open map: {"swimmingpool": true, "garage": "yes", "view": "ocean", "gym": "no"}
    property_features = Column(JSONType, default=dict)

    status = Column(String(20), nullable=False, default="active", index=True)
    approval_status = Column(String(20), nullable=False, default="pending", index=True)

    __table_args__ = (
        Index("idx_properties_listing", "status", "approval_status", "created_at"),
    )

    # Fields copied onto every behavior signal at record time
    SNAPSHOT_FIELDS = ("id", "title", "price", "location", "city", "property_type", "bedrooms", "property_features")

    def snapshot(self) -> dict:
        """Denormalized, JSON-safe copy of the key listing fields."""
        data = {field: getattr(self, field) for field in self.SNAPSHOT_FIELDS}
        data["id"] = str(self.id)
        return data

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "title": self.title,
            "description": self.description,
            "price": self.price,
            "location": self.location,
            "city": self.city,
            "state": self.state,
            "property_type": self.property_type,
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "area_sqm": self.area_sqm,
            "property_features": self.property_features or {},
            "status": self.status,
            "approval_status": self.approval_status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
