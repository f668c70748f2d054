from models.db import db

# Served when a salon has not configured any services yet.
DEFAULT_SERVICES = [
    {"id": "default-haircut", "name": "Haircut", "description": "Classic haircut", "price": 200, "duration_minutes": 30},
    {"id": "default-shave", "name": "Shave", "description": "Clean shave", "price": 100, "duration_minutes": 20},
    {"id": "default-beard-trim", "name": "Beard Trim", "description": "Beard trimming and styling", "price": 280, "duration_minutes": 25},
]

class Service(db.Model):
    __tablename__ = "services"

    id = db.Column(db.Integer, primary_key=True)
    salon_id = db.Column(db.Integer, db.ForeignKey("salons.id"), nullable=False, index=True)

    name = db.Column(db.String(120), nullable=False)
    description = db.Column(db.String(255), nullable=True)
    price = db.Column(db.Integer, nullable=False, default=0)  # whole rupees
    duration_minutes = db.Column(db.Integer, nullable=False, default=30)

    salon = db.relationship("Salon", back_populates="services")

    def to_dict(self):
        return {
            "id": str(self.id),
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "duration_minutes": self.duration_minutes,
        }


def services_for_salon(salon):
    """Stored services for the salon, or the default set when it has none."""
    if salon.services:
        return [s.to_dict() for s in salon.services]
    return [dict(s) for s in DEFAULT_SERVICES]
