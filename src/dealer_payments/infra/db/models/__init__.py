from dealer_payments.infra.db.models.base import Base
from dealer_payments.infra.db.models.vehicle import VehicleRow

__all__ = ["Base", "VehicleRow"]
