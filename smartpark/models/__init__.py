# SmartPark database models
# Import all models here for SQLAlchemy discovery

from smartpark.models.user import User, UserRole        # noqa
from smartpark.models.car import Car                    # noqa
from smartpark.models.parking_slot import ParkingSlot   # noqa
from smartpark.models.parking_record import ParkingRecord  # noqa
from smartpark.models.payment import Payment            # noqa
from smartpark.models.report import Report              # noqa
