# ParkDesk — Database Models
# Import all models here for SQLAlchemy discovery

from parkdesk.models.user import User, LoginAttempt                  # noqa
from parkdesk.models.vehicle import Vehicle, VEHICLE_TYPES           # noqa
from parkdesk.models.parking_slot import ParkingSlot                 # noqa
from parkdesk.models.parking_session import ParkingSession           # noqa
from parkdesk.models.notification import Notification                # noqa
from parkdesk.models.scheduler_run import SchedulerRun               # noqa
