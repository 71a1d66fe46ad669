# Import all the models, so that Base has them before being
# imported by alembic or used for create_all
from salonpro.db.base_class import Base  # noqa: F401
from salonpro.models import Salon, User, Customer, ReminderTemplate, ReminderRunMarker  # noqa: F401
