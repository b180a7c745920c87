# Import all the models, so that Base has them before being
# imported by Alembic or create_all
from digitalhouse.db.base_class import Base  # noqa
from digitalhouse.models.user import User  # noqa
from digitalhouse.models.help_request import HelpRequest, HelpResponse  # noqa
