from digitalhouse.models.user import User, UserType  # noqa
from digitalhouse.models.help_request import (  # noqa
    HelpRequest,
    HelpRequestStatus,
    HelpRequestType,
    HelpResponse,
)
