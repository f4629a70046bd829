"""Domain modules package."""

from fitbook.modules.booking import models as booking_models  # noqa: F401
from fitbook.modules.scheduling import models as scheduling_models  # noqa: F401
