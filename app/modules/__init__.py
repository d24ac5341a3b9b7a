"""Domain modules package."""

from app.modules.appointments import models as appointments_models  # noqa: F401
from app.modules.audit import models as audit_models  # noqa: F401
from app.modules.teachers import models as teachers_models  # noqa: F401
