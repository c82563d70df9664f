# Importa aquí los modelos para que SQLAlchemy los "vea" al crear tablas
from portal.models.user import User  # noqa: F401
from portal.models.admin import Admin  # noqa: F401
from portal.models.team import Team  # noqa: F401
from portal.models.setting import Setting  # noqa: F401
from portal.models.web_session import WebSession  # noqa: F401
