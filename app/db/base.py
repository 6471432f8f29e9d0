# import models so Base.metadata knows every table (used by init_db and alembic)
from app.db.base_class import Base  # noqa: F401
from app.models.assignment import Assignment  # noqa: F401
from app.models.submission import Submission  # noqa: F401
