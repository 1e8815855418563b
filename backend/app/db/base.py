from backend.app.db.base_class import Base

# Import models to register metadata for Base.metadata.create_all in tests
from backend.app.models.lead import Lead  # noqa: F401
from backend.app.models.history import LeadHistoryEntry  # noqa: F401
