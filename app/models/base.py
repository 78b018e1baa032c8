# Import the declarative base
from app.db.base import Base  # noqa: F401

# Import all models for Alembic/SQLAlchemy discovery.
# These imports register every table on Base.metadata.
from app.models.users import User  # noqa: F401
from app.models.docon import (  # noqa: F401
    DoconDocument,
    DoconDocumentFile,
    DoconRevisionHistory,
)
from app.models.it_asset import ItAsset  # noqa: F401
from app.models.laptop import Laptop  # noqa: F401
from app.models.radio import Radio  # noqa: F401
from app.models.voucher import Voucher  # noqa: F401
from app.models.starlink_usage import StarlinkUsage  # noqa: F401
from app.models.files import FileShare, StoredFile  # noqa: F401

# This allows Alembic's env.py to simply do: "from app.models.base import Base"
# and have access to the metadata for all tables.
