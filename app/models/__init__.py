from .users import User  # noqa: F401
from .docon import DoconDocument, DoconDocumentFile, DoconRevisionHistory  # noqa: F401
from .it_asset import ItAsset  # noqa: F401
from .laptop import Laptop  # noqa: F401
from .radio import Radio  # noqa: F401
from .voucher import Voucher  # noqa: F401
from .starlink_usage import StarlinkUsage  # noqa: F401
from .files import FileShare, StoredFile  # noqa: F401
