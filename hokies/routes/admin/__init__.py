from flask import Blueprint
from hokies.version import API_PREFIX
from hokies.utils import auth_required, role_required

admin_bp = Blueprint("admin", __name__, url_prefix=f"{API_PREFIX}/admin")


@admin_bp.before_request
@auth_required
@role_required("admin")
def _enforce_admin_role():
    """Ensure the requester is an authenticated admin."""
    return None

from . import inventory  # noqa: E402
from . import drops  # noqa: E402
from . import submissions  # noqa: E402
from . import orders  # noqa: E402
from . import listings  # noqa: E402
from . import events  # noqa: E402
