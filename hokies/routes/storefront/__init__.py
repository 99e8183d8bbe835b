from flask import Blueprint
from hokies.version import API_PREFIX

storefront_bp = Blueprint("storefront", __name__, url_prefix=API_PREFIX)

from . import shop  # noqa: E402
from . import sell  # noqa: E402
from . import checkout  # noqa: E402
