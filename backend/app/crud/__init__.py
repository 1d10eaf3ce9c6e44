from .profile import *
from .collaboration import (
    create_request,
    create_agreement,
    get_request_by_id,
    get_agreement_for_request,
    get_requests_for_viewer,
    update_request_status,
    update_agreement_status,
    delete_request,
)
