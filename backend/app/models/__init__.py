from .profile import *
from .message import *
from .collaboration import (
    AGREEMENT_TABLE,
    REQUEST_TABLE,
    CollaborationAgreement,
    CollaborationRequest,
)

CollaborationRequest.model_rebuild()
CollaborationAgreement.model_rebuild()

__all__ = [
    "Profile",
    "ProfileBase",
    "ProfileCreate",
    "Message",
    "CollaborationRequest",
    "CollaborationAgreement",
    "REQUEST_TABLE",
    "AGREEMENT_TABLE",
]
