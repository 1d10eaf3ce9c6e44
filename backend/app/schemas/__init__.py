from .profile import *
from .collaboration import *

# EnrichedRequest nests ProfileSummary and AgreementPublic.
EnrichedRequest.model_rebuild()
InboxPage.model_rebuild()

__all__ = [
    "ProfilePublic",
    "ProfileSummary",
    "AgreementCreate",
    "AgreementPublic",
    "CollaborationRequestCreate",
    "CollaborationRequestPublic",
    "EnrichedRequest",
    "InboxPage",
]
