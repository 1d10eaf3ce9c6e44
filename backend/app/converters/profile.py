from app.models.profile import Profile
from app.schemas.profile import ProfilePublic, ProfileSummary


def to_public(profile: Profile) -> ProfilePublic:
    return ProfilePublic.model_validate(profile, from_attributes=True)


def to_summary(profile: Profile) -> ProfileSummary:
    return ProfileSummary(
        id=profile.id,
        username=profile.username,
        specialty=profile.specialty,
        avatar_url=profile.avatar_url,
    )
