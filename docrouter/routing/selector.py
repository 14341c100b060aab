from docrouter.profiling.models import ContentType, DocumentFormat, DocumentProfile, UserTier
from docrouter.routing.constants import (
    FAST_MAX_COMPLEXITY,
    FAST_MAX_FILE_SIZE,
    FAST_MAX_PAGES,
    FAST_MIN_TEXT_DENSITY,
    PREMIUM_MIN_COMPLEXITY,
    PREMIUM_MIN_PAGES,
)
from docrouter.routing.models import PipelineTier


def select_tier(profile: DocumentProfile) -> PipelineTier:
    """Map a document profile to a pipeline tier.

    Evaluated in fixed order: audio, fast, premium, balanced. A borderline
    profile that satisfies both the fast and premium rules gets fast.
    """
    if profile.format is DocumentFormat.AUDIO:
        return PipelineTier.BALANCED
    if is_fast_eligible(profile):
        return PipelineTier.FAST
    if is_premium_eligible(profile):
        return PipelineTier.PREMIUM
    return PipelineTier.BALANCED


def is_fast_eligible(profile: DocumentProfile) -> bool:
    """Small, text-heavy, simple documents can take the fast tier."""
    return (
        profile.content_type is ContentType.TEXT_HEAVY
        and profile.file_size < FAST_MAX_FILE_SIZE
        and profile.page_count <= FAST_MAX_PAGES
        and profile.estimated_text_density > FAST_MIN_TEXT_DENSITY
        and profile.estimated_complexity < FAST_MAX_COMPLEXITY
    )


def is_premium_eligible(profile: DocumentProfile) -> bool:
    """Any single premium signal is enough."""
    return (
        profile.content_type is ContentType.IMAGE_HEAVY
        or profile.page_count > PREMIUM_MIN_PAGES
        or profile.estimated_complexity > PREMIUM_MIN_COMPLEXITY
        or profile.has_table_structures
        or profile.user_tier is UserTier.PREMIUM
    )
