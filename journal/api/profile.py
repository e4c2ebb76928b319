"""Profile API: account baseline, risk and pair display settings."""

from fastapi import APIRouter, Depends

from journal.api.deps import get_journal
from journal.schemas.profile import ProfileRead, ProfileUpdate
from journal.services.journal import JournalService

router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.get("", response_model=ProfileRead)
def get_profile(journal: JournalService = Depends(get_journal)):
    return journal.get_profile()


@router.put("", response_model=ProfileRead)
def save_profile(data: ProfileUpdate, journal: JournalService = Depends(get_journal)):
    return journal.save_profile(data.model_dump(exclude_unset=True, exclude_none=True))
