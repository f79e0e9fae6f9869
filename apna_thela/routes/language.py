from fastapi import APIRouter, Depends, HTTPException

from ..language import (
    SUPPORTED_LANGUAGES,
    LanguagePreference,
    UnsupportedLanguageError,
    get_language_preference,
)
from ..models import LanguageState, LanguageUpdate, VoiceCommandRequest, VoiceCommandResponse
from ..voice_commands import interpret_command


router = APIRouter()


@router.get("/language", response_model=LanguageState)
def current_language(preference: LanguagePreference = Depends(get_language_preference)):
    return LanguageState(language=preference.current, supported=list(SUPPORTED_LANGUAGES))


@router.put("/language", response_model=LanguageState)
def change_language(update: LanguageUpdate, preference: LanguagePreference = Depends(get_language_preference)):
    try:
        preference.set(update.language)
    except UnsupportedLanguageError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return LanguageState(language=preference.current, supported=list(SUPPORTED_LANGUAGES))


@router.post("/voice/command", response_model=VoiceCommandResponse)
def voice_command(req: VoiceCommandRequest, preference: LanguagePreference = Depends(get_language_preference)):
    """Switch language to match the speaker and resolve the page to open."""
    return interpret_command(req.transcript, preference)
