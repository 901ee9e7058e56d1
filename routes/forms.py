"""
Form Validation Routes
======================

Endpoints the form engine calls while processing a submission:
- Validate a whole form against the social profile checkers
- Check a single value against one validation kind
- Validate a tweet field value
"""

import logging
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from fastapi import APIRouter, Depends

from dependencies import get_form_validator, get_plugin_manager, get_remote_fetcher
from form_validation import FormValidator, ValidationResult
from plugin_manager import PluginManager
from remote import RemoteFetcher
from tweet_field import validate_tweet_url

# Set up logging
logger = logging.getLogger(__name__)

# Create router
router = APIRouter(tags=["Validation"])

# Pydantic models for request validation
class ValidateFormRequest(BaseModel):
    """Request model for validating a submitted form."""
    validation_result: ValidationResult
    values: Dict[str, Any] = Field(default_factory=dict)
    current_page: Optional[int] = None
    hidden_field_ids: List[int] = Field(default_factory=list)

class ValueRequest(BaseModel):
    value: Optional[str] = None

class ProfileCheckResponse(BaseModel):
    kind: str
    value: Optional[str] = None
    is_valid: bool

class TweetValidationResponse(BaseModel):
    is_valid: bool
    message: str = ""

@router.post("/forms/validate", response_model=ValidationResult)
def validate_form(
    payload: ValidateFormRequest,
    validator: FormValidator = Depends(get_form_validator)
):
    """Annotate failing social profile fields on a validation result."""
    hidden = set(payload.hidden_field_ids)

    return validator.validate_form(
        payload.validation_result,
        payload.values,
        current_page=payload.current_page,
        is_field_hidden=lambda form, field: field.id in hidden
    )

@router.post("/profiles/{kind}/check", response_model=ProfileCheckResponse)
def check_profile(
    kind: str,
    payload: ValueRequest,
    manager: PluginManager = Depends(get_plugin_manager),
    fetcher: RemoteFetcher = Depends(get_remote_fetcher)
):
    """Check one value against one validation kind."""
    is_valid = manager.check(kind, payload.value, fetcher)
    return ProfileCheckResponse(kind=kind, value=payload.value, is_valid=is_valid)

@router.post("/fields/tweet/validate", response_model=TweetValidationResponse)
def validate_tweet(payload: ValueRequest):
    """Validate the value of a tweet field."""
    is_valid, message = validate_tweet_url(payload.value)
    return TweetValidationResponse(is_valid=is_valid, message=message)
