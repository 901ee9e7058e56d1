"""
Form Validation
===============

Validates social profile fields when a form is submitted.

Add a ``validate-<kind>`` CSS class to a field to have its value checked,
for example ``validate-twitter`` or ``validate-facebook``. Fields are only
checked when they are on the page being submitted and not hidden by
conditional logic. Failing fields are flagged and given a message, and the
whole validation result is marked invalid.
"""

import logging
from typing import Any, Callable, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from plugin_manager import PluginManager

logger = logging.getLogger(__name__)

CSS_CLASS_TEMPLATE = "validate-%s"


class FormField(BaseModel):
    """A form field as supplied by the form engine."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: int
    type: str = "text"
    label: str = ""
    css_class: str = Field("", alias="cssClass")
    page_number: int = Field(1, alias="pageNumber")
    failed_validation: bool = False
    validation_message: str = ""


class Form(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    title: str = ""
    fields: List[FormField] = Field(default_factory=list)


class ValidationResult(BaseModel):
    """Validation state the form engine passes through its validators."""
    is_valid: bool = True
    form: Form
    failed_validation_page: Optional[int] = None


def get_field_validation_class(field: FormField, accounts: List[str]) -> Optional[str]:
    """
    Find the validation kind a field is tagged with.

    When a field carries several ``validate-*`` classes the first kind in
    ``accounts`` order wins.

    Returns:
        Optional[str]: The kind, or None if the field has no validation class
    """
    if not field.css_class:
        return None

    classes = field.css_class.split()

    for account in accounts:
        if CSS_CLASS_TEMPLATE % account in classes:
            return account

    return None


def get_current_page(form: Form, submitted_values: Mapping[str, Any]) -> int:
    """Page being submitted, from ``gform_source_page_number_<form id>``."""
    page = submitted_values.get(f"gform_source_page_number_{form.id}")
    try:
        return int(page) if page else 1
    except (TypeError, ValueError):
        return 1


class FormValidator:
    """
    Runs the profile checkers over a submitted form.

    Args:
        plugin_manager (PluginManager): Registry of checkers
        fetcher (Optional[RemoteFetcher]): Shared cached fetcher handed to checkers
    """

    def __init__(self, plugin_manager: PluginManager, fetcher=None):
        self.plugin_manager = plugin_manager
        self.fetcher = fetcher

    def is_valid(self, kind: str, value: Any) -> bool:
        return self.plugin_manager.check(kind, value, self.fetcher)

    def validate_form(
        self,
        validation_result: ValidationResult,
        submitted_values: Mapping[str, Any],
        current_page: Optional[int] = None,
        is_field_hidden: Optional[Callable[[Form, FormField], bool]] = None
    ) -> ValidationResult:
        """
        Validate the form of a validation result.

        Args:
            validation_result (ValidationResult): Mutated in place and returned
            submitted_values (Mapping[str, Any]): Posted values, keyed ``input_<field id>``
            current_page (Optional[int]): Page being validated; read from the
                submitted values when omitted
            is_field_hidden (Optional[Callable]): Conditional logic query of the form engine

        Returns:
            ValidationResult: The same result, with failures annotated
        """
        form = validation_result.form
        accounts = self.plugin_manager.get_accounts()

        if current_page is None:
            current_page = get_current_page(form, submitted_values)

        for field in form.fields:
            validate_key = get_field_validation_class(field, accounts)
            if not validate_key:
                continue

            if int(field.page_number) != int(current_page):
                continue

            if is_field_hidden is not None and is_field_hidden(form, field):
                continue

            field_value = submitted_values.get(f"input_{field.id}")

            if self.is_valid(validate_key, field_value):
                continue

            logger.info(f"Field {field.id} of form {form.id} failed '{validate_key}' validation")

            validation_result.is_valid = False

            field.failed_validation = True
            field.validation_message = (
                field.validation_message
                if field.validation_message
                else self.plugin_manager.get_invalid_message(validate_key)
            )

        validation_result.form = form

        return validation_result
