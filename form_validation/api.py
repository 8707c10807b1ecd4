"""
Public API for form-validation-lib

This is the "front door": build a form in one call and get it back ready to
validate.
"""

import logging
from typing import Callable, Optional, Union

from .config_loader import FormConfig, PathOrUri, load_config
from .debounce import Scheduler
from .form import Form

logger = logging.getLogger(__name__)


def form(
    builder: Optional[Callable[[Form], None]] = None,
    *,
    config: Union[FormConfig, PathOrUri, None] = None,
    scheduler: Optional[Scheduler] = None,
) -> Form:
    """
    Create a form, optionally registering its fields through builder.

    Args:
        builder: Called once with the new form to register fields and
            assertions
        config: FormConfig, or path/URI of a configuration override
        scheduler: Timer source for debounced real-time validation

    Returns:
        The configured Form

    Example:
        def fields(f):
            f.input("email", "Email", email_binding).is_email()
            f.checkable("terms", "Terms", terms_binding).is_checked()

        signup = form(fields, scheduler=ManualScheduler())
        result = signup.validate()
        if not result:
            for error in result.errors:
                print(error)
    """
    if config is not None and not isinstance(config, FormConfig):
        config = load_config(config)

    new_form = Form(config=config, scheduler=scheduler)
    if builder is not None:
        builder(new_form)
        logger.debug(f"Form built with {len(new_form.fields)} fields")
    return new_form
