"""
Shared request dependencies.
"""
from fastapi import Request

from vibration_wizard.core.psd import PsdTemplateLibrary
from vibration_wizard.core.templates import load_default_library


def get_template_library(request: Request) -> PsdTemplateLibrary:
    """PSD template library loaded at start-up, created on first use otherwise."""
    library = getattr(request.app.state, "template_library", None)
    if library is None:
        library = load_default_library()
        request.app.state.template_library = library
    return library
