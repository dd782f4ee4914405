"""Domain models for forms-manager."""

from .forms import (
    FormDefinitionRow,
    FormMetadataRow,
    FormSecretRow,
    FormVersionRow,
)

__all__ = [
    "FormDefinitionRow",
    "FormMetadataRow",
    "FormSecretRow",
    "FormVersionRow",
]
