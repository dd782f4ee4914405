"""User-facing messages raised by the services."""

MAKE_FORM_LIVE_ERROR_MESSAGES = {
    "missingDraft": "This form is already live. Create a new draft to change the form.",
    "missingContact": "The form does not have any support contact details. Add contact details before making the form live.",
    "missingSubmissionGuidance": "The form does not explain what happens after submission. Add submission guidance before making the form live.",
    "missingPrivacyNotice": "The form does not have a privacy notice. Add a privacy notice before making the form live.",
    "missingTermsAndConditions": "The terms and conditions have not been agreed. Agree to the terms and conditions before making the form live.",
    "missingStartPage": "The questions in this form are not all connected. Connect all pages within the form.",
    "missingOutputEmail": "The draft form does not contain an output email address. Add an output email address for forms to be sent to.",
}

REMOVE_FORM_ERROR_MESSAGES = {
    "formIsAlreadyLive": "Form is already live and cannot be removed. Delete the draft instead.",
}
