"""Closed vocabularies shared by the definition helpers, repositories and services."""

from enum import Enum


class FormStatus(str, Enum):
    """The two co-existing states of a form."""
    DRAFT = "draft"
    LIVE = "live"


# Root field holding each state, on both the metadata and definition rows
STATE_FIELDS = {
    FormStatus.DRAFT: "draft",
    FormStatus.LIVE: "live",
}


class Engine(str, Enum):
    V1 = "V1"
    V2 = "V2"


class SchemaVersion(int, Enum):
    V1 = 1
    V2 = 2


class ControllerType(str, Enum):
    START = "StartPageController"
    HOME = "HomePageController"
    PAGE = "PageController"
    TERMINAL = "TerminalPageController"
    SUMMARY = "SummaryPageController"
    SUMMARY_WITH_CONFIRMATION_EMAIL = "SummaryPageWithConfirmationEmailController"
    STATUS = "StatusPageController"
    FILE_UPLOAD = "FileUploadPageController"
    REPEAT = "RepeatPageController"


SUMMARY_CONTROLLERS = frozenset({
    ControllerType.SUMMARY.value,
    ControllerType.SUMMARY_WITH_CONFIRMATION_EMAIL.value,
})


class ComponentType(str, Enum):
    TEXT_FIELD = "TextField"
    MULTILINE_TEXT_FIELD = "MultilineTextField"
    YES_NO_FIELD = "YesNoField"
    DATE_PARTS_FIELD = "DatePartsField"
    MONTH_YEAR_FIELD = "MonthYearField"
    SELECT_FIELD = "SelectField"
    AUTOCOMPLETE_FIELD = "AutocompleteField"
    RADIOS_FIELD = "RadiosField"
    CHECKBOXES_FIELD = "CheckboxesField"
    NUMBER_FIELD = "NumberField"
    UK_ADDRESS_FIELD = "UkAddressField"
    TELEPHONE_NUMBER_FIELD = "TelephoneNumberField"
    EMAIL_ADDRESS_FIELD = "EmailAddressField"
    FILE_UPLOAD_FIELD = "FileUploadField"
    DECLARATION_FIELD = "DeclarationField"
    PAYMENT_FIELD = "PaymentField"
    HIDDEN_FIELD = "HiddenField"
    HTML = "Html"
    INSET_TEXT = "InsetText"
    DETAILS = "Details"
    LIST = "List"
    MARKDOWN = "Markdown"


CONTENT_COMPONENT_TYPES = frozenset({
    ComponentType.HTML.value,
    ComponentType.INSET_TEXT.value,
    ComponentType.DETAILS.value,
    ComponentType.LIST.value,
    ComponentType.MARKDOWN.value,
})

LIST_COMPONENT_TYPES = frozenset({
    ComponentType.SELECT_FIELD.value,
    ComponentType.AUTOCOMPLETE_FIELD.value,
    ComponentType.RADIOS_FIELD.value,
    ComponentType.CHECKBOXES_FIELD.value,
    ComponentType.LIST.value,
})


class ApiErrorCode(str, Enum):
    GENERAL = "general"
    DUPLICATE_PAGE_PATH_PAGE = "duplicate_page_path_page"
    DUPLICATE_PAGE_PATH_COMPONENT = "duplicate_page_path_component"


class VersionChangeType(str, Enum):
    """What a version-ledger entry records."""
    FORM_CREATED = "form_created"
    FORM_UPDATED = "form_updated"
    FORM_MIGRATED = "form_migrated"
    METADATA_UPDATED = "metadata_updated"
    PAGE_CREATED = "page_created"
    PAGE_UPDATED = "page_updated"
    PAGE_DELETED = "page_deleted"
    PAGES_REORDERED = "pages_reordered"
    COMPONENT_CREATED = "component_created"
    COMPONENT_UPDATED = "component_updated"
    COMPONENT_DELETED = "component_deleted"
    COMPONENTS_REORDERED = "components_reordered"
    LIST_CREATED = "list_created"
    LIST_UPDATED = "list_updated"
    LIST_DELETED = "list_deleted"
    CONDITION_CREATED = "condition_created"
    CONDITION_UPDATED = "condition_updated"
    CONDITION_DELETED = "condition_deleted"
    SECTIONS_UPDATED = "sections_updated"
    OPTION_UPDATED = "option_updated"
    LIVE_PUBLISHED = "live_published"
    DRAFT_CREATED_FROM_LIVE = "draft_created_from_live"
    DRAFT_DELETED = "draft_deleted"


# Fixed id given to a summary page that was created without one
SUMMARY_PAGE_ID = "449a45f6-4541-4a46-91bd-8b8931b07b50"
