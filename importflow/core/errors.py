"""Exceptions raised by the import listener."""


class ImportFlowError(Exception):
    """Base class for errors raised by importflow handlers."""


class NameFormatError(ImportFlowError):
    """An author value could not be normalized into ``Surname, Given``."""


class MissingSecretError(ImportFlowError):
    """A secret required by a handler is not set for the event's environment."""

    def __init__(self, name: str):
        super().__init__(f"Secret '{name}' is not configured for this environment")
        self.name = name


class SheetNotFoundError(ImportFlowError):
    """A workbook does not contain a sheet with the configured slug."""

    def __init__(self, slug: str, workbook_id: str):
        super().__init__(f"Workbook {workbook_id} has no sheet with slug '{slug}'")
        self.slug = slug
        self.workbook_id = workbook_id


class StockValueError(ImportFlowError):
    """A source record carries a stock value that cannot drive a reorder."""

    def __init__(self, message: str, record_id: str | None = None, value: object = None):
        super().__init__(message)
        self.record_id = record_id
        self.value = value


class PlatformAPIError(ImportFlowError):
    """A call to the import platform API failed."""

    def __init__(self, message: str, status_code: int = 0, response_body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body
