class InvalidInputError(Exception):
    def __init__(self, field: str):
        self.field = field
        self.message = f"Missing {field} parameter"
        super().__init__(self.message)


class FetchError(Exception):
    def __init__(self, message: str, phone: str | None = None):
        self.message = message
        self.phone = phone
        super().__init__(message)


class FetchTimeoutError(FetchError):
    pass


class ExtractionError(Exception):
    def __init__(self, message: str, method: str | None = None):
        self.message = message
        self.method = method
        super().__init__(message)
