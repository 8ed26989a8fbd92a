class InvalidInputError(ValueError):
    """Raised when an item or persona table cannot be evaluated as given."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)
