class InvalidArgumentError(ValueError):
    """Raised when a required argument is missing."""

    def __init__(self, parameter: str, message: str | None = None):
        self.parameter = parameter
        if message is None:
            message = "value is required"

        super().__init__(f"Invalid argument '{parameter}': {message}")
