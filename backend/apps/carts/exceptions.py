from typing import Any, Optional


class CartPayloadError(ValueError):
    """Raised when a cart payload does not match the stored cart shape.

    ``errors`` carries the field level messages produced by the payload
    serializer, keyed the same way DRF keys ``serializer.errors``.
    """

    def __init__(self, message: str, errors: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or {}
