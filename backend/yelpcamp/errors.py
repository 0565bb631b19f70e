class FlashRedirect(Exception):
    """Abort the request: flash `message` and redirect to `url` ("back" = referrer)."""

    def __init__(self, url: str, message: str | None = None, category: str = "error"):
        super().__init__(message or url)
        self.url = url
        self.message = message
        self.category = category


class AuthError(Exception):
    pass


class RegistrationError(Exception):
    pass


class ImageValidationError(ValueError):
    def __init__(self, message: str = "Only image files are allowed!"):
        super().__init__(message)


class AssetHostError(Exception):
    pass


class MailError(Exception):
    pass
