class DeliveryError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ConfigurationError(DeliveryError):
    pass


class NetworkError(DeliveryError):
    pass


class AuthenticationError(DeliveryError):
    pass


class CreationError(DeliveryError):
    pass


class DocumentWriteError(DeliveryError):
    pass
