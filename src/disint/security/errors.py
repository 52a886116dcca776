from ..exceptions import SDKError


class InteractionAuthError(SDKError):
    http_status = 400
    message = "interaction authentication failed"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.message)


class KeyFormatError(InteractionAuthError):
    http_status = 400
    message = "invalid public key format"


class NoSignatureError(InteractionAuthError):
    http_status = 401
    message = "missing signature"


class SignatureFormatError(InteractionAuthError):
    http_status = 400
    message = "invalid signature format"


class TimestampFormatError(InteractionAuthError):
    http_status = 400
    message = "invalid timestamp format"


class TimestampError(InteractionAuthError):
    http_status = 400
    message = "timestamp is either too old or too new"


class VerificationError(InteractionAuthError):
    http_status = 401
    message = "signature verification failed"
