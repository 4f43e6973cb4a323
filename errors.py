class LedgerError(Exception):
    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class AuthenticationError(LedgerError):
    status_code = 401


class UnauthorizedError(LedgerError):
    status_code = 403


class NotFoundError(LedgerError):
    status_code = 404
