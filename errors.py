from fastapi import HTTPException, status


class InvalidInput(HTTPException):
    def __init__(self, detail: str = "Invalid input"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class DuplicateEmail(HTTPException):
    def __init__(self, detail: str = "Email already registered"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class InvalidCredentials(HTTPException):
    def __init__(self, detail: str = "Invalid credentials"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class Unauthenticated(HTTPException):
    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class Forbidden(HTTPException):
    def __init__(self, detail: str = "Admin access required"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class QuotaExceeded(HTTPException):
    def __init__(self, detail: str = "Free plan limit reached. Upgrade for unlimited URLs."):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class TrialExpired(HTTPException):
    def __init__(self, detail: str = "Trial expired. Please upgrade."):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class ShortCodeExhausted(HTTPException):
    def __init__(self, detail: str = "Could not allocate a short code"):
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)
