# sitestore/errors.py
"""
Error taxonomy shared by the stores and the HTTP layer.
Each class carries the status code the web layer answers with; filesystem
failures are left as the builtin OSError and become 500s.
"""


class StoreError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(StoreError):
    status_code = 400


class NotFound(StoreError):
    status_code = 404


class Conflict(StoreError):
    status_code = 400


class Forbidden(StoreError):
    status_code = 403


class InvalidState(StoreError):
    status_code = 400
