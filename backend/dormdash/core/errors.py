"""
Domain errors raised by the service layer.

Routers never build error responses by hand; the handlers registered in
``dormdash.main`` turn these into ``{"detail": ...}`` bodies.
"""


class DormDashError(Exception):
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class BadRequestError(DormDashError):
    status_code = 400


class ConflictError(BadRequestError):
    # already reserved, duplicate review, illegal lifecycle step
    pass


class NotAuthenticatedError(DormDashError):
    status_code = 401


class ForbiddenError(DormDashError):
    status_code = 403


class NotFoundError(DormDashError):
    status_code = 404
