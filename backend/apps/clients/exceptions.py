from typing import Optional

from apps.api.exceptions import ApplicationError, ErrorKind


class RemoteServiceError(ApplicationError):
    """A downstream service could not be reached or answered with an error."""

    kind = ErrorKind.REMOTE_FAILURE

    def __init__(
        self,
        service: str,
        message: str,
        *,
        remote_status: Optional[int] = None,
    ):
        super().__init__(
            message,
            details={"service": service, "remote_status": remote_status},
        )
        self.service = service
        self.remote_status = remote_status


class RemoteNotFoundError(RemoteServiceError):
    """The downstream service answered 404 for the requested resource."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, service: str, message: str):
        super().__init__(service, message, remote_status=404)
