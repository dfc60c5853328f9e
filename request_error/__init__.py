from request_error.core.errors import STATUSES, RequestError
