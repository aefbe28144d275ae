from functools import wraps
from http import HTTPStatus
from fastapi import HTTPException

# error code raised by services -> response status
ERRMAP: dict[str, HTTPStatus] = {
    "video_not_found": HTTPStatus.NOT_FOUND,
    "user_not_found": HTTPStatus.NOT_FOUND,
    "reaction_conflict": HTTPStatus.CONFLICT,
    "userinfo_error": HTTPStatus.BAD_GATEWAY,
    "storage_upload_error": HTTPStatus.INTERNAL_SERVER_ERROR,
}


def handle_runtime_errors(mapping: dict[str, HTTPStatus] | None = None):
    """
    Turn RuntimeError("<code>[: details]") raised by services into
    HTTPException. Codes missing from the mapping become 500.
    """
    mapping = ERRMAP if mapping is None else mapping

    def decorator(fn):
        @wraps(fn)
        async def wrapper(*args, **kwargs):
            try:
                return await fn(*args, **kwargs)
            except RuntimeError as e:
                code = str(e).split(":", 1)[0].strip()
                if code in mapping:
                    raise HTTPException(status_code=mapping[code],
                                        detail=code)
                raise HTTPException(
                    status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
                    detail="internal_error")
        return wrapper
    return decorator
