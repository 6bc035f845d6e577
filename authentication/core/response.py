def standardized_response(success=True, data=None, message=None, error=None, error_code=None, **extra):
    """
    Build the JSON envelope shared by every API response.

    Keys that carry no value are left out so clients can rely on
    `data` for successes and `error` for failures.
    """
    payload = {"success": success}
    if message is not None:
        payload["message"] = message
    if data is not None:
        payload["data"] = data
    if error is not None:
        payload["error"] = error
    if error_code is not None:
        payload["error_code"] = error_code
    payload.update(extra)
    return payload
