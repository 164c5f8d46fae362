from fastapi import HTTPException

from studygenie.services.errors import GatewayError, StudyGenieError

# Gateway statuses passed through so the client can tell the user what happened
PASSTHROUGH_GATEWAY_STATUSES = (402, 429)


def to_http_exception(error: StudyGenieError) -> HTTPException:
    status_code = error.status_code
    if isinstance(error, GatewayError) and error.upstream_status in PASSTHROUGH_GATEWAY_STATUSES:
        status_code = error.upstream_status
    return HTTPException(status_code=status_code, detail=error.message)


def without_text(pdf: dict) -> dict:
    """PDF record as listed on the dashboard, minus the (large) extracted text."""
    return {key: value for key, value in pdf.items() if key != "extracted_text"}
