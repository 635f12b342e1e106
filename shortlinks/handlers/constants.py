# Log event names (the `event` field of structured log records)
SHORT_URL_CREATED = 'SHORT_URL_CREATED'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
STATS_RETRIEVED = 'STATS_RETRIEVED'
INVALID_JSON_BODY = 'INVALID_JSON_BODY'
REQUEST_REJECTED = 'REQUEST_REJECTED'
HEALTHCHECK_FAILED = 'HEALTHCHECK_FAILED'

# Error codes carried by responses not backed by an application exception
INVALID_JSON_BODY_ERROR = 'http:invalid_json_body'
ROUTE_NOT_FOUND_ERROR = 'http:route_not_found'
METHOD_NOT_ALLOWED_ERROR = 'http:method_not_allowed'
HTTP_ERROR = 'http:error'
