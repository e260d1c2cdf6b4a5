class Headers:
    REQUEST_ID = 'request_id'
    X_REQUEST_ID = 'X-Request-ID'

class Defaults:
    GRAPHQL_SERVER_URL = 'http://localhost:3000/graphql'
    HOST = '0.0.0.0'
    PORT = 8787
    CONFIG_FILE_NAME = 'configuration.json'
    SERVICE_NAME = 'restified-endpoints'

class Messages:
    UNAUTHORIZED = 'unauthorized request'
    INVALID_REQUEST_BODY = 'Invalid request body'
    ENDPOINT_NOT_FOUND = 'Endpoint not found'
    INTERNAL_SERVER_ERROR = 'Internal server error'

REQUIRED_REQUEST_SHAPE = {
    'path': 'string',
    'method': 'string',
    'query': 'string (optional)',
    'body': 'object (optional)',
}
