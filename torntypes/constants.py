"""Constants for the torntypes package.

Defaults for the remote schema endpoints and the generated output. Every value
here can be overridden from the command line.
"""

V1_BASE_URL = 'https://tornapi.tornplayground.eu/api/v1'
V2_OPENAPI_URL = 'https://www.torn.com/swagger/openapi.json'

REQUEST_TIMEOUT = 30
MAX_WORKERS = 8

DEFAULT_OUTPUT_PATH = 'dist/index.ts'
DEFAULT_OPENAPI_FILENAME = 'openapi.json'

V1_HEADER = '// Auto-generated TypeScript types for Torn API V1'
V2_HEADER = '// Auto-generated TypeScript types for Torn API V2'

ERROR_ENUM_NAME = 'TornApiError'

# Words dropped from error messages when deriving enum member names
ERROR_NAME_STOP_WORDS = frozenset([
    'IS', 'IN', 'THE', 'OF', 'THIS', 'IDENTITY', 'PLEASE', 'TRY', 'DUE', 'OWNER', 'AGAIN',
])
ERROR_NAME_MAX_TOKENS = 5
