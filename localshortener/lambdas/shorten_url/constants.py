# Event names / error codes
URLS_SHORTENED = 'URLS_SHORTENED'
INVALID_JSON = 'INVALID_JSON'
INVALID_REQUEST = 'INVALID_REQUEST'
INVALID_URL = 'INVALID_URL'
INVALID_VALIDITY = 'INVALID_VALIDITY'
INVALID_SHORTCODE = 'INVALID_SHORTCODE'
SHORTCODE_COLLISION = 'SHORTCODE_COLLISION'
INVALID_BATCH = 'INVALID_BATCH'
SHORTCODE_GENERATION_FAILED = 'SHORTCODE_GENERATION_FAILED'
