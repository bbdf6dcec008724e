# Listing views
RESULTS_VIEW = 'results'
STATISTICS_VIEW = 'statistics'

# Event names / error codes
INVALID_VIEW = 'INVALID_VIEW'
URLS_LISTED = 'URLS_LISTED'
