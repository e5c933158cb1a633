# Configuration files
CONFIG_DIRNAME = ".issuegate"
CONFIG_FILENAME = "config.yml"

# Phrase vocabularies
DEFAULT_APPROVE_PHRASES: tuple[str, ...] = ("approve", "approved", "lgtm", "yes")
DEFAULT_DENY_PHRASES: tuple[str, ...] = ("deny", "denied", "no", "reject")

# GitHub
DEFAULT_SERVER_URL = "https://github.com"
DEFAULT_API_URL = "https://api.github.com"
COMMENTS_PAGE_SIZE = 100

# Polling
DEFAULT_POLLING_INTERVAL_SECONDS = 10.0

# Closing comments posted once the gate reaches a terminal status
APPROVED_CLOSING_COMMENT = "All approvers have approved, continuing workflow and closing this issue."
DENIED_CLOSING_COMMENT = "Request denied. Closing issue and failing workflow."
DENIED_CONTINUE_CLOSING_COMMENT = "Request denied. Closing issue; the workflow continues without failing."
