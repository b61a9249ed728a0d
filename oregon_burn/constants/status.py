"""Display strings shared by fetchers, the service, and the CLI."""

LOADING = "Loading..."
NOT_AVAILABLE = "N/A"
ERROR = "Error"
NO_BURNING_TODAY = "No burning permitted today"

WAITING_FOR_LOCATION = "Waiting for location..."
NO_DISTRICT_FOUND = "No district found for location."
ENTER_ADDRESS = "Please enter an address."
ADDRESS_NOT_FOUND = "Address not found."

# District whose status comes from the DFPA restriction level instead of
# the regional smoke management advisory.
SUTHERLIN_DISTRICT = "Sutherlin FD"
