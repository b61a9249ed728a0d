"""URLs and request conventions for Oregon burn status sources."""

DATA_SOURCE_URLS = {
    # Burn advisories
    "smoke_management_burn": "https://smkmgt.com/burn.php",
    "dfpa_home": "https://www.dfpa.net/",

    # Reference data
    "oregon_fire_districts": "https://geohub.oregon.gov/datasets/oregon-structural-fire-districts",

    # Geocoding
    "nominatim_search": "https://nominatim.openstreetmap.org/search",
}

# The smoke management site refuses requests that carry a library user agent.
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) "
    "AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.0 "
    "Mobile/15E148 Safari/604.1"
)
DEFAULT_REFERER = "https://www.google.com/"
