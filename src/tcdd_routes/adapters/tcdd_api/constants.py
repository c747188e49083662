"""Constants for the TCDD booking service adapter.

The booking site talks to two hosts: a CDN serving the station feeds and the
transaction API serving the train availability query. Both require the
``Authorization`` credential and a ``unit-id`` routing header.
"""

TCDD_BASE_URL = "https://web-api-prod-ytp.tcddtasimacilik.gov.tr/tms"
TCDD_CDN_URL = "https://cdn-api-prod-ytp.tcddtasimacilik.gov.tr/datas"
TCDD_UNIT_ID = "3895"

STATIONS_PATH = "/stations.json"  # GET, full station list
STATION_PAIRS_PATH = "/station-pairs-INTERNET.json"  # GET, adjacency feed
TRAIN_AVAILABILITY_PATH = "/train/train-availability"  # POST, availability query

# Query string the booking site sends along with every request
DEFAULT_QUERY_PARAMS = {"environment": "dev", "userId": "1"}

# HTTP headers
DEFAULT_HEADERS = {
    "Accept": "application/json, text/plain, */*",
    "Accept-Language": "tr",
    "Origin": "https://ebilet.tcddtasimacilik.gov.tr",
}

# Status the upstream answers with for an expired or invalid credential
AUTH_ERROR_STATUS = 401

# Availability request body
REQUEST_DATE_FORMAT = "%d-%m-%Y 00:00:00"
ADULT_PASSENGER_TYPE_ID = 0
PASSENGER_COUNT = 1
SEARCH_TYPE_DOMESTIC = "DOMESTIC"

DEFAULT_CURRENCY = "TRY"
