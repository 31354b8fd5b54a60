"""Configuration settings for the storm impact ranking pipeline."""

from datetime import datetime

# ============================================================
# DATA SOURCE
# ============================================================
DATA_URL = "https://d396qusza40orc.cloudfront.net/repdata%2Fdata%2FStormData.csv.bz2"
DATA_PATH = "StormData.csv.bz2"
CACHE_PATH = "StormData.pkl"

# Only these columns are read from the source file
USECOLS = [
    "STATE", "BGN_DATE", "BGN_TIME", "EVTYPE",
    "FATALITIES", "INJURIES",
    "PROPDMG", "PROPDMGEXP", "CROPDMG", "CROPDMGEXP",
    "REMARKS", "REFNUM",
]

DATE_FORMAT = "%m/%d/%Y %H:%M:%S"

# ============================================================
# FILTERING
# ============================================================
# NWS records all 48 event types only from January 1996
ANALYSIS_START = datetime(1996, 1, 1)

# 2006 Napa river flood, property damage mis-keyed as billions
EXCLUDED_REF_NUM = 605943

# ============================================================
# REPORTING
# ============================================================
TOP_N = 20
