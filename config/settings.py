import os
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# Holt-Winters coefficients used for every regional forecast
SMOOTHING_ALPHA = float(os.getenv("SMOOTHING_ALPHA", "0.7"))
SMOOTHING_BETA = float(os.getenv("SMOOTHING_BETA", "0.7"))
SMOOTHING_GAMMA = float(os.getenv("SMOOTHING_GAMMA", "0.7"))
FORECAST_WINDOW = int(os.getenv("FORECAST_WINDOW", "10"))

# Catalogue sources
LOCAL_BASE_PATH = os.getenv(
    "LOCAL_BASE_PATH", os.path.join(os.path.expanduser("~"), "earthquakes.base")
)
SNAPSHOT_PATH = os.getenv(
    "SNAPSHOT_PATH", os.path.join(BASE_DIR, "src", "data", "chile_snapshot.csv")
)
EMSC_URL = os.getenv(
    "EMSC_URL",
    "http://www.emsc-csem.org/Earthquake/?filter=yes&region="
    "AISEN%2C+CHILE%7CANTOFAGASTA%2C+CHILE%7CARAUCANIA%2C+CHILE%7CATACAMA%2C+CHILE%7C"
    "BIO-BIO%2C+CHILE%7CCOQUIMBO%2C+CHILE%7CISLA+CHILOE%2C+LOS+LAGOS%2C+CHILE%7C"
    "LIBERTADOR+O%60HIGGINS%2C+CHILE%7CLOS+LAGOS%2C+CHILE%7CMAGALLANES%2C+CHILE%7C"
    "MAULE%2C+CHILE%7CNEAR+COAST+OF+AISEN%2C+CHILE%7COFF+COAST+OF+AISEN%2C+CHILE%7C"
    "OFF+COAST+OF+ANTOFAGASTA%2C+CHILE%7COFF+COAST+OF+ARAUCANIA%2C+CHILE%7C"
    "OFF+COAST+OF+ATACAMA%2C+CHILE%7COFF+COAST+OF+BIO-BIO%2C+CHILE%7C"
    "OFF+COAST+OF+COQUIMBO%2C+CHILE%7COFF+COAST+OF+LOS+LAGOS%2C+CHILE%7C"
    "OFF+COAST+OF+MAULE%2C+CHILE%7COFF+COAST+OF+O%60HIGGINS%2C+CHILE%7C"
    "OFF+COAST+OF+TARAPACA%2C+CHILE%7COFF+COAST+OF+VALPARAISO%2C+CHILE%7C"
    "OFFSHORE+ANTOFAGASTA%2C+CHILE%7COFFSHORE+ARAUCANIA%2C+CHILE%7C"
    "OFFSHORE+ATACAMA%2C+CHILE%7COFFSHORE+BIO-BIO%2C+CHILE%7COFFSHORE+COQUIMBO%2C+CHILE%7C"
    "OFFSHORE+LOS+LAGOS%2C+CHILE%7COFFSHORE+MAULE%2C+CHILE%7COFFSHORE+O%60HIGGINS%2C+CHILE%7C"
    "OFFSHORE+TARAPACA%2C+CHILE%7COFFSHORE+VALPARAISO%2C+CHILE%7C"
    "REGION+METROPOLITANA%2C+CHILE%7CTARAPACA%2C+CHILE%7CVALPARAISO%2C+CHILE%7C"
    "WEST+CHILE+RISE&min_intens=0&max_intens=8&export=csv",
)
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "30"))

# Line format shared by the feed, the snapshot and the local cache
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
FIELD_SEPARATOR = ";"

# Charts
CHART_DIR = os.getenv("CHART_DIR", "charts")
CHART_WIDTH = 1024
CHART_HEIGHT = 768
CHART_DPI = 100

# Magnitude bands used by the distribution chart: < LOW, LOW..HIGH, > HIGH
MAGNITUDE_BAND_LOW = 3.5
MAGNITUDE_BAND_HIGH = 5.0
