from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lon: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"latitude out of range: {self.lat}")
        if not -180.0 <= self.lon <= 180.0:
            raise ValueError(f"longitude out of range: {self.lon}")

    def __iter__(self) -> Iterator[float]:
        yield self.lat
        yield self.lon

    def as_pair(self) -> tuple[float, float]:
        return (self.lat, self.lon)


@dataclass(frozen=True)
class Airport:
    iata: str
    city: str
    coordinate: Coordinate


# (code, city, lat, lon). Hand-maintained; extend as new routes show up without a map.
_AIRPORT_ROWS: tuple[tuple[str, str, float, float], ...] = (
    # United States
    ("ATL", "Atlanta", 33.6407, -84.4277),
    ("LAX", "Los Angeles", 33.9416, -118.4085),
    ("ORD", "Chicago", 41.9742, -87.9073),
    ("DFW", "Dallas/Fort Worth", 32.8998, -97.0403),
    ("DEN", "Denver", 39.8561, -104.6737),
    ("JFK", "New York", 40.6413, -73.7781),
    ("SFO", "San Francisco", 37.6213, -122.3790),
    ("SEA", "Seattle", 47.4502, -122.3088),
    ("LAS", "Las Vegas", 36.0840, -115.1537),
    ("MCO", "Orlando", 28.4312, -81.3081),
    ("EWR", "Newark", 40.6895, -74.1745),
    ("CLT", "Charlotte", 35.2140, -80.9431),
    ("PHX", "Phoenix", 33.4373, -112.0078),
    ("IAH", "Houston", 29.9902, -95.3368),
    ("MIA", "Miami", 25.7959, -80.2870),
    ("BOS", "Boston", 42.3656, -71.0096),
    ("MSP", "Minneapolis", 44.8848, -93.2223),
    ("DTW", "Detroit", 42.2125, -83.3534),
    ("PHL", "Philadelphia", 39.8729, -75.2437),
    ("LGA", "New York", 40.7769, -73.8740),
    ("FLL", "Fort Lauderdale", 26.0742, -80.1506),
    ("BWI", "Baltimore", 39.1773, -76.6684),
    ("DCA", "Washington", 38.8512, -77.0402),
    ("IAD", "Washington", 38.9531, -77.4565),
    ("SLC", "Salt Lake City", 40.7899, -111.9791),
    ("SAN", "San Diego", 32.7338, -117.1933),
    ("TPA", "Tampa", 27.9775, -82.5350),
    ("PDX", "Portland", 45.5898, -122.5951),
    ("STL", "St. Louis", 38.7499, -90.3699),
    ("HNL", "Honolulu", 21.3187, -157.9225),
    ("AUS", "Austin", 30.1945, -97.6700),
    ("BNA", "Nashville", 36.1263, -86.6774),
    ("OAK", "Oakland", 37.7213, -122.2208),
    ("SJC", "San Jose", 37.3639, -121.9289),
    ("DAL", "Dallas", 32.8472, -96.8517),
    ("HOU", "Houston", 29.6454, -95.2789),
    ("MDW", "Chicago", 41.7868, -87.7522),
    ("RDU", "Raleigh-Durham", 35.8776, -78.7875),
    ("SMF", "Sacramento", 38.6954, -121.5908),
    ("SNA", "Santa Ana", 33.6762, -117.8681),
    ("MCI", "Kansas City", 39.2976, -94.7139),
    ("SAT", "San Antonio", 29.5337, -98.4698),
    ("PIT", "Pittsburgh", 40.4915, -80.2329),
    ("CVG", "Cincinnati", 39.0533, -84.6630),
    ("IND", "Indianapolis", 39.7173, -86.2944),
    ("CLE", "Cleveland", 41.4117, -81.8498),
    ("CMH", "Columbus", 39.9980, -82.8919),
    ("MKE", "Milwaukee", 42.9472, -87.8966),
    ("PBI", "West Palm Beach", 26.6832, -80.0956),
    ("RSW", "Fort Myers", 26.5364, -81.7552),
    ("BDL", "Hartford", 41.9389, -72.6832),
    ("MEM", "Memphis", 35.0424, -89.9767),
    ("ABQ", "Albuquerque", 35.0402, -106.6090),
    ("BUF", "Buffalo", 42.9405, -78.7322),
    ("ONT", "Ontario", 34.0560, -117.6012),
    ("ANC", "Anchorage", 61.1743, -149.9962),
    ("BOI", "Boise", 43.5644, -116.2228),
    # Canada
    ("YYZ", "Toronto", 43.6777, -79.6248),
    ("YVR", "Vancouver", 49.1967, -123.1815),
    ("YUL", "Montreal", 45.4657, -73.7455),
    ("YYC", "Calgary", 51.1225, -114.0108),
    ("YEG", "Edmonton", 53.3097, -113.5801),
    ("YOW", "Ottawa", 45.3192, -75.6692),
    ("YWG", "Winnipeg", 49.9100, -97.2399),
    ("YHZ", "Halifax", 44.8808, -63.5086),
    # Mexico and Central America
    ("MEX", "Mexico City", 19.4363, -99.0721),
    ("CUN", "Cancun", 21.0365, -86.8771),
    ("GDL", "Guadalajara", 20.5218, -103.3111),
    ("MTY", "Monterrey", 25.7785, -100.1072),
    ("PVR", "Puerto Vallarta", 20.6801, -105.2544),
    ("SJD", "San Jose del Cabo", 23.1518, -109.7211),
    ("PTY", "Panama City", 9.0714, -79.3834),
    ("SJO", "San Jose", 9.9939, -84.2088),
    # South America
    ("GRU", "Sao Paulo", -23.4356, -46.4731),
    ("GIG", "Rio de Janeiro", -22.8099, -43.2505),
    ("EZE", "Buenos Aires", -34.8222, -58.5358),
    ("BOG", "Bogota", 4.7016, -74.1469),
    ("LIM", "Lima", -12.0219, -77.1143),
    ("SCL", "Santiago", -33.3930, -70.7858),
    ("UIO", "Quito", -0.1292, -78.3575),
    # United Kingdom and Ireland
    ("LHR", "London", 51.4700, -0.4543),
    ("LGW", "London", 51.1537, -0.1821),
    ("LCY", "London", 51.5048, 0.0495),
    ("STN", "London", 51.8850, 0.2389),
    ("MAN", "Manchester", 53.3537, -2.2750),
    ("EDI", "Edinburgh", 55.9500, -3.3725),
    ("DUB", "Dublin", 53.4213, -6.2701),
    ("GLA", "Glasgow", 55.8642, -4.4331),
    # Western Europe
    ("CDG", "Paris", 49.0097, 2.5479),
    ("ORY", "Paris", 48.7233, 2.3794),
    ("AMS", "Amsterdam", 52.3105, 4.7683),
    ("FRA", "Frankfurt", 50.0379, 8.5622),
    ("MUC", "Munich", 48.3537, 11.7750),
    ("BCN", "Barcelona", 41.2974, 2.0833),
    ("MAD", "Madrid", 40.4983, -3.5676),
    ("FCO", "Rome", 41.8003, 12.2389),
    ("MXP", "Milan", 45.6306, 8.7281),
    ("VCE", "Venice", 45.5053, 12.3519),
    ("LIS", "Lisbon", 38.7742, -9.1342),
    ("BRU", "Brussels", 50.9010, 4.4856),
    ("ZRH", "Zurich", 47.4582, 8.5556),
    ("GVA", "Geneva", 46.2381, 6.1090),
    ("VIE", "Vienna", 48.1103, 16.5697),
    ("CPH", "Copenhagen", 55.6180, 12.6508),
    ("OSL", "Oslo", 60.1939, 11.1004),
    ("ARN", "Stockholm", 59.6519, 17.9186),
    ("HEL", "Helsinki", 60.3172, 24.9633),
    # Eastern and Southern Europe
    ("ATH", "Athens", 37.9364, 23.9445),
    ("IST", "Istanbul", 41.2753, 28.7519),
    ("WAW", "Warsaw", 52.1657, 20.9671),
    ("PRG", "Prague", 50.1008, 14.2600),
    ("BUD", "Budapest", 47.4360, 19.2556),
    ("OTP", "Bucharest", 44.5711, 26.0850),
    ("SOF", "Sofia", 42.6952, 23.4114),
    # Middle East
    ("DXB", "Dubai", 25.2532, 55.3657),
    ("DOH", "Doha", 25.2731, 51.6081),
    ("AUH", "Abu Dhabi", 24.4330, 54.6511),
    ("CAI", "Cairo", 30.1219, 31.4056),
    ("TLV", "Tel Aviv", 32.0114, 34.8867),
    ("AMM", "Amman", 31.7226, 35.9932),
    ("BEY", "Beirut", 33.8211, 35.4884),
    ("JED", "Jeddah", 21.6796, 39.1564),
    ("RUH", "Riyadh", 24.9578, 46.6988),
    # East and Southeast Asia
    ("HND", "Tokyo", 35.5494, 139.7798),
    ("NRT", "Tokyo", 35.7720, 140.3929),
    ("PEK", "Beijing", 40.0799, 116.6031),
    ("PVG", "Shanghai", 31.1443, 121.8083),
    ("ICN", "Seoul", 37.4602, 126.4407),
    ("HKG", "Hong Kong", 22.3080, 113.9185),
    ("TPE", "Taipei", 25.0797, 121.2342),
    ("MNL", "Manila", 14.5086, 121.0198),
    ("SIN", "Singapore", 1.3644, 103.9915),
    ("KUL", "Kuala Lumpur", 2.7456, 101.7099),
    ("BKK", "Bangkok", 13.6900, 100.7501),
    ("CGK", "Jakarta", -6.1256, 106.6559),
    # South and Central Asia
    ("DEL", "Delhi", 28.5562, 77.1000),
    ("BOM", "Mumbai", 19.0896, 72.8656),
    ("BLR", "Bangalore", 13.1979, 77.7063),
    ("HYD", "Hyderabad", 17.2403, 78.4294),
    ("MAA", "Chennai", 12.9941, 80.1709),
    ("CCU", "Kolkata", 22.6547, 88.4467),
    ("CMB", "Colombo", 7.1808, 79.8841),
    ("KHI", "Karachi", 24.9065, 67.1608),
    ("ISB", "Islamabad", 33.6169, 73.0997),
    # Oceania
    ("SYD", "Sydney", -33.9399, 151.1753),
    ("MEL", "Melbourne", -37.6733, 144.8433),
    ("BNE", "Brisbane", -27.3942, 153.1218),
    ("PER", "Perth", -31.9403, 115.9672),
    ("AKL", "Auckland", -37.0082, 174.7850),
    ("CHC", "Christchurch", -43.4894, 172.5319),
    ("WLG", "Wellington", -41.3272, 174.8049),
    # Africa
    ("JNB", "Johannesburg", -26.1392, 28.2460),
    ("CPT", "Cape Town", -33.9715, 18.6021),
    ("ADD", "Addis Ababa", 8.9779, 38.7991),
    ("NBO", "Nairobi", -1.3192, 36.9278),
    ("LOS", "Lagos", 6.5774, 3.3213),
    ("ACC", "Accra", 5.6052, -0.1719),
    ("ALG", "Algiers", 36.6910, 3.2154),
    ("TUN", "Tunis", 36.8510, 10.2272),
    ("CMN", "Casablanca", 33.3676, -7.5898),
)

_AIRPORTS: dict[str, Airport] = {
    code: Airport(iata=code, city=city, coordinate=Coordinate(lat, lon))
    for code, city, lat, lon in _AIRPORT_ROWS
}


def _normalize(code: str | None) -> str:
    return (code or "").strip().upper()


def get_airport(code: str | None) -> Airport | None:
    return _AIRPORTS.get(_normalize(code))


def get_airport_coordinates(code: str | None) -> Coordinate | None:
    """Coordinates for an airport code, matched case-insensitively; None when unknown."""
    airport = get_airport(code)
    return airport.coordinate if airport else None


def known_airport_codes() -> list[str]:
    return sorted(_AIRPORTS)
