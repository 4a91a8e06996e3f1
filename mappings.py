# Static reference data bundled with the itinerary engine
# (airports with coordinates/timezones, airlines with alliances, equipment
# codes, and the known-route fallback table used when lookups are down).

from types import MappingProxyType

# ===== AIRPORTS =====
# code: (name, city, country, latitude, longitude, IANA timezone)
_AIRPORTS = {
    # ===== UNITED STATES / CANADA =====
    "ATL": ("Hartsfield-Jackson Atlanta International", "Atlanta", "United States", 33.6407, -84.4277, "America/New_York"),
    "MSY": ("Louis Armstrong New Orleans International", "New Orleans", "United States", 29.9934, -90.2580, "America/Chicago"),
    "JFK": ("John F. Kennedy International", "New York", "United States", 40.6413, -73.7781, "America/New_York"),
    "LGA": ("LaGuardia", "New York", "United States", 40.7769, -73.8740, "America/New_York"),
    "EWR": ("Newark Liberty International", "Newark", "United States", 40.6925, -74.1686, "America/New_York"),
    "BOS": ("Boston Logan International", "Boston", "United States", 42.3656, -71.0096, "America/New_York"),
    "IAD": ("Washington Dulles International", "Washington", "United States", 38.9531, -77.4565, "America/New_York"),
    "DCA": ("Ronald Reagan Washington National", "Washington", "United States", 38.8512, -77.0402, "America/New_York"),
    "ORD": ("Chicago O'Hare International", "Chicago", "United States", 41.9742, -87.9073, "America/Chicago"),
    "DFW": ("Dallas Fort Worth International", "Dallas", "United States", 32.8998, -97.0403, "America/Chicago"),
    "IAH": ("George Bush Intercontinental", "Houston", "United States", 29.9902, -95.3368, "America/Chicago"),
    "MSP": ("Minneapolis-Saint Paul International", "Minneapolis", "United States", 44.8848, -93.2223, "America/Chicago"),
    "DEN": ("Denver International", "Denver", "United States", 39.8561, -104.6737, "America/Denver"),
    "SLC": ("Salt Lake City International", "Salt Lake City", "United States", 40.7899, -111.9791, "America/Denver"),
    "PHX": ("Phoenix Sky Harbor International", "Phoenix", "United States", 33.4342, -112.0116, "America/Phoenix"),
    "LAX": ("Los Angeles International", "Los Angeles", "United States", 33.9416, -118.4085, "America/Los_Angeles"),
    "SFO": ("San Francisco International", "San Francisco", "United States", 37.6213, -122.3790, "America/Los_Angeles"),
    "SEA": ("Seattle-Tacoma International", "Seattle", "United States", 47.4502, -122.3088, "America/Los_Angeles"),
    "LAS": ("Harry Reid International", "Las Vegas", "United States", 36.0840, -115.1537, "America/Los_Angeles"),
    "MIA": ("Miami International", "Miami", "United States", 25.7959, -80.2870, "America/New_York"),
    "MCO": ("Orlando International", "Orlando", "United States", 28.4312, -81.3081, "America/New_York"),
    "CLT": ("Charlotte Douglas International", "Charlotte", "United States", 35.2144, -80.9473, "America/New_York"),
    "DTW": ("Detroit Metropolitan Wayne County", "Detroit", "United States", 42.2162, -83.3554, "America/Detroit"),
    "HNL": ("Daniel K. Inouye International", "Honolulu", "United States", 21.3187, -157.9225, "Pacific/Honolulu"),
    "YYZ": ("Toronto Pearson International", "Toronto", "Canada", 43.6777, -79.6248, "America/Toronto"),
    "YUL": ("Montreal-Trudeau International", "Montreal", "Canada", 45.4706, -73.7408, "America/Toronto"),
    "YVR": ("Vancouver International", "Vancouver", "Canada", 49.1967, -123.1815, "America/Vancouver"),

    # ===== LATIN AMERICA =====
    "MEX": ("Mexico City International", "Mexico City", "Mexico", 19.4361, -99.0719, "America/Mexico_City"),
    "CUN": ("Cancun International", "Cancun", "Mexico", 21.0365, -86.8771, "America/Cancun"),
    "PTY": ("Tocumen International", "Panama City", "Panama", 9.0714, -79.3835, "America/Panama"),
    "BOG": ("El Dorado International", "Bogota", "Colombia", 4.7016, -74.1469, "America/Bogota"),
    "LIM": ("Jorge Chavez International", "Lima", "Peru", -12.0219, -77.1143, "America/Lima"),
    "GRU": ("Sao Paulo/Guarulhos International", "Sao Paulo", "Brazil", -23.4356, -46.4731, "America/Sao_Paulo"),
    "GIG": ("Rio de Janeiro/Galeao International", "Rio de Janeiro", "Brazil", -22.8090, -43.2506, "America/Sao_Paulo"),
    "FOR": ("Pinto Martins International", "Fortaleza", "Brazil", -3.7763, -38.5326, "America/Fortaleza"),
    "EZE": ("Ministro Pistarini International", "Buenos Aires", "Argentina", -34.8222, -58.5358, "America/Argentina/Buenos_Aires"),
    "SCL": ("Arturo Merino Benitez International", "Santiago", "Chile", -33.3930, -70.7858, "America/Santiago"),

    # ===== EUROPE =====
    "LHR": ("London Heathrow", "London", "United Kingdom", 51.4700, -0.4543, "Europe/London"),
    "LGW": ("London Gatwick", "London", "United Kingdom", 51.1537, -0.1821, "Europe/London"),
    "MAN": ("Manchester", "Manchester", "United Kingdom", 53.3537, -2.2750, "Europe/London"),
    "DUB": ("Dublin", "Dublin", "Ireland", 53.4264, -6.2499, "Europe/Dublin"),
    "CDG": ("Paris Charles de Gaulle", "Paris", "France", 49.0097, 2.5479, "Europe/Paris"),
    "ORY": ("Paris Orly", "Paris", "France", 48.7262, 2.3652, "Europe/Paris"),
    "AMS": ("Amsterdam Schiphol", "Amsterdam", "Netherlands", 52.3105, 4.7683, "Europe/Amsterdam"),
    "BRU": ("Brussels", "Brussels", "Belgium", 50.9014, 4.4844, "Europe/Brussels"),
    "FRA": ("Frankfurt", "Frankfurt", "Germany", 50.0379, 8.5622, "Europe/Berlin"),
    "MUC": ("Munich", "Munich", "Germany", 48.3537, 11.7750, "Europe/Berlin"),
    "BER": ("Berlin Brandenburg", "Berlin", "Germany", 52.3667, 13.5033, "Europe/Berlin"),
    "ZRH": ("Zurich", "Zurich", "Switzerland", 47.4582, 8.5555, "Europe/Zurich"),
    "GVA": ("Geneva", "Geneva", "Switzerland", 46.2381, 6.1090, "Europe/Zurich"),
    "VIE": ("Vienna International", "Vienna", "Austria", 48.1103, 16.5697, "Europe/Vienna"),
    "MAD": ("Adolfo Suarez Madrid-Barajas", "Madrid", "Spain", 40.4983, -3.5676, "Europe/Madrid"),
    "BCN": ("Barcelona El Prat", "Barcelona", "Spain", 41.2974, 2.0833, "Europe/Madrid"),
    "LIS": ("Lisbon Humberto Delgado", "Lisbon", "Portugal", 38.7742, -9.1342, "Europe/Lisbon"),
    "FCO": ("Rome Fiumicino", "Rome", "Italy", 41.8003, 12.2389, "Europe/Rome"),
    "MXP": ("Milan Malpensa", "Milan", "Italy", 45.6301, 8.7255, "Europe/Rome"),
    "CPH": ("Copenhagen Kastrup", "Copenhagen", "Denmark", 55.6180, 12.6508, "Europe/Copenhagen"),
    "ARN": ("Stockholm Arlanda", "Stockholm", "Sweden", 59.6498, 17.9238, "Europe/Stockholm"),
    "OSL": ("Oslo Gardermoen", "Oslo", "Norway", 60.1976, 11.1004, "Europe/Oslo"),
    "HEL": ("Helsinki-Vantaa", "Helsinki", "Finland", 60.3172, 24.9633, "Europe/Helsinki"),
    "PRG": ("Vaclav Havel Prague", "Prague", "Czech Republic", 50.1008, 14.2600, "Europe/Prague"),
    "WAW": ("Warsaw Chopin", "Warsaw", "Poland", 52.1657, 20.9671, "Europe/Warsaw"),
    "ATH": ("Athens International", "Athens", "Greece", 37.9364, 23.9445, "Europe/Athens"),
    "IST": ("Istanbul", "Istanbul", "Turkey", 41.2753, 28.7519, "Europe/Istanbul"),

    # ===== MIDDLE EAST / AFRICA =====
    "DXB": ("Dubai International", "Dubai", "United Arab Emirates", 25.2532, 55.3657, "Asia/Dubai"),
    "AUH": ("Zayed International", "Abu Dhabi", "United Arab Emirates", 24.4330, 54.6511, "Asia/Dubai"),
    "DOH": ("Hamad International", "Doha", "Qatar", 25.2731, 51.6081, "Asia/Qatar"),
    "TLV": ("Ben Gurion", "Tel Aviv", "Israel", 32.0055, 34.8854, "Asia/Jerusalem"),
    "CAI": ("Cairo International", "Cairo", "Egypt", 30.1219, 31.4056, "Africa/Cairo"),
    "ADD": ("Addis Ababa Bole International", "Addis Ababa", "Ethiopia", 8.9779, 38.7993, "Africa/Addis_Ababa"),
    "NBO": ("Jomo Kenyatta International", "Nairobi", "Kenya", -1.3192, 36.9278, "Africa/Nairobi"),
    "JNB": ("O. R. Tambo International", "Johannesburg", "South Africa", -26.1392, 28.2460, "Africa/Johannesburg"),
    "CPT": ("Cape Town International", "Cape Town", "South Africa", -33.9715, 18.6021, "Africa/Johannesburg"),
    "CMN": ("Mohammed V International", "Casablanca", "Morocco", 33.3675, -7.5898, "Africa/Casablanca"),

    # ===== ASIA / PACIFIC =====
    "DEL": ("Indira Gandhi International", "Delhi", "India", 28.5562, 77.1000, "Asia/Kolkata"),
    "BOM": ("Chhatrapati Shivaji Maharaj International", "Mumbai", "India", 19.0896, 72.8656, "Asia/Kolkata"),
    "BLR": ("Kempegowda International", "Bengaluru", "India", 13.1986, 77.7066, "Asia/Kolkata"),
    "CCU": ("Netaji Subhas Chandra Bose International", "Kolkata", "India", 22.6547, 88.4467, "Asia/Kolkata"),
    "SIN": ("Singapore Changi", "Singapore", "Singapore", 1.3644, 103.9915, "Asia/Singapore"),
    "KUL": ("Kuala Lumpur International", "Kuala Lumpur", "Malaysia", 2.7456, 101.7099, "Asia/Kuala_Lumpur"),
    "BKK": ("Suvarnabhumi", "Bangkok", "Thailand", 13.6900, 100.7501, "Asia/Bangkok"),
    "HKG": ("Hong Kong International", "Hong Kong", "Hong Kong", 22.3080, 113.9185, "Asia/Hong_Kong"),
    "TPE": ("Taiwan Taoyuan International", "Taipei", "Taiwan", 25.0797, 121.2342, "Asia/Taipei"),
    "MNL": ("Ninoy Aquino International", "Manila", "Philippines", 14.5086, 121.0194, "Asia/Manila"),
    "PEK": ("Beijing Capital International", "Beijing", "China", 40.0799, 116.6031, "Asia/Shanghai"),
    "PVG": ("Shanghai Pudong International", "Shanghai", "China", 31.1443, 121.8083, "Asia/Shanghai"),
    "ICN": ("Incheon International", "Seoul", "South Korea", 37.4602, 126.4407, "Asia/Seoul"),
    "NRT": ("Narita International", "Tokyo", "Japan", 35.7719, 140.3928, "Asia/Tokyo"),
    "HND": ("Tokyo Haneda", "Tokyo", "Japan", 35.5494, 139.7798, "Asia/Tokyo"),
    "SYD": ("Sydney Kingsford Smith", "Sydney", "Australia", -33.9399, 151.1753, "Australia/Sydney"),
    "MEL": ("Melbourne Tullamarine", "Melbourne", "Australia", -37.6690, 144.8410, "Australia/Melbourne"),
    "AKL": ("Auckland", "Auckland", "New Zealand", -37.0082, 174.7850, "Pacific/Auckland"),
}
AIRPORTS = MappingProxyType(_AIRPORTS)


# ===== AIRLINES =====
# code: (name, alliance, country)
_AIRLINES = {
    # ===== SKYTEAM =====
    "DL": ("Delta Air Lines", "SkyTeam", "United States"),
    "AF": ("Air France", "SkyTeam", "France"),
    "KL": ("KLM Royal Dutch Airlines", "SkyTeam", "Netherlands"),
    "AM": ("Aeromexico", "SkyTeam", "Mexico"),
    "KE": ("Korean Air", "SkyTeam", "South Korea"),
    "VS": ("Virgin Atlantic", "SkyTeam", "United Kingdom"),
    "SK": ("SAS Scandinavian Airlines", "SkyTeam", "Sweden"),

    # ===== STAR ALLIANCE =====
    "UA": ("United Airlines", "Star Alliance", "United States"),
    "LH": ("Lufthansa", "Star Alliance", "Germany"),
    "LX": ("SWISS", "Star Alliance", "Switzerland"),
    "OS": ("Austrian Airlines", "Star Alliance", "Austria"),
    "SN": ("Brussels Airlines", "Star Alliance", "Belgium"),
    "AC": ("Air Canada", "Star Alliance", "Canada"),
    "SQ": ("Singapore Airlines", "Star Alliance", "Singapore"),
    "NH": ("All Nippon Airways", "Star Alliance", "Japan"),
    "TK": ("Turkish Airlines", "Star Alliance", "Turkey"),
    "LO": ("LOT Polish Airlines", "Star Alliance", "Poland"),
    "TP": ("TAP Air Portugal", "Star Alliance", "Portugal"),
    "AI": ("Air India", "Star Alliance", "India"),

    # ===== ONEWORLD =====
    "AA": ("American Airlines", "oneworld", "United States"),
    "BA": ("British Airways", "oneworld", "United Kingdom"),
    "IB": ("Iberia", "oneworld", "Spain"),
    "AY": ("Finnair", "oneworld", "Finland"),
    "QR": ("Qatar Airways", "oneworld", "Qatar"),
    "CX": ("Cathay Pacific", "oneworld", "Hong Kong"),
    "JL": ("Japan Airlines", "oneworld", "Japan"),
    "QF": ("Qantas", "oneworld", "Australia"),
    "AS": ("Alaska Airlines", "oneworld", "United States"),

    # ===== UNALIGNED =====
    "EK": ("Emirates", None, "United Arab Emirates"),
    "EY": ("Etihad Airways", None, "United Arab Emirates"),
    "LA": ("LATAM Airlines", None, "Chile"),
    "B6": ("JetBlue Airways", None, "United States"),
    "WN": ("Southwest Airlines", None, "United States"),
    "6E": ("IndiGo", None, "India"),
}
AIRLINES = MappingProxyType(_AIRLINES)


# ===== EQUIPMENT CODES =====
AIRCRAFT_TYPES = MappingProxyType({
    "319": "Airbus A319",      "320": "Airbus A320",      "321": "Airbus A321",
    "32N": "Airbus A320neo",   "32Q": "Airbus A321neo",
    "332": "Airbus A330-200",  "333": "Airbus A330-300",  "339": "Airbus A330-900",
    "343": "Airbus A340-300",  "346": "Airbus A340-600",
    "359": "Airbus A350-900",  "351": "Airbus A350-1000", "388": "Airbus A380-800",
    "737": "Boeing 737",       "73G": "Boeing 737-700",   "738": "Boeing 737-800",
    "73H": "Boeing 737-800",   "739": "Boeing 737-900",   "7M8": "Boeing 737 MAX 8",
    "752": "Boeing 757-200",   "763": "Boeing 767-300",   "764": "Boeing 767-400",
    "772": "Boeing 777-200",   "773": "Boeing 777-300",   "77W": "Boeing 777-300ER",
    "77L": "Boeing 777-200LR", "744": "Boeing 747-400",   "748": "Boeing 747-8",
    "788": "Boeing 787-8",     "789": "Boeing 787-9",     "78J": "Boeing 787-10",
    "E70": "Embraer E170",     "E75": "Embraer E175",     "E90": "Embraer E190",
    "CR7": "Bombardier CRJ-700", "CR9": "Bombardier CRJ-900",
    "DH4": "De Havilland Dash 8-400", "AT7": "ATR 72",
})


# ===== KNOWN ROUTES =====
# Used only when airport reference data cannot be reached.
# route: (great-circle km, scheduled minutes)
ROUTE_TABLE = MappingProxyType({
    "JFKLHR": (5540, 435), "LHRJFK": (5540, 510),
    "EWRFRA": (6200, 440), "FRAEWR": (6200, 510),
    "LGAFRA": (6210, 525), "FRALGA": (6210, 525),
    "EWRLGA": (27, 25),    "LGAEWR": (27, 25),
    "EWRBOS": (320, 90),   "BOSEWR": (320, 90),
    "BOSLGA": (300, 80),   "LGABOS": (300, 80),
    "LAXNRT": (8750, 690), "NRTLAX": (8750, 585),
    "ORDLHR": (6340, 495), "LHRORD": (6340, 570),
    "MIAGRU": (6550, 525), "GRUMIA": (6550, 510),
    "DXBJFK": (11020, 870), "JFKDXB": (11020, 765),
    "FRAIAD": (6530, 510), "IADFRA": (6530, 465),
    "FRAMUC": (300, 75),   "MUCFRA": (300, 75),
    "MUCIAD": (7130, 555), "IADMUC": (7130, 525),
    "FRACDG": (450, 90),   "CDGFRA": (450, 90),
})
