"""
Holiday-type taxonomy and destination gazetteer.

Pure data tables consumed by the keyword index. Extend a category or a
destination here; scoring logic in keyword_index.py does not change.

Holiday types carry two keyword tiers:
  primary    strong signal  (+15 per hit)
  secondary  weak signal    (+5 per hit)

Destinations map a canonical name to alias substrings (cities, demonyms,
landmarks). The first alias found in a package's keyword text tags the
package with that destination.
"""

from typing import Dict, List

HOLIDAY_TYPE_KEYWORDS: Dict[str, Dict[str, List[str]]] = {
    "Beach": {
        "primary": ["beach", "beaches", "beachfront", "seaside", "oceanfront", "sandy", "coastline"],
        "secondary": [
            "ocean", "sea", "coastal", "tropical", "island", "resort", "sun", "swimming",
            "snorkeling", "diving", "lagoon", "reef", "palm", "paradise", "relaxation", "sunset",
        ],
    },
    "Adventure": {
        "primary": ["adventure", "trekking", "hiking", "climbing", "rafting", "kayaking", "expedition"],
        "secondary": [
            "outdoor", "active", "extreme", "adrenaline", "zipline", "jungle", "mountain", "trail",
            "explore", "excursion", "challenge", "wilderness", "camping", "biking", "cycling",
        ],
    },
    "Cultural": {
        "primary": ["cultural", "culture", "heritage", "historical", "museum", "temple", "ancient"],
        "secondary": [
            "history", "art", "architecture", "ruins", "tradition", "local", "authentic", "historic",
            "monastery", "palace", "cathedral", "church", "mosque", "shrine", "archaeological",
            "civilization", "customs", "festival",
        ],
    },
    "City Break": {
        "primary": ["city break", "citybreak", "city tour", "urban", "metropolitan"],
        "secondary": [
            "city", "downtown", "capital", "shopping", "nightlife", "restaurants", "skyline",
            "cosmopolitan", "market", "street", "cafe", "bars",
        ],
    },
    "Cruise": {
        "primary": ["cruise", "cruising", "ocean cruise", "sea cruise"],
        "secondary": [
            "ship", "sailing", "yacht", "boat", "ocean liner", "cabin", "port", "onboard", "deck",
            "captain", "voyage",
        ],
    },
    "River Cruise": {
        "primary": ["river cruise", "riverboat", "river boat", "barge cruise"],
        "secondary": [
            "river", "barge", "canal", "danube", "rhine", "nile", "mekong", "amazon", "douro",
            "seine", "waterway", "floating",
        ],
    },
    "Safari": {
        "primary": ["safari", "game drive", "game reserve", "wildlife reserve"],
        "secondary": [
            "big five", "savanna", "savannah", "bush", "african wildlife", "serengeti", "masai",
            "kruger", "jeep", "ranger", "lodge", "camp", "game viewing",
        ],
    },
    "Wildlife": {
        "primary": ["wildlife", "bird watching", "birding", "nature reserve", "national park"],
        "secondary": [
            "animals", "nature", "whale", "dolphin", "gorilla", "elephant", "lion", "tiger",
            "leopard", "sanctuary", "conservation", "endangered", "species", "fauna", "flora",
            "ecosystem",
        ],
    },
    "Luxury": {
        "primary": ["luxury", "luxurious", "5-star", "five star", "premium", "exclusive"],
        "secondary": [
            "boutique", "villa", "private", "vip", "spa", "wellness", "gourmet", "champagne",
            "butler", "suite", "opulent", "elegant", "refined", "indulgence", "pampering",
        ],
    },
    "Multi-Centre": {
        "primary": ["multi-centre", "multi-center", "multi centre", "twin centre", "combination tour"],
        "secondary": [
            "multiple destinations", "twin center", "two countries", "three countries", "combined",
            "circuit", "grand tour",
        ],
    },
    "Island": {
        "primary": ["island", "islands", "archipelago", "isle", "island hopping"],
        "secondary": [
            "caribbean", "maldives", "seychelles", "mauritius", "fiji", "bali", "greek islands",
            "canary", "azores", "madeira", "zanzibar", "hawaii", "polynesia", "tropical island",
        ],
    },
    "Solo Travellers": {
        "primary": ["solo", "solo traveller", "solo traveler", "single supplement", "no single supplement"],
        "secondary": ["single", "alone", "individual", "independent", "single room", "solo friendly"],
    },
    "Honeymoon": {
        "primary": ["honeymoon", "romantic", "romance", "couples"],
        "secondary": [
            "wedding", "anniversary", "love", "intimate", "secluded", "candlelit", "champagne",
            "sunset dinner", "private pool",
        ],
    },
    "Family": {
        "primary": ["family", "family-friendly", "kid-friendly", "children"],
        "secondary": ["kids", "child", "multi-generational", "theme park", "playground", "fun", "educational"],
    },
}

DESTINATION_KEYWORDS: Dict[str, List[str]] = {
    "India": [
        "india", "indian", "delhi", "mumbai", "jaipur", "kerala", "goa", "rajasthan", "taj mahal",
        "agra", "bangalore", "chennai", "golden triangle", "himalaya",
    ],
    "Maldives": ["maldives", "maldivian", "male", "atoll", "overwater", "water villa"],
    "Sri Lanka": ["sri lanka", "sri lankan", "colombo", "kandy", "sigiriya", "galle", "ceylon"],
    "Thailand": ["thailand", "thai", "bangkok", "phuket", "chiang mai", "krabi", "koh samui", "pattaya"],
    "Vietnam": ["vietnam", "vietnamese", "hanoi", "ho chi minh", "saigon", "halong", "hoi an", "mekong"],
    "Japan": ["japan", "japanese", "tokyo", "kyoto", "osaka", "mount fuji", "cherry blossom", "sakura"],
    "South Africa": ["south africa", "cape town", "johannesburg", "kruger", "garden route", "safari"],
    "Kenya": ["kenya", "kenyan", "nairobi", "masai mara", "mombasa", "amboseli", "safari"],
    "Tanzania": ["tanzania", "tanzanian", "serengeti", "zanzibar", "kilimanjaro", "ngorongoro", "safari"],
    "Egypt": ["egypt", "egyptian", "cairo", "luxor", "aswan", "nile", "pyramid", "pharaoh", "sphinx"],
    "Morocco": ["morocco", "moroccan", "marrakech", "fez", "casablanca", "sahara", "medina", "atlas"],
    "Greece": ["greece", "greek", "athens", "santorini", "mykonos", "crete", "rhodes", "acropolis"],
    "Italy": ["italy", "italian", "rome", "venice", "florence", "milan", "tuscany", "amalfi", "sicily"],
    "Spain": ["spain", "spanish", "barcelona", "madrid", "seville", "malaga", "ibiza", "canary"],
    "Portugal": ["portugal", "portuguese", "lisbon", "porto", "algarve", "madeira", "azores"],
    "Turkey": ["turkey", "turkish", "istanbul", "cappadocia", "antalya", "bodrum", "ephesus"],
    "Dubai": ["dubai", "uae", "abu dhabi", "emirates", "arabian", "burj", "desert safari"],
    "Bali": ["bali", "balinese", "ubud", "seminyak", "kuta", "indonesian"],
    "Australia": [
        "australia", "australian", "sydney", "melbourne", "queensland", "great barrier reef", "uluru",
    ],
    "New Zealand": ["new zealand", "auckland", "queenstown", "milford sound", "hobbiton", "maori"],
    "Peru": ["peru", "peruvian", "lima", "cusco", "machu picchu", "inca", "sacred valley", "amazon"],
    "Costa Rica": ["costa rica", "costa rican", "san jose", "arenal", "monteverde", "rainforest"],
    "Mexico": [
        "mexico", "mexican", "cancun", "playa del carmen", "riviera maya", "tulum", "aztec", "mayan",
    ],
    "Cuba": ["cuba", "cuban", "havana", "trinidad", "vintage cars", "salsa"],
    "Caribbean": [
        "caribbean", "jamaica", "bahamas", "barbados", "st lucia", "antigua", "aruba", "turks caicos",
    ],
}

# Storefront filter values -> taxonomy labels
HOLIDAY_TYPE_ALIASES: Dict[str, List[str]] = {
    "beach": ["Beach"],
    "adventure": ["Adventure"],
    "cultural": ["Cultural"],
    "city": ["City Break"],
    "cruise": ["Cruise", "River Cruise"],
    "honeymoon": ["Honeymoon"],
    "family": ["Family"],
    "luxury": ["Luxury"],
    "wildlife": ["Wildlife", "Safari"],
    "island": ["Island"],
    "solo": ["Solo Travellers"],
    "multi-centre": ["Multi-Centre"],
}
