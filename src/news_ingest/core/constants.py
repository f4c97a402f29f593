from __future__ import annotations

from types import MappingProxyType

# Provenance tags written to ArticleRecord.created_by
CREATED_BY_NEWSAPI = "newsapi"
CREATED_BY_RSS = "rss"
CREATED_BY_SCRAPE = "scrape"
CREATED_BY_TWITTER = "twitter"
CREATED_BY_MANUAL = "manual"

LANG_TELUGU = "te"
LANG_ENGLISH = "en"

DEFAULT_REGION = "AP"
DEFAULT_TITLE = "Untitled"
DEFAULT_IMAGE_URL = "https://placehold.co/800x450/png?text=News"

# Automated records are visible at once; manual entries start as drafts.
AUTOMATED_IS_PUBLISHED_DEFAULT = True
MANUAL_IS_PUBLISHED_DEFAULT = False

DEDUPE_LOOKBACK_HOURS = 12
TITLE_SIMILARITY_THRESHOLD = 0.6

TELUGU_SOURCE_NAMES: tuple[str, ...] = (  # case-insensitive substring match on the source name
    "sakshi",
    "eenadu",
    "andhra jyothy",
    "andhrajyothy",
    "namasthe telangana",
    "ntv telugu",
    "tv9 telugu",
    "v6 velugu",
    "prajasakti",
    "vaartha",
    "telugu",
)

CATEGORY_KEYWORDS = MappingProxyType({
    "politics": (
        # English
        "government", "minister", "election", "parliament", "politics", "leader", "democracy", "bill",
        "law", "state", "party", "vote", "campaign", "assembly",
        # Telugu
        "ప్రభుత్వం", "మంత్రి", "ఎన్నికలు", "పార్లమెంట్", "రాజకీయాలు", "నాయకుడు", "ప్రజాస్వామ్యం", "బిల్లు",
        "చట్టం", "రాష్ట్రం", "పార్టీ", "ఓటు", "ప్రచారం", "అసెంబ్లీ",
    ),
    "business": (
        "business", "market", "stock", "finance", "economy", "company", "industry", "investment", "trade",
        "growth", "sensex", "nifty", "shares", "rupee", "dollar",
        "వ్యాపారం", "మార్కెట్", "స్టాక్", "ఆర్థిక", "ఆర్థిక వ్యవస్థ", "కంపెనీ", "పరిశ్రమ", "పెట్టుబడి", "వాణిజ్యం",
        "వృద్ధి", "సెన్సెక్స్", "నిఫ్టీ", "షేర్లు", "రూపాయి", "డాలర్",
    ),
    "sports": (
        "cricket", "football", "tennis", "match", "tournament", "sports", "athlete", "olympics", "medal",
        "score", "victory", "team", "player", "league", "champion",
        "క్రికెట్", "ఫుట్‌బాల్", "టెన్నిస్", "మ్యాచ్", "టోర్నమెంట్", "క్రీడలు", "అథ్లెట్", "ఒలింపిక్స్", "పతకం",
        "స్కోరు", "విజయం", "జట్టు", "ఆటగాడు", "ఛాంపియన్",
    ),
    "technology": (
        "tech", "ai", "software", "app", "startup", "technology", "internet", "data", "device", "cloud",
        "gadget", "innovation", "digital", "phone", "laptop",
        "టెక్", "ఏఐ", "సాఫ్ట్‌వేర్", "యాప్", "స్టార్టప్", "సాంకేతికత", "ఇంటర్నెట్", "డేటా", "పరికరం", "క్లౌడ్",
        "గాడ్జెట్", "ఆవిష్కరణ", "డిజిటల్", "ఫోన్",
    ),
    "crime": (
        "crime", "police", "arrest", "theft", "investigation", "case", "court", "accused", "suspect",
        "murder", "robbery", "fraud", "jailed",
        "నేరం", "పోలీస్", "అరెస్ట్", "దొంగతనం", "విచారణ", "కేసు", "కోర్టు", "నిందితుడు", "హత్య", "దోపిడీ",
        "మోసం", "జైలు",
    ),
    "entertainment": (
        "entertainment", "cinema", "movie", "film", "review", "release", "box office", "celebrity",
        "hollywood", "bollywood", "tollywood", "kollywood", "mollywood", "sandalwood",
        # Tollywood
        "chiranjeevi", "చిరంజీవి", "balakrishna", "బాలకృష్ణ", "nagarjuna", "నాగార్జున", "venkatesh", "వెంకటేష్",
        "pawan kalyan", "పవన్ కళ్యాణ్", "mahesh babu", "మహేష్ బాబు", "prabhas", "ప్రభాస్", "allu arjun",
        "అల్లు అర్జున్", "jr. ntr", "జూ. ఎన్టీఆర్", "ram charan", "రామ్ చరణ్", "vijay devarakonda",
        "విజయ్ దేవరకొండ", "nani", "నాని", "samantha", "సమంత", "anushka shetty", "అనుష్క శెట్టి",
        "rashmika mandanna", "రష్మిక మందన్న", "pooja hegde", "పూజా హెగ్డే",
        # Bollywood
        "shah rukh khan", "షారుఖ్ ఖాన్", "salman khan", "సల్మాన్ ఖాన్", "aamir khan", "అమీర్ ఖాన్",
        "amitabh bachchan", "అమితాబ్ బచ్చన్", "akshay kumar", "అక్షయ్ కుమార్", "ranbir kapoor", "రణబీర్ కపూర్",
        "deepika padukone", "దీపికా పదుకొనే", "alia bhatt", "అలియా భట్", "priyanka chopra", "ప్రియాంక చోప్రా",
        # Kollywood / Mollywood
        "rajinikanth", "రజనీకాంత్", "kamal haasan", "కమల్ హాసన్", "vijay", "విజయ్", "ajith kumar",
        "అజిత్ కుమార్", "suriya", "సూర్య", "dhanush", "ధనుష్", "vijay sethupathi", "విజయ్ సేతుపతి",
        "mohanlal", "మోహన్ లాల్", "mammootty", "మమ్ముట్టి", "fahadh faasil", "ఫహద్ ఫాసిల్",
        "dulquer salmaan", "దుల్కర్ సల్మాన్",
        # International
        "tom cruise", "leonardo dicaprio", "dwayne johnson", "the rock", "robert downey jr.", "brad pitt",
        "will smith", "tom hanks", "scarlett johansson", "angelina jolie", "jennifer lawrence",
        "meryl streep", "chris hemsworth", "chris evans", "zendaya", "margot robbie", "cillian murphy",
        # Streaming
        "web series", "streaming", "ott", "netflix", "amazon prime", "disney+", "hotstar", "aha", "zee5",
        "series", "episode", "season",
    ),
    "international": (
        "world", "international", "global", "summit", "treaty", "war", "conflict", "diplomacy",
        "foreign policy", "united nations", "un",
        "ప్రపంచ", "అంతర్జాతీయ", "గ్లోబల్", "సమ్మిట్", "ఒప్పందం", "యుద్ధం", "సంఘర్షణ", "దౌత్యం",
        "విదేశాంగ విధానం", "ఐక్యరాజ్యసమితి",
        # Countries
        "america", "usa", "united states", "అమెరికా", "చైనా", "china", "russia", "రష్యా", "uk",
        "united kingdom", "బ్రిటన్", "japan", "జపాన్", "germany", "జర్మనీ", "france", "ఫ్రాన్స్", "canada",
        "కెనడా", "australia", "ఆస్ట్రేలియా", "pakistan", "పాకిస్తాన్", "sri lanka", "శ్రీలంక", "bangladesh",
        "బంగ్లాదేశ్", "ukraine", "ఉక్రెయిన్", "israel", "ఇజ్రాయెల్", "palestine", "పాలస్తీనా",
        # Cities
        "washington", "వాషింగ్టన్", "new york", "న్యూయార్క్", "beijing", "బీజింగ్", "moscow", "మాస్కో",
        "london", "లండన్", "tokyo", "టోక్యో", "paris", "పారిస్", "dubai", "దుబాయ్", "islamabad",
        "ఇస్లామాబాద్", "colombo", "కొలంబో", "dhaka", "ఢాకా", "kyiv", "కీవ్",
    ),
})

# Attributes tried, in order, when an <img> is found in feed HTML
IMG_SRC_ATTRS = ("src", "data-src")
