"""
Federal contracting lookup tables: set-aside tokens, SBA certification flags,
and the state FIPS → USPS codes USAspending expects for place of performance.
"""

# Set-aside tokens accepted by the partner search
VALID_SET_ASIDES: list[str] = [
    "NONE",
    "8(a)",
    "WOSB",
    "VOSB",
    "SDVOSB",
    "HUBZone",
    "EDWOSB",
    "SDB",
    "SBA",
]

SET_ASIDE_LABELS = {
    "NONE": "Full & Open",
    "8(a)": "8(a) Business Development",
    "WOSB": "Women-Owned Small Business",
    "VOSB": "Veteran-Owned Small Business",
    "SDVOSB": "Service-Disabled Veteran-Owned Small Business",
    "HUBZone": "HUBZone",
    "EDWOSB": "Economically Disadvantaged Women-Owned Small Business",
    "SDB": "Small Disadvantaged Business",
    "SBA": "Small Business",
}

# Contracts only (definitive, purchase order, delivery order, BPA call)
CONTRACT_AWARD_TYPE_CODES = ["A", "B", "C", "D"]

AWARD_SEARCH_FIELDS = ["Recipient Name", "recipient_id", "Recipient UEI", "Award Amount"]

# SBA search result flag → certification label, in reporting order
SBA_CERTIFICATION_FLAGS: list[tuple[str, str]] = [
    ("active_8a_boolean", "8(a)"),
    ("active_wosb_boolean", "WOSB"),
    ("active_edwosb_boolean", "EDWOSB"),
    ("active_vosb_boolean", "VOSB"),
    ("active_sdvosb_boolean", "SDVOSB"),
    ("active_hz_boolean", "HUBZone"),
]

# Dynamic Small Business Search body; searchProfiles.searchTerm is filled per lookup
SBA_REQUEST_TEMPLATE = {
    "searchProfiles": {"searchTerm": ""},
    "location": {"states": [], "zipCodes": [], "counties": [], "districts": [], "msas": []},
    "sbaCertifications": {"activeCerts": [], "isPreviousCert": False, "operatorType": "Or"},
    "naics": {"codes": [], "isPrimary": False, "operatorType": "Or"},
    "selfCertifications": {"certifications": [], "operatorType": "Or"},
    "keywords": {"list": [], "operatorType": "Or"},
    "lastUpdated": {"date": {"label": "Anytime", "value": "anytime"}},
    "samStatus": {"isActiveSAM": False},
    "qualityAssuranceStandards": {"qas": []},
    "bondingLevels": {
        "constructionIndividual": "",
        "constructionAggregate": "",
        "serviceIndividual": "",
        "serviceAggregate": "",
    },
    "businessSize": {"relationOperator": "at-least", "numberOfEmployees": ""},
    "annualRevenue": {"relationOperator": "at-least", "annualGrossRevenue": ""},
    "entityDetailId": "",
}

STATE_FIPS_TO_USPS = {
    "01": "AL", "02": "AK", "04": "AZ", "05": "AR", "06": "CA", "08": "CO",
    "09": "CT", "10": "DE", "11": "DC", "12": "FL", "13": "GA", "15": "HI",
    "16": "ID", "17": "IL", "18": "IN", "19": "IA", "20": "KS", "21": "KY",
    "22": "LA", "23": "ME", "24": "MD", "25": "MA", "26": "MI", "27": "MN",
    "28": "MS", "29": "MO", "30": "MT", "31": "NE", "32": "NV", "33": "NH",
    "34": "NJ", "35": "NM", "36": "NY", "37": "NC", "38": "ND", "39": "OH",
    "40": "OK", "41": "OR", "42": "PA", "44": "RI", "45": "SC", "46": "SD",
    "47": "TN", "48": "TX", "49": "UT", "50": "VT", "51": "VA", "53": "WA",
    "54": "WV", "55": "WI", "56": "WY", "60": "AS", "66": "GU", "69": "MP",
    "72": "PR", "78": "VI",
}
