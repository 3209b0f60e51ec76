"""
Shared fixtures: a small county reference database written to tmp_path.

Counties:
  01089 Madison County, AL    — ZIPs 35801, 35802 (two points, averaged)
  01083 Limestone County, AL  — ZIP 35611, ~25 miles west
  01103 (no name row)         — ZIP 35601, ~26 miles west
  25013 Hampden County, MA    — ZIP 01001 (stored unpadded as 1001)
  99001 (no coordinates)      — ZIP 99999
"""

from pathlib import Path

import pytest

from county_index import CountyIndex

ZIP_COUNTY_CSV = """ZIP,COUNTY,USPS_ZIP_PREF_CITY,USPS_ZIP_PREF_STATE
35801,01089,HUNTSVILLE,AL
35802,01089,HUNTSVILLE,AL
35611,01083,ATHENS,AL

35601,01103,DECATUR,AL
1001,25013,AGAWAM,MA
35801,01083,HUNTSVILLE,AL
99999,99001,NOWHERE,AL
"""

ZCTA_CSV = """ZCTA5CE20,GEOID20,CLASSFP20,MTFCC20,FUNCSTAT20,ALAND20,AWATER20,INTPTLAT20,INTPTLON20
35801,35801,B5,G6350,S,52173590,1063540,+34.7251000,-086.5667000
35802,35802,B5,G6350,S,48213012,318722,+34.6685000,-086.5560000
35611,35611,B5,G6350,S,433081229,3618104,+34.7731000,-086.9865000
35601,35601,B5,G6350,S,240162347,11004311,+34.5882000,-087.0000000
01001,01001,B5,G6350,S,29731610,2118827,+42.0629000,-072.6259000
35899,35899,B5,G6350,S,1,1,abc,-086.6000000
12345,12345,B5
"""

COUNTY_ADJACENCY_TXT = (
    '"Madison County, AL"\t01089\t"Madison County, AL"\t01089\n'
    '"Madison County, AL"\t01089\t"Limestone County, AL"\t01083\n'
    '\t\t"Morgan County, AL"\t01103\n'
    '"Limestone County, AL"\t01083\t"Limestone County, AL"\t01083\n'
    '"Hampden County, MA"\t25013\t"Hampden County, MA"\t25013\n'
    '"Nowhere"\t99001\t"Nowhere"\t99001\n'
)


def write_county_db(directory: Path) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "ZIP_COUNTY_062025.csv").write_text(ZIP_COUNTY_CSV, encoding="utf-8")
    (directory / "tl_2020_us_zcta520.csv").write_text(ZCTA_CSV, encoding="utf-8")
    (directory / "county_adjacency.txt").write_text(COUNTY_ADJACENCY_TXT, encoding="utf-8")
    return directory


@pytest.fixture
def county_db_dir(tmp_path: Path) -> Path:
    return write_county_db(tmp_path / "county_db")


@pytest.fixture
def county_index(county_db_dir: Path) -> CountyIndex:
    return CountyIndex(county_db_dir)
