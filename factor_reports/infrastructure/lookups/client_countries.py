"""Bundled client code to country table used by the Volume link tables."""

CLIENT_COUNTRIES: dict[str, str] = {
    "555W": "Argentina",
    "01H2": "Argentina",
    "6149": "Armenia",
    "01Y1": "Armenia",
    "476D": "Austria",
    "5556": "Austria",
    "0159": "Brazil",
    "540J": "Brazil",
    "626S": "Brazil",
    "01D2": "Brazil",
    "01Q1": "Brazil",
    "0146": "Chile",
    "5574": "Chile",
    "5577": "Chile",
    "622W": "Chile",
    "9732": "Chile",
    "01J2": "Chile",
    "0226": "China",
    "0960": "China",
    "406P": "China",
    "424W": "China",
    "453P": "China",
    "5004": "China",
    "625G": "China",
    "406M": "Costa Rica",
    "0116": "Dom Rep",
    "0084": "Egypt",
    "0768": "Egypt",
    "520Q": "Egypt",
    "01X1": "Egypt",
    "01D3": "Egypt",
    "0152": "Greece",
    "0319": "Greece",
    "551B": "Greece",
    "01A3": "Greece",
    "01C3": "Greece",
    "01L2": "Greece",
    "01W1": "Greece",
    "530A": "Hong Kong",
    "7287": "Hong Kong",
    "0124": "India",
    "417S": "India",
    "622Y": "India",
    "01A1": "India",
    "01C1": "India",
    "01D1": "India",
    "01U1": "India",
    "0118": "Indonesia",
    "625P": "Italy",
    "626B": "Italy",
    "5003": "Japan",
    "7292": "Japan",
    "01X2": "Japan",
    "01E3": "Japan",
    "01N1": "Japan",
    "618B": "Malta",
    "445Q": "Mexico",
    "01Q3": "Mexico",
    "486K": "Mexico",
    "0214": "Moldova",
    "1070": "Moldova",
    "01B2": "Moldova",
    "0150": "Moroco",
    "01A2": "Morocco",
    "0126": "Netherlands",
    "541Q": "Norway",
    "622N": "Norway",
    "0208": "Peru",
    "0259": "Peru",
    "416S": "Peru",
    "470G": "Peru",
    "551L": "Peru",
    "564T": "Peru",
    "01F2": "Peru",
    "01K2": "Peru",
    "0227": "Romania",
    "443W": "Romania",
    "9590": "Romania",
    "01C2": "Romania",
    "01M1": "Romania",
    "413W": "Russia",
    "0376": "Serbia",
    "0138": "Singapore",
    "6654": "Singapore",
    "01V1": "Singapore",
    "553T": "Spain",
    "625W": "Spain",
    "01S1": "Spain",
    "01R3": "Spain",
    "0115": "Taiwan",
    "0225": "Taiwan",
    "405M": "Taiwan",
    "432D": "Taiwan",
    "5020": "Taiwan",
    "550L": "Taiwan",
    "622H": "Taiwan",
    "624X": "Taiwan",
    "625E": "Taiwan",
    "626K": "Taiwan",
    "01J3": "Taiwan",
    "01T2": "Taiwan",
    "01T3": "Taiwan",
    "01K3": "Taiwan",
    "0153": "Thailand",
    "429D": "Thailand",
    "0103": "Turkey",
    "0390": "Turkey",
    "0675": "Turkey",
    "413L": "Turkey",
    "421C": "Turkey",
    "428T": "Turkey",
    "473B": "Turkey",
    "550J": "Turkey",
    "6050": "Turkey",
    "623F": "Turkey",
    "626P": "Turkey",
    "01Z3": "Turkey",
    "01F3": "Turkey",
    "01E2": "Turkey",
    "01B3": "Turkey",
    "01R1": "Turkey",
    "01R2": "Turkey",
    "01L1": "Turkey",
    "01U3": "Turkey",
    "14U1": "U",
    "622S": "UK",
    "550B": "Uruguay",
    "0123": "Vietnam",
    "505Q": "Vietnam",
}
