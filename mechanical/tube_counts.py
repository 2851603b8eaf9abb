# =========================================================
# FILE: mechanical/tube_counts.py
# TEMA tube-count tables.
# Key: (tube OD mm, pitch mm, layout) -> {shell ID mm: (1-pass, 2-pass, 4-pass)}
# Shell IDs follow the standard pipe/plate shell series used in mechanical/geometry.py.
# The 3/4 in OD on 1 in tables are the published TEMA counts, 205-1524 mm.
# The other layouts are screening estimates with no published table behind them;
# outside the keys below, geometry.tube_count falls back to the Palen correlation.
# =========================================================

# 3/4 in OD on 15/16 in triangular pitch (estimate)
_OD19_P2381_TRI = {
    205: (40, 37, 30),
    257: (69, 64, 49),
    307: (100, 94, 84),
    337: (131, 121, 111),
    387: (170, 160, 146),
    438: (219, 205, 185),
    489: (277, 262, 242),
    540: (342, 323, 299),
    591: (412, 390, 363),
    635: (486, 462, 427),
    686: (568, 538, 501),
    737: (657, 625, 580),
    787: (751, 714, 664),
    838: (854, 812, 758),
    889: (956, 911, 849),
    940: (1069, 1020, 951),
    991: (1188, 1131, 1057),
    1067: (1390, 1323, 1237),
    1219: (1852, 1763, 1649),
    1372: (2370, 2259, 2116),
    1524: (2956, 2817, 2640),
}

# 3/4 in OD on 1 in triangular pitch (TEMA)
_OD19_P254_TRI = {
    205: (32, 30, 24),
    257: (56, 52, 40),
    307: (81, 76, 68),
    337: (106, 98, 90),
    387: (138, 130, 118),
    438: (177, 166, 150),
    489: (224, 212, 196),
    540: (277, 262, 242),
    591: (334, 316, 294),
    635: (394, 374, 346),
    686: (460, 436, 406),
    737: (532, 506, 470),
    787: (608, 578, 538),
    838: (692, 658, 614),
    889: (774, 738, 688),
    940: (866, 826, 770),
    991: (962, 916, 856),
    1067: (1126, 1072, 1002),
    1219: (1500, 1428, 1336),
    1372: (1920, 1830, 1714),
    1524: (2394, 2282, 2138),
}

# 3/4 in OD on 1 in square pitch (TEMA)
_OD19_P254_SQ = {
    205: (26, 24, 16),
    257: (45, 40, 32),
    307: (64, 60, 52),
    337: (81, 76, 68),
    387: (109, 102, 90),
    438: (142, 130, 118),
    489: (178, 166, 150),
    540: (220, 206, 188),
    591: (265, 250, 228),
    635: (314, 296, 270),
    686: (365, 346, 316),
    737: (422, 400, 366),
    787: (481, 456, 420),
    838: (549, 520, 478),
    889: (613, 584, 536),
    940: (685, 654, 600),
    991: (762, 724, 666),
    1067: (889, 848, 778),
    1219: (1182, 1128, 1040),
    1372: (1514, 1446, 1334),
    1524: (1889, 1802, 1662),
}

# 1 in OD on 1-1/4 in triangular pitch (estimate; 1067-1524 rows scaled with (Ds/991)^2)
_OD254_P3175_TRI = {
    205: (21, 16, 16),
    257: (32, 32, 26),
    307: (55, 52, 48),
    337: (68, 66, 58),
    387: (91, 86, 80),
    438: (131, 118, 106),
    489: (163, 152, 140),
    540: (199, 188, 170),
    591: (241, 232, 212),
    635: (294, 282, 256),
    686: (349, 334, 302),
    737: (397, 376, 338),
    787: (472, 454, 430),
    838: (538, 522, 486),
    889: (608, 592, 562),
    940: (674, 664, 632),
    991: (766, 736, 700),
    1067: (888, 853, 811),
    1219: (1159, 1114, 1059),
    1372: (1468, 1411, 1342),
    1524: (1812, 1741, 1655),
}

# 1 in OD on 1-1/4 in square pitch (estimate; 1067-1524 rows scaled with (Ds/991)^2)
_OD254_P3175_SQ = {
    205: (21, 16, 14),
    257: (32, 32, 26),
    307: (48, 45, 40),
    337: (61, 56, 52),
    387: (81, 76, 68),
    438: (112, 112, 96),
    489: (138, 132, 128),
    540: (177, 166, 158),
    591: (213, 208, 192),
    635: (260, 252, 238),
    686: (300, 288, 278),
    737: (341, 326, 300),
    787: (406, 398, 380),
    838: (465, 460, 432),
    889: (522, 518, 488),
    940: (596, 574, 562),
    991: (665, 644, 624),
    1067: (771, 747, 723),
    1219: (1006, 974, 944),
    1372: (1275, 1234, 1196),
    1524: (1573, 1523, 1476),
}

TUBE_COUNT_TABLES = {
    (19.05, 23.81, "triangular"): _OD19_P2381_TRI,
    (19.05, 25.40, "triangular"): _OD19_P254_TRI,
    (19.05, 25.40, "square"): _OD19_P254_SQ,
    (25.40, 31.75, "triangular"): _OD254_P3175_TRI,
    (25.40, 31.75, "square"): _OD254_P3175_SQ,
}

PASS_COLUMNS = (1, 2, 4)
