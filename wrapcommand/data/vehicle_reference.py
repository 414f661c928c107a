"""Bundled vehicle reference data.

QUICK_REFERENCE is the model-keyed table used by chat quoting. Order matters:
the substring scan takes the first key that matches.

VEHICLE_DIMENSIONS holds measured panel areas, one vehicle per line:
make|model|years|side|back|hood|roof|total  (years "-" means any year)
"""

QUICK_REFERENCE = (
    # Compact cars
    ("", "prius", 175), ("", "civic", 175), ("", "corolla", 175), ("", "sentra", 175),
    ("", "versa", 175), ("", "yaris", 175), ("", "fit", 175), ("", "accent", 175),
    ("", "rio", 175), ("", "mirage", 175),
    # Midsize sedans
    ("", "camry", 200), ("", "accord", 200), ("", "altima", 200), ("", "sonata", 200),
    ("", "mazda6", 200), ("", "legacy", 200), ("", "jetta", 200), ("", "passat", 200),
    ("", "optima", 200), ("", "k5", 200),
    # Full-size sedans
    ("", "avalon", 210), ("", "maxima", 210), ("Chrysler", "300", 210), ("", "charger", 210),
    ("", "impala", 210), ("", "taurus", 210),
    # Compact SUVs
    ("", "rav4", 200), ("Honda", "crv", 200), ("Honda", "cr-v", 200), ("", "tucson", 200),
    ("", "rogue", 200), ("", "forester", 200), ("", "crosstrek", 200), ("Mazda", "cx5", 200),
    ("Mazda", "cx-5", 200), ("", "tiguan", 200), ("", "sportage", 200), ("", "seltos", 200),
    ("", "kona", 200), ("", "venue", 200),
    # Midsize SUVs
    ("", "highlander", 225), ("", "pilot", 225), ("", "explorer", 225), ("", "pathfinder", 225),
    ("", "4runner", 225), ("Mazda", "cx9", 225), ("Mazda", "cx-9", 225), ("", "atlas", 225),
    ("", "palisade", 225), ("", "telluride", 225), ("", "sorento", 225),
    # Full-size trucks
    ("Ford", "f150", 250), ("Ford", "f-150", 250), ("", "silverado", 250), ("", "sierra", 250),
    ("", "ram", 250), ("", "tundra", 250), ("", "titan", 250), ("Ford", "f250", 275),
    ("Ford", "f-250", 275), ("Ford", "f350", 275), ("Ford", "f-350", 275),
    # Large SUVs
    ("", "tahoe", 275), ("", "expedition", 275), ("", "suburban", 300), ("", "yukon", 275),
    ("", "sequoia", 275), ("", "armada", 275), ("", "escalade", 275), ("", "navigator", 275),
    # Cargo vans
    ("Ford", "transit", 350), ("", "sprinter", 350), ("", "promaster", 350),
    ("Chevrolet", "express", 300), ("GMC", "savana", 300),
    # Sports cars
    ("", "mustang", 180), ("", "camaro", 180), ("", "challenger", 190), ("", "corvette", 175),
    ("", "supra", 170), ("Nissan", "370z", 170), ("Toyota", "86", 160), ("", "brz", 160),
    ("", "miata", 150), ("Mazda", "mx5", 150),
    # Compact trucks
    ("", "tacoma", 200), ("", "colorado", 200), ("", "ranger", 200), ("", "maverick", 180),
    ("", "frontier", 200),
    # Jeeps
    ("Jeep", "wrangler", 200), ("Jeep", "gladiator", 220), ("Jeep", "cherokee", 200),
    ("Jeep", "grand cherokee", 220),
    # SUVs
    ("", "bronco", 200), ("", "defender", 225), ("Land Rover", "range rover", 250),
)

VEHICLE_DIMENSIONS = """
Chevrolet|Equinox|2005-2008|79.6|28.1|18.8|38.1|244.2
Chevrolet|Equinox|2009-2017|72.6|27.4|22.7|31.9|227.2
Chevrolet|Equinox|2018-2020|79.2|29.7|24.1|39.7|251.9
Chevrolet|Impala|2006-2013|79.8|25.8|25.7|25.1|236.2
Chevrolet|Impala|2014-2020|79.8|27.1|26.9|29.7|243.3
Chevrolet|Suburban|2015-2020|99.7|33.7|24.8|55.9|311.3
Chevrolet|Tahoe|2007-2014|92.4|35.9|24.3|53.8|299.8
Chevrolet|Tahoe|2015-2020|87.7|33.2|24.6|51.5|288.2
Chevrolet|Silverado - 4 door 5'5 box|2014-2018|96.4|35.3|31.3|35.9|295.4
Chevrolet|Silverado - 4 door 6'5 box|2014-2018|100.7|35.3|31.3|35.9|304.0
Chevrolet|Express Vans - Panel - 135" WB|2003-2020|107.0|36.5|14.8|74.9|340.2
Chevrolet|Express Vans - Panel - 155" WB|2003-2020|121.8|36.5|14.8|81.7|376.6
Dodge|Challenger|2008-2020|76.8|26.7|29.0|24.5|233.4
Dodge|Charger|2011-2020|79.9|27.1|25.1|27.3|239.0
Dodge|Ram 1500 - Crew Cab|2009-2018|100.2|34.7|28.0|33.9|302.7
Dodge|Ram 1500 - Quad Cab|2009-2018|96.1|34.7|28.0|30.0|290.6
Dodge|Ram 2500 - Crew Cab|2010-2018|101.1|34.8|30.2|34.5|306.9
Dodge|Ram Promaster 1500 - 136"|2013-2020|104.0|48.9|22.9|54.7|352.0
Dodge|Ram Promaster 2500 - 159"|2013-2020|116.3|50.9|22.9|60.2|387.9
Dodge|Ram Promaster City - Cargo|2015-2020|79.9|29.9|18.6|38.5|248.5
Ford|Escape|2013-2019|77.5|28.5|20.1|36.7|233.2
Ford|Escape|2020-2023|78.4|29.5|19.5|37.9|237.4
Ford|Expedition|2018-2020|96.5|34.3|25.1|53.6|305.1
Ford|Expedition Max|2018-2020|105.0|34.3|25.1|62.1|326.0
Ford|Explorer|2011-2019|82.5|29.5|22.3|44.1|259.2
Ford|Explorer|2020-2023|84.7|30.0|23.0|45.5|266.9
Ford|F-150 - Crew Cab - 5.5ft box|2009-2014|99.5|35.0|30.5|33.5|301.2
Ford|F-150 - Crew Cab - 5.5ft box|2015-2020|101.0|35.2|30.5|34.0|305.2
Ford|F-150 - Crew Cab - 6.5ft box|2015-2020|108.4|35.2|30.5|34.0|320.8
Ford|F-150 - Ext Cab - 6.5ft box|2015-2020|100.0|35.2|30.5|30.0|294.2
Ford|F-150 - Regular Cab - 8ft box|2015-2020|97.5|35.2|30.5|19.5|291.3
Ford|F-150 - Lightning|2022-2023|102.1|35.6|30.9|34.5|308.9
Ford|F-250 - Crew Cab - 6.75ft box|2017-2020|108.3|36.6|32.9|34.5|320.7
Ford|F-250 - Supercab - 8ft box|2017-2020|114.9|36.6|32.9|29.9|325.1
Ford|Transit - 130" WB - Low Roof|2015-2020|95.5|39.9|19.5|58.9|305.5
Ford|Transit - 148" WB - High Roof|2015-2020|109.9|52.5|19.5|68.9|366.7
Ford|Transit - 148" WB - Extended - High Roof|2015-2020|118.5|52.5|19.5|78.5|393.0
Ford|Transit Connect Cargo - LWB|2014-2020|78.5|29.5|17.5|39.5|248.0
Acura|MDX|2014-2020|76.4|29.9|23.8|42.5|248.9
Acura|RDX|2007-2012|75.8|28.8|19.6|37.3|237.3
Audi|Q7|2007-2008|86.8|31.1|25.8|45.6|276.2
Austin|Mini Cooper|-|42.9|22.8|10.7|24.7|144.0
BMW|X5|2000-2008|71.9|29.2|18.4|31.5|222.9
BMW|Z3 Convertible|1999-2002|49.2|16.5|18.4|0|133.3
Western Star|4900|2011-2020|165.5|76.5|40.5|105.5|588.5
Western Star|5700|2011-2020|175.5|80.5|42.5|115.5|628.5
"""
