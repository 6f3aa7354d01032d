"""
Star catalog: named bright stars plus a reproducible procedural extension.

The first entries are real bright stars with literal attributes. The rest are
filler stars drawn inside constellation regions from a seeded SplitMix64
stream, so the same seed and target count always produce the same catalog on
every platform.
"""

import logging
import math
import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np

from .astrophysics import (
    StarClass,
    StarType,
    color_from_temperature,
    distance_from_magnitudes,
    light_years_to_parsecs,
    luminosity_from_magnitude,
    parsecs_to_light_years,
    radius_from_luminosity,
    star_class_from_spectral_type,
    star_type_from_spectral_type,
)
from .coordinates import HorizontalPosition, equatorial_to_horizontal, equatorial_to_unit_vector
from .rng import SplitMix64

logger = logging.getLogger(__name__)

DEFAULT_SEED = 42
DEFAULT_TARGET_COUNT = 2000

GREEK_LETTERS = (
    "α", "β", "γ", "δ", "ε", "ζ", "η", "θ", "ι", "κ", "λ", "μ",
    "ν", "ξ", "ο", "π", "ρ", "σ", "τ", "υ", "φ", "χ", "ψ", "ω",
)

# Probabilities and ranges of the procedural draw
BAYER_PROBABILITY = 0.3
BRIGHT_OVERRIDE_PROBABILITY = 0.15
RARE_BRIGHT_PROBABILITY = 0.02


class BodyKind(Enum):
    STAR = "star"
    SUN = "sun"
    MOON = "moon"
    PLANET = "planet"


@dataclass(frozen=True)
class StarRecord:
    """One catalog star (solar units for luminosity, radius and mass)."""
    name: str
    constellation: str
    spectral_type: str
    bayer: str
    ra: float                    # hours [0, 24)
    dec: float                   # degrees
    magnitude: float             # apparent visual magnitude
    absolute_magnitude: float
    distance_ly: float
    distance_pc: float
    temperature: float           # K
    radius: float
    mass: float
    luminosity: float
    star_class: StarClass
    star_type: StarType
    color: Tuple[float, float, float]

    @property
    def label(self) -> str:
        """Display label: Bayer designation when present, else the name."""
        return self.bayer or self.name

    def unit_vector(self) -> np.ndarray:
        return equatorial_to_unit_vector(self.ra, self.dec)


@dataclass
class CelestialBody:
    """A solar-system body shown on the dome (Sun, Moon or a planet)."""
    name: str
    kind: BodyKind
    diameter_km: float = 0.0
    distance_au: float = 0.0
    shell: bool = False          # drawn on the planet shell beyond the stars


@dataclass(frozen=True)
class ConstellationRegion:
    """RA/Dec box used for procedural star placement; RA may wrap past 24h."""
    name: str
    ra_min: float
    ra_max: float
    dec_min: float
    dec_max: float
    abbreviation: str

    @property
    def wraps(self) -> bool:
        return self.ra_min > self.ra_max


@dataclass(frozen=True)
class SpectralTemplate:
    spectral_type: str
    star_class: StarClass
    temp_min: float
    temp_max: float
    weight: float


# (name, constellation, spectral type, bayer, RA h, Dec deg, mag, abs mag,
#  distance ly, temperature K, radius, mass, star type)
BRIGHT_STARS = [
    ("Sirius", "Canis Major", "A1V", "α CMa", 6.7525, -16.7161, -1.46, 1.42, 8.6, 9940, 1.711, 2.02, "MainSequence"),
    ("Canopus", "Carina", "A9II", "α Car", 6.3992, -52.6956, -0.74, -5.53, 310, 7350, 71, 8.0, "Giant"),
    ("Arcturus", "Boötes", "K1.5III", "α Boo", 14.2610, 19.1824, -0.05, -0.30, 36.7, 4286, 25.4, 1.1, "Giant"),
    ("Vega", "Lyra", "A0V", "α Lyr", 18.6156, 38.7836, 0.03, 0.58, 25.0, 9602, 2.362, 2.14, "MainSequence"),
    ("Capella", "Auriga", "G8III", "α Aur", 5.2782, 45.9979, 0.08, 0.35, 42.9, 4970, 12.2, 2.5, "Giant"),
    ("Polaris", "Ursa Minor", "F7Ib", "α UMi", 2.5303, 89.2642, 1.98, -3.64, 433, 6015, 45, 5.4, "Supergiant"),
    ("Betelgeuse", "Orion", "M2Iab", "α Ori", 5.9195, 7.4071, 0.42, -5.14, 700, 3500, 887, 11.6, "Supergiant"),
    ("Rigel", "Orion", "B8Ia", "β Ori", 5.2423, -8.2016, 0.12, -6.7, 860, 12100, 78, 21, "Supergiant"),
    ("Procyon", "Canis Minor", "F5IV-V", "α CMi", 7.6553, 5.2250, 0.34, 2.65, 11.46, 6530, 2.048, 1.499, "MainSequence"),
    ("Achernar", "Eridanus", "B6Vep", "α Eri", 1.6286, -57.2367, 0.46, -2.77, 139, 14500, 9.16, 6.7, "MainSequence"),
    ("Hadar", "Centaurus", "B1III", "β Cen", 14.0637, -60.3730, 0.61, -5.42, 525, 25000, 12, 12.02, "Giant"),
    ("Altair", "Aquila", "A7V", "α Aql", 19.8464, 8.8683, 0.76, 2.21, 16.73, 7550, 1.79, 1.79, "MainSequence"),
    ("Acrux", "Crux", "B0.5IV", "α Cru", 12.4433, -63.0992, 0.77, -4.19, 320, 28000, 7.8, 17.8, "MainSequence"),
    ("Aldebaran", "Taurus", "K5III", "α Tau", 4.5987, 16.5093, 0.85, -0.63, 65.3, 3910, 44.13, 1.16, "Giant"),
    ("Antares", "Scorpius", "M1.5Iab", "α Sco", 16.4901, -26.4320, 1.05, -5.28, 550, 3570, 680, 12.4, "Supergiant"),
    ("Spica", "Virgo", "B1III-IV", "α Vir", 13.4199, -11.1614, 0.97, -3.55, 250, 25300, 7.47, 11.43, "Giant"),
    ("Pollux", "Gemini", "K0III", "β Gem", 7.7553, 28.0262, 1.14, 1.08, 33.78, 4666, 9.06, 1.91, "Giant"),
    ("Fomalhaut", "Piscis Austrinus", "A4V", "α PsA", 22.9608, -29.6222, 1.16, 1.73, 25.13, 8590, 1.84, 1.92, "MainSequence"),
    ("Deneb", "Cygnus", "A2Ia", "α Cyg", 20.6905, 45.2803, 1.25, -8.38, 2615, 8525, 203, 19, "Supergiant"),
    ("Mimosa", "Crux", "B0.5IV", "β Cru", 12.7952, -59.6886, 1.25, -3.92, 280, 27000, 8.4, 16, "MainSequence"),
    ("Regulus", "Leo", "B8IVn", "α Leo", 10.1395, 11.9672, 1.35, -0.52, 77.5, 12460, 4.35, 3.8, "MainSequence"),
    ("Adhara", "Canis Major", "B2Iab", "ε CMa", 6.9771, -28.9722, 1.50, -4.10, 430, 22000, 13.9, 12.6, "Supergiant"),
    ("Castor", "Gemini", "A1V", "α Gem", 7.5767, 31.8883, 1.58, 0.59, 51, 10286, 2.4, 2.76, "MainSequence"),
    ("Gacrux", "Crux", "M3.5III", "γ Cru", 12.5194, -57.1128, 1.63, -0.56, 88.6, 3626, 84, 1.3, "Giant"),
    ("Shaula", "Scorpius", "B2IV", "λ Sco", 17.5601, -37.1038, 1.63, -5.05, 570, 25000, 8.8, 14.5, "MainSequence"),
    ("Bellatrix", "Orion", "B2III", "γ Ori", 5.4188, 6.3497, 1.64, -2.78, 250, 22000, 5.75, 8.6, "Giant"),
    ("Elnath", "Taurus", "B7III", "β Tau", 5.4382, 28.6074, 1.65, -1.34, 134, 13600, 4.2, 5.0, "Giant"),
    ("Miaplacidus", "Carina", "A2IV", "β Car", 9.2199, -69.7172, 1.67, -0.99, 111, 8866, 6.8, 3.5, "MainSequence"),
    ("Alnilam", "Orion", "B0Ia", "ε Ori", 5.6036, -1.2019, 1.69, -6.37, 2000, 27000, 42, 40, "Supergiant"),
    ("Alnitak", "Orion", "O9.7Ib", "ζ Ori", 5.6789, -1.9425, 1.74, -6.0, 1260, 29500, 20, 33, "Supergiant"),
    ("Alioth", "Ursa Major", "A1III-IVp", "ε UMa", 12.9004, 55.9598, 1.77, -0.21, 82.6, 9020, 4.14, 2.91, "Giant"),
    ("Mirfak", "Perseus", "F5Ib", "α Per", 3.4054, 49.8612, 1.79, -4.50, 510, 6350, 68, 8.5, "Supergiant"),
    ("Dubhe", "Ursa Major", "K0III", "α UMa", 11.0621, 61.7510, 1.81, -1.09, 123, 4660, 30, 4.25, "Giant"),
    ("Wezen", "Canis Major", "F8Ia", "δ CMa", 7.1396, -26.3932, 1.83, -6.87, 1800, 5818, 215, 17, "Supergiant"),
    ("Kaus Australis", "Sagittarius", "B9.5III", "ε Sgr", 18.4029, -34.3845, 1.85, -1.44, 143, 9960, 6.8, 3.52, "Giant"),
    ("Alkaid", "Ursa Major", "B3V", "η UMa", 13.7923, 49.3133, 1.85, -0.60, 103.9, 15540, 3.4, 6.1, "MainSequence"),
    ("Sargas", "Scorpius", "F1II", "θ Sco", 17.6224, -42.9973, 1.87, -2.75, 272, 7268, 26, 5.7, "Giant"),
    ("Avior", "Carina", "K3III+B2V", "ε Car", 8.3752, -59.5095, 1.86, -4.58, 632, 4050, 200, 10.5, "Giant"),
    ("Menkalinan", "Auriga", "A1IV", "β Aur", 5.9929, 44.9475, 1.90, -0.10, 81.1, 9200, 2.77, 2.39, "MainSequence"),
    ("Atria", "Triangulum Australe", "K2Ib-IIa", "α TrA", 16.8110, -69.0277, 1.91, -3.68, 415, 4150, 143, 7, "Supergiant"),
    ("Alhena", "Gemini", "A1.5IV+", "γ Gem", 6.6285, 16.3993, 1.93, -0.60, 109, 9260, 3.3, 2.81, "MainSequence"),
    ("Peacock", "Pavo", "B2IV", "α Pav", 20.4275, -56.7350, 1.94, -1.82, 179, 17711, 4.83, 5.91, "MainSequence"),
    ("Mirzam", "Canis Major", "B1II-III", "β CMa", 6.3785, -17.9559, 1.98, -3.95, 500, 25000, 9.7, 13.5, "Giant"),
    ("Alphard", "Hydra", "K3II-III", "α Hya", 9.4598, -8.6586, 1.99, -1.69, 177, 4120, 50.5, 3.03, "Giant"),
    ("Hamal", "Aries", "K2III", "α Ari", 2.1196, 23.4625, 2.01, 0.47, 65.8, 4480, 14.9, 1.5, "Giant"),
    ("Diphda", "Cetus", "K0III", "β Cet", 0.7265, -17.9866, 2.04, -0.30, 96.3, 4797, 16.78, 2.8, "Giant"),
    ("Nunki", "Sagittarius", "B2.5V", "σ Sgr", 18.9211, -26.2967, 2.05, -2.14, 228, 20000, 4.5, 7.8, "MainSequence"),
    ("Menkent", "Centaurus", "K0III", "θ Cen", 14.1114, -36.3700, 2.06, 0.70, 60.9, 4980, 10.6, 1.27, "Giant"),
    ("Saiph", "Orion", "B0.5Ia", "κ Ori", 5.7959, -9.6697, 2.07, -4.65, 650, 26500, 22.2, 15.5, "Supergiant"),
    ("Mintaka", "Orion", "O9.5II", "δ Ori", 5.5335, -0.2991, 2.25, -4.99, 916, 29500, 16.5, 24, "Giant"),
    ("Merak", "Ursa Major", "A1V", "β UMa", 11.0308, 56.3825, 2.34, 0.41, 79.7, 9377, 3.021, 2.7, "MainSequence"),
    ("Phecda", "Ursa Major", "A0Ve", "γ UMa", 11.8971, 53.6948, 2.41, 0.36, 83.2, 9355, 2.91, 2.94, "MainSequence"),
    ("Megrez", "Ursa Major", "A3V", "δ UMa", 12.2571, 57.0326, 3.32, 1.33, 80.5, 8630, 1.4, 1.63, "MainSequence"),
    ("Mizar", "Ursa Major", "A2V", "ζ UMa", 13.3989, 54.9254, 2.23, 0.33, 78, 9000, 2.4, 2.2, "MainSequence"),
    ("Alcor", "Ursa Major", "A5V", "80 UMa", 13.4206, 54.9880, 3.99, 2.00, 81.7, 8000, 1.84, 1.8, "MainSequence"),
    ("Kochab", "Ursa Minor", "K4III", "β UMi", 14.8451, 74.1555, 2.07, -0.87, 130.9, 4030, 42.1, 2.2, "Giant"),
    ("Schedar", "Cassiopeia", "K0IIIa", "α Cas", 0.6751, 56.5373, 2.24, -1.99, 228, 4530, 45.4, 4, "Giant"),
    ("Caph", "Cassiopeia", "F2III-IV", "β Cas", 0.1526, 59.1498, 2.28, 1.17, 54.7, 7079, 3.5, 1.91, "Giant"),
    ("Ruchbah", "Cassiopeia", "A5III-IV", "δ Cas", 1.4303, 60.2353, 2.66, 0.24, 99.4, 8400, 3.9, 2.49, "Giant"),
    ("Segin", "Cassiopeia", "B3III", "ε Cas", 1.9066, 63.6701, 3.35, -2.31, 410, 15000, 6, 9.2, "Giant"),
    ("Algol", "Perseus", "B8V", "β Per", 3.1363, 40.9557, 2.12, -0.07, 92.8, 13000, 2.73, 3.17, "MainSequence"),
    ("Almach", "Andromeda", "K3IIb", "γ And", 2.0650, 42.3297, 2.10, -3.08, 355, 4250, 80, 6, "Giant"),
    ("Mirach", "Andromeda", "M0III", "β And", 1.1622, 35.6206, 2.07, -1.76, 197, 3842, 100, 3.5, "Giant"),
    ("Alpheratz", "Andromeda", "B8IVp", "α And", 0.1398, 29.0905, 2.07, -0.30, 97, 13800, 2.7, 3.8, "MainSequence"),
    ("Denebola", "Leo", "A3V", "β Leo", 11.8177, 14.5720, 2.14, 1.92, 35.9, 8500, 1.728, 1.78, "MainSequence"),
    ("Algieba", "Leo", "K1III+G7III", "γ Leo", 10.3327, 19.8418, 2.01, -0.92, 130, 4470, 31.8, 1.23, "Giant"),
    ("Zosma", "Leo", "A4V", "δ Leo", 11.2351, 20.5239, 2.56, 1.32, 58.4, 8296, 2.14, 2.2, "MainSequence"),
    ("Rasalhague", "Ophiuchus", "A5III", "α Oph", 17.5822, 12.5600, 2.08, 1.30, 48.6, 8000, 2.6, 2.4, "Giant"),
    ("Sabik", "Ophiuchus", "A2.5V", "η Oph", 17.1726, -15.7250, 2.43, 0.37, 84, 8900, 2.5, 2.2, "MainSequence"),
    ("Eltanin", "Draco", "K5III", "γ Dra", 17.9434, 51.4889, 2.23, -1.04, 148, 3930, 48.15, 1.72, "Giant"),
    ("Rastaban", "Draco", "G2Ib-II", "β Dra", 17.5072, 52.3014, 2.79, -2.43, 380, 5160, 40, 6, "Supergiant"),
    ("Thuban", "Draco", "A0III", "α Dra", 14.0732, 64.3758, 3.67, -1.20, 303, 10100, 3.4, 3.4, "Giant"),
    ("Sadr", "Cygnus", "F8Ib", "γ Cyg", 20.3702, 40.2567, 2.23, -6.12, 1800, 5790, 150, 12.11, "Supergiant"),
    ("Gienah Cygni", "Cygnus", "K0III", "ε Cyg", 20.7703, 33.9703, 2.48, 0.76, 72.7, 4710, 12, 2, "Giant"),
    ("Alderamin", "Cepheus", "A7IV-V", "α Cep", 21.3096, 62.5856, 2.45, 1.58, 49, 7740, 2.5, 1.74, "MainSequence"),
    ("Errai", "Cepheus", "K1III-IV", "γ Cep", 23.6554, 77.6324, 3.21, 2.51, 45, 4792, 4.93, 1.4, "Giant"),
    ("Eni", "Pegasus", "K2Ib", "ε Peg", 21.7364, 9.8750, 2.38, -4.19, 672, 4379, 185, 10.7, "Supergiant"),
    ("Scheat", "Pegasus", "M2.5II-III", "β Peg", 23.0629, 28.0828, 2.44, -1.49, 196, 3689, 95, 2.1, "Giant"),
    ("Markab", "Pegasus", "B9III", "α Peg", 23.0793, 15.2053, 2.49, -0.67, 140, 10100, 4.62, 3.5, "Giant"),
    ("Algenib", "Pegasus", "B2IV", "γ Peg", 0.2201, 15.1836, 2.83, -2.22, 335, 21179, 4.8, 8.9, "MainSequence"),
    ("Ankaa", "Phoenix", "K0III", "α Phe", 0.4381, -42.3061, 2.40, 0.52, 77, 4436, 15, 1.57, "Giant"),
    ("Alnair", "Grus", "B7IV", "α Gru", 22.1372, -46.9611, 1.73, -0.73, 101, 13920, 3.4, 4, "MainSequence"),
]

CONSTELLATION_REGIONS = [
    ConstellationRegion(*row) for row in (
        ("Orion", 4.5, 6.5, -12, 22, "Ori"),
        ("Ursa Major", 8, 14, 28, 70, "UMa"),
        ("Cassiopeia", 22, 3, 46, 77, "Cas"),
        ("Cygnus", 19, 22, 27, 61, "Cyg"),
        ("Scorpius", 15.5, 18, -45, -8, "Sco"),
        ("Leo", 9, 12, -6, 34, "Leo"),
        ("Lyra", 18, 19.5, 25, 48, "Lyr"),
        ("Andromeda", 22.5, 2.5, 21, 53, "And"),
        ("Taurus", 3, 6, 0, 31, "Tau"),
        ("Gemini", 5.5, 8, 10, 35, "Gem"),
        ("Canis Major", 6, 7.5, -33, -11, "CMa"),
        ("Virgo", 11.5, 15, -22, 15, "Vir"),
        ("Boötes", 13.5, 16, 7, 55, "Boo"),
        ("Perseus", 1.5, 4.5, 30, 59, "Per"),
        ("Hercules", 15.5, 18.5, 4, 51, "Her"),
        ("Centaurus", 11, 15, -64, -29, "Cen"),
        ("Carina", 6, 11, -75, -50, "Car"),
        ("Crux", 11.5, 13, -65, -55, "Cru"),
        ("Auriga", 4.5, 7.5, 28, 56, "Aur"),
        ("Ophiuchus", 16, 18.5, -30, 14, "Oph"),
        ("Sagittarius", 17.5, 20, -45, -12, "Sgr"),
        ("Aquarius", 20.5, 23.5, -25, 3, "Aqr"),
        ("Pisces", 22.5, 2, -7, 34, "Psc"),
        ("Capricornus", 20, 22, -28, -8, "Cap"),
        ("Aquila", 18.5, 20.5, -12, 19, "Aql"),
        ("Draco", 9, 21, 47, 86, "Dra"),
        ("Cepheus", 20, 8, 53, 88, "Cep"),
        ("Pegasus", 21, 1, 2, 36, "Peg"),
        ("Phoenix", 23, 2.5, -58, -40, "Phe"),
        ("Grus", 21.5, 23.5, -57, -37, "Gru"),
        ("Pavo", 17.5, 21.5, -75, -57, "Pav"),
        ("Tucana", 22, 1.5, -75, -57, "Tuc"),
        ("Eridanus", 1.5, 5, -58, 0, "Eri"),
        ("Hydra", 8, 15, -35, 7, "Hya"),
        ("Puppis", 6, 9, -51, -11, "Pup"),
        ("Vela", 8, 11, -57, -37, "Vel"),
        ("Lupus", 14, 16.5, -55, -30, "Lup"),
        ("Ara", 16.5, 18, -68, -45, "Ara"),
        ("Corona Australis", 17.5, 19.5, -46, -37, "CrA"),
        ("Triangulum Australe", 14.5, 17, -70, -60, "TrA"),
        ("Norma", 15.5, 17, -60, -42, "Nor"),
        ("Telescopium", 18, 20.5, -57, -45, "Tel"),
        ("Indus", 20, 23, -75, -45, "Ind"),
        ("Microscopium", 20, 21.5, -45, -27, "Mic"),
        ("Sculptor", 23, 2, -40, -24, "Scl"),
        ("Fornax", 2, 4, -40, -24, "For"),
        ("Horologium", 2.5, 4.5, -67, -40, "Hor"),
        ("Reticulum", 3, 5, -67, -53, "Ret"),
        ("Pictor", 4, 7, -64, -43, "Pic"),
        ("Dorado", 3.5, 6.5, -70, -49, "Dor"),
        ("Volans", 6.5, 9, -75, -64, "Vol"),
        ("Mensa", 3.5, 7.5, -85, -70, "Men"),
        ("Chamaeleon", 7.5, 13.5, -83, -75, "Cha"),
        ("Musca", 11, 14, -75, -64, "Mus"),
        ("Circinus", 13.5, 15.5, -70, -55, "Cir"),
        ("Apus", 13.5, 18.5, -83, -67, "Aps"),
        ("Octans", 0, 24, -90, -74, "Oct"),
        ("Hydrus", 0, 4.5, -82, -58, "Hyi"),
        ("Camelopardalis", 3, 14.5, 52, 86, "Cam"),
        ("Lynx", 6, 9.5, 33, 62, "Lyn"),
        ("Cancer", 7.5, 9.5, 6, 33, "Cnc"),
        ("Canis Minor", 7, 8.5, 0, 13, "CMi"),
        ("Monoceros", 5.5, 8.5, -12, 12, "Mon"),
        ("Lepus", 4.5, 6.5, -27, -11, "Lep"),
        ("Columba", 5, 7, -43, -27, "Col"),
        ("Caelum", 4, 5.5, -49, -37, "Cae"),
        ("Corvus", 11.5, 12.75, -25, -11, "Crv"),
        ("Crater", 10.5, 12, -25, -6, "Crt"),
        ("Sextans", 9.5, 11, -12, 6, "Sex"),
        ("Antlia", 9, 11, -40, -24, "Ant"),
        ("Pyxis", 8.5, 9.5, -37, -17, "Pyx"),
        ("Coma Berenices", 11.5, 13.5, 14, 34, "Com"),
        ("Canes Venatici", 12, 14.5, 27, 53, "CVn"),
        ("Ursa Minor", 0, 24, 65, 90, "UMi"),
        ("Corona Borealis", 15, 16.5, 25, 40, "CrB"),
        ("Serpens", 15, 19, -16, 26, "Ser"),
        ("Libra", 14, 16, -30, 0, "Lib"),
        ("Scutum", 18, 19, -16, -4, "Sct"),
        ("Sagitta", 19, 20.5, 16, 22, "Sge"),
        ("Vulpecula", 19, 21.5, 19, 29, "Vul"),
        ("Delphinus", 20, 21.5, 2, 21, "Del"),
        ("Equuleus", 20.5, 21.5, 2, 13, "Equ"),
        ("Lacerta", 21.5, 23, 35, 57, "Lac"),
        ("Triangulum", 1, 3, 25, 37, "Tri"),
        ("Aries", 1.5, 3.5, 10, 31, "Ari"),
    )
]

SPECTRAL_TEMPLATES = [
    SpectralTemplate("O9V", StarClass.O, 30000.0, 40000.0, 0.001),
    SpectralTemplate("B0V", StarClass.B, 25000.0, 30000.0, 0.01),
    SpectralTemplate("B5V", StarClass.B, 15000.0, 25000.0, 0.03),
    SpectralTemplate("A0V", StarClass.A, 9000.0, 15000.0, 0.06),
    SpectralTemplate("A5V", StarClass.A, 7500.0, 9000.0, 0.08),
    SpectralTemplate("F0V", StarClass.F, 7000.0, 7500.0, 0.10),
    SpectralTemplate("F5V", StarClass.F, 6300.0, 7000.0, 0.12),
    SpectralTemplate("G0V", StarClass.G, 5900.0, 6300.0, 0.15),
    SpectralTemplate("G5V", StarClass.G, 5500.0, 5900.0, 0.12),
    SpectralTemplate("K0V", StarClass.K, 5000.0, 5500.0, 0.10),
    SpectralTemplate("K5V", StarClass.K, 4300.0, 5000.0, 0.08),
    SpectralTemplate("M0V", StarClass.M, 3800.0, 4300.0, 0.07),
    SpectralTemplate("M5V", StarClass.M, 3000.0, 3800.0, 0.05),
    SpectralTemplate("K0III", StarClass.K, 4000.0, 5000.0, 0.015),
    SpectralTemplate("M0III", StarClass.M, 3500.0, 4000.0, 0.01),
]

# Label anchor (RA hours, Dec degrees) per constellation
CONSTELLATION_CENTERS: Dict[str, Tuple[float, float]] = {
    "Orion": (5.5, 0.0),
    "Ursa Major": (11.5, 55.0),
    "Cassiopeia": (1.0, 60.0),
    "Cygnus": (20.5, 45.0),
    "Scorpius": (16.5, -30.0),
    "Leo": (10.5, 15.0),
    "Lyra": (18.8, 36.0),
    "Andromeda": (0.8, 38.0),
    "Taurus": (4.5, 19.0),
    "Gemini": (7.5, 22.0),
    "Canis Major": (6.8, -22.0),
    "Virgo": (13.2, -2.0),
    "Boötes": (14.7, 30.0),
    "Perseus": (3.5, 45.0),
    "Hercules": (17.5, 27.0),
    "Centaurus": (13.0, -47.0),
    "Carina": (8.7, -62.0),
    "Crux": (12.5, -60.0),
    "Auriga": (6.0, 42.0),
    "Ophiuchus": (17.0, 0.0),
}

SOLAR_SYSTEM_BODIES = [
    CelestialBody("Sun", BodyKind.SUN, 1392700.0, 0.0),
    CelestialBody("Moon", BodyKind.MOON, 3474.8, 0.00257),
    CelestialBody("Mercury", BodyKind.PLANET, 4879.0, 0.39, shell=True),
    CelestialBody("Venus", BodyKind.PLANET, 12104.0, 0.72, shell=True),
    CelestialBody("Mars", BodyKind.PLANET, 6779.0, 1.52, shell=True),
    CelestialBody("Jupiter", BodyKind.PLANET, 139820.0, 5.20, shell=True),
    CelestialBody("Saturn", BodyKind.PLANET, 116460.0, 9.58, shell=True),
    CelestialBody("Uranus", BodyKind.PLANET, 50724.0, 19.18, shell=True),
    CelestialBody("Neptune", BodyKind.PLANET, 49244.0, 30.07, shell=True),
    CelestialBody("Pluto", BodyKind.PLANET, 2376.0, 39.48, shell=True),
]


def _fold(name: str) -> str:
    """Case- and accent-insensitive key, so "bootes" matches "Boötes"."""
    decomposed = unicodedata.normalize("NFKD", name)
    return "".join(c for c in decomposed if not unicodedata.combining(c)).lower()


def constellation_center(name: str) -> Optional[Tuple[float, float]]:
    """Label anchor (RA hours, Dec degrees) for a constellation, if known."""
    wanted = _fold(name)
    return next((center for key, center in CONSTELLATION_CENTERS.items() if _fold(key) == wanted), None)


def _bright_star(row) -> StarRecord:
    (name, constellation, spectral, bayer, ra, dec, mag, abs_mag,
     distance_ly, temperature, radius, mass, star_type) = row
    star_class = star_class_from_spectral_type(spectral)
    return StarRecord(
        name=name,
        constellation=constellation,
        spectral_type=spectral,
        bayer=bayer,
        ra=float(ra),
        dec=float(dec),
        magnitude=float(mag),
        absolute_magnitude=float(abs_mag),
        distance_ly=float(distance_ly),
        distance_pc=light_years_to_parsecs(distance_ly),
        temperature=float(temperature),
        radius=float(radius),
        mass=float(mass),
        luminosity=luminosity_from_magnitude(abs_mag),
        star_class=star_class,
        star_type=StarType(star_type),
        color=color_from_temperature(temperature),
    )


def _pick_template(rng: SplitMix64) -> SpectralTemplate:
    total = sum(t.weight for t in SPECTRAL_TEMPLATES)
    pick = rng.random() * total
    cumulative = 0.0
    for template in SPECTRAL_TEMPLATES:
        cumulative += template.weight
        if pick <= cumulative:
            return template
    return SPECTRAL_TEMPLATES[0]


def _region_ra(region: ConstellationRegion, rng: SplitMix64) -> float:
    if region.wraps:
        span = (24.0 - region.ra_min) + region.ra_max
        return (region.ra_min + rng.random() * span) % 24.0
    return region.ra_min + rng.random() * (region.ra_max - region.ra_min)


def generate_star(star_id: int, rng: SplitMix64) -> StarRecord:
    """
    Draw one procedural star.

    The order of draws is fixed: region, RA, Dec, spectral type, temperature,
    magnitude and its two overrides, Bayer designation, distance.

    Args:
        star_id: Sequential id; the star is named "HD <100000 + id>"
        rng: Generator state, advanced in place
    """
    region = CONSTELLATION_REGIONS[rng.randrange(len(CONSTELLATION_REGIONS))]
    ra = _region_ra(region, rng)
    dec = region.dec_min + rng.random() * (region.dec_max - region.dec_min)

    template = _pick_template(rng)
    temperature = rng.uniform(template.temp_min, template.temp_max)

    magnitude = rng.uniform(2.5, 6.5)
    if rng.random() < BRIGHT_OVERRIDE_PROBABILITY:
        magnitude = rng.uniform(1.5, 3.0)
    if rng.random() < RARE_BRIGHT_PROBABILITY:
        magnitude = rng.uniform(0.5, 2.0)

    bayer = ""
    if rng.random() < BAYER_PROBABILITY:
        letter = GREEK_LETTERS[rng.randrange(len(GREEK_LETTERS))]
        bayer = f"{letter} {region.abbreviation}"

    abs_mag = magnitude - 5.0 * math.log10(10.0 + rng.random() * 990.0) + 5.0
    distance_pc = distance_from_magnitudes(magnitude, abs_mag)
    luminosity = luminosity_from_magnitude(abs_mag)

    return StarRecord(
        name=f"HD {100000 + star_id}",
        constellation=region.name,
        spectral_type=template.spectral_type,
        bayer=bayer,
        ra=ra,
        dec=dec,
        magnitude=magnitude,
        absolute_magnitude=abs_mag,
        distance_ly=parsecs_to_light_years(distance_pc),
        distance_pc=distance_pc,
        temperature=temperature,
        radius=radius_from_luminosity(luminosity, temperature),
        mass=luminosity ** 0.25,
        luminosity=luminosity,
        star_class=template.star_class,
        star_type=star_type_from_spectral_type(template.spectral_type),
        color=color_from_temperature(temperature),
    )


class StarCatalog:
    """
    Bright stars followed by seeded procedural stars up to ``target_count``.

    Built once and treated as read-only afterwards.
    """

    def __init__(self, seed: int = DEFAULT_SEED, target_count: int = DEFAULT_TARGET_COUNT):
        """
        Build the catalog.

        Args:
            seed: Seed of the procedural extension
            target_count: Total number of stars; values below the number of
                named stars keep only the named stars
        """
        self.seed = seed
        self.target_count = target_count
        self.stars: List[StarRecord] = [_bright_star(row) for row in BRIGHT_STARS]
        self._generate()
        self._by_name = {s.name.lower(): s for s in self.stars}
        logger.info("Star catalog built: %d stars (%d named, seed %d)",
                    len(self.stars), len(BRIGHT_STARS), seed)

    def _generate(self):
        rng = SplitMix64(self.seed)
        star_id = len(self.stars) + 1
        while len(self.stars) < self.target_count:
            self.stars.append(generate_star(star_id, rng))
            star_id += 1

    @property
    def named_count(self) -> int:
        return len(BRIGHT_STARS)

    def find(self, name: str) -> Optional[StarRecord]:
        """Look up a star by name (case-insensitive) or Bayer designation."""
        star = self._by_name.get(name.lower())
        if star is not None:
            return star
        return next((s for s in self.stars if s.bayer and s.bayer == name), None)

    def brightest(self, count: int = 10) -> List[StarRecord]:
        """The ``count`` brightest stars (lowest magnitude first)."""
        return sorted(self.stars, key=lambda s: s.magnitude)[:count]

    def in_constellation(self, constellation: str) -> List[StarRecord]:
        """Stars in a constellation; matching ignores case and accents."""
        wanted = _fold(constellation)
        return [s for s in self.stars if _fold(s.constellation) == wanted]

    def visible(self, jd: float, latitude: float, longitude: float,
                min_altitude: float = 0.0,
                max_magnitude: Optional[float] = None) -> List[Tuple[StarRecord, HorizontalPosition]]:
        """
        Stars above ``min_altitude`` for an observer.

        Args:
            jd: Julian Date
            latitude: Observer latitude in degrees
            longitude: Observer east longitude in degrees
            min_altitude: Minimum altitude in degrees
            max_magnitude: Optional faint limit

        Returns:
            List of (star, horizontal position) tuples, catalog order
        """
        visible = []
        for star in self.stars:
            if max_magnitude is not None and star.magnitude > max_magnitude:
                continue
            horiz = equatorial_to_horizontal(star.ra, star.dec, jd, latitude, longitude)
            if horiz.altitude >= min_altitude:
                visible.append((star, horiz))
        return visible

    def __len__(self) -> int:
        return len(self.stars)

    def __iter__(self) -> Iterator[StarRecord]:
        return iter(self.stars)


def build_catalog(config) -> StarCatalog:
    """Build the catalog described by a ``CatalogConfig`` section."""
    return StarCatalog(seed=config.seed, target_count=config.target_count)
