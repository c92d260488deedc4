"""
panchangam.names
----------------
English transliterations of the panchangam element names, plus a small
registry so callers can plug in their own translation tables.
"""

from __future__ import annotations

from typing import Dict, Sequence, Tuple

from .core.errors import ConfigurationError

TITHI = (
    "Shukla Pratipada", "Shukla Dwitiya", "Shukla Tritiya", "Shukla Chaturthi", "Shukla Panchami",
    "Shukla Shashthi", "Shukla Saptami", "Shukla Ashtami", "Shukla Navami", "Shukla Dashami",
    "Shukla Ekadashi", "Shukla Dwadashi", "Shukla Trayodashi", "Shukla Chaturdashi", "Purnima",
    "Krishna Pratipada", "Krishna Dwitiya", "Krishna Tritiya", "Krishna Chaturthi", "Krishna Panchami",
    "Krishna Shashthi", "Krishna Saptami", "Krishna Ashtami", "Krishna Navami", "Krishna Dashami",
    "Krishna Ekadashi", "Krishna Dwadashi", "Krishna Trayodashi", "Krishna Chaturdashi", "Amavasya",
)

NAKSHATRA = (
    "Ashwini", "Bharani", "Krittika", "Rohini", "Mrigashira", "Ardra", "Punarvasu",
    "Pushya", "Ashlesha", "Magha", "Purva Phalguni", "Uttara Phalguni", "Hasta",
    "Chitra", "Swati", "Vishakha", "Anuradha", "Jyeshtha", "Mula", "Purva Ashadha",
    "Uttara Ashadha", "Shravana", "Dhanishta", "Shatabhisha", "Purva Bhadrapada",
    "Uttara Bhadrapada", "Revati",
)

YOGA = (
    "Vishkambha", "Priti", "Ayushman", "Saubhagya", "Shobhana", "Atiganda", "Sukarma",
    "Dhriti", "Shula", "Ganda", "Vriddhi", "Dhruva", "Vyaghata", "Harshana", "Vajra",
    "Siddhi", "Vyatipata", "Variyana", "Parigha", "Shiva", "Siddha", "Sadhya",
    "Shubha", "Shukla", "Brahma", "Indra", "Vaidhriti",
)

# 0..6 movable karanas, then the four fixed ones
KARANA = (
    "Bava", "Balava", "Kaulava", "Taitila", "Garaja", "Vanija", "Vishti",
    "Shakuni", "Chatushpada", "Naga", "Kimstughna",
)

RASHI = (
    "Mesha", "Vrishabha", "Mithuna", "Karka", "Simha", "Kanya",
    "Tula", "Vrischika", "Dhanu", "Makara", "Kumbha", "Meena",
)

MASA = (
    "Chaitra", "Vaishakha", "Jyeshtha", "Ashadha", "Shravana", "Bhadrapada",
    "Ashvin", "Kartika", "Margashirsha", "Pausha", "Magha", "Phalguna",
)

PAKSHA = ("Shukla", "Krishna")

RITU = ("Vasanta", "Grishma", "Varsha", "Sharad", "Hemanta", "Shishira")

AYANA = ("Uttarayana", "Dakshinayana")

VARA = ("Ravivara", "Somavara", "Mangalavara", "Budhavara", "Guruvara", "Shukravara", "Shanivara")

GRAHA = ("Sun", "Moon", "Mars", "Mercury", "Jupiter", "Venus", "Saturn", "Rahu", "Ketu")

GUNA = ("Rajas", "Tamas", "Sattva")

GANA = ("Deva", "Manushya", "Rakshasa")

TRINITY = ("Brahma", "Vishnu", "Shiva")

SAMVATSARA = (
    "Prabhava", "Vibhava", "Shukla", "Pramoduta", "Prajotpatti", "Angirasa",
    "Shrimukha", "Bhava", "Yuva", "Dhatu", "Ishvara", "Bahudhanya",
    "Pramathi", "Vikrama", "Vrisha", "Chitrabhanu", "Svabhanu", "Tarana",
    "Parthiva", "Vyaya", "Sarvajit", "Sarvadhari", "Virodhi", "Vikriti",
    "Khara", "Nandana", "Vijaya", "Jaya", "Manmatha", "Durmukhi",
    "Hevilambi", "Vilambi", "Vikari", "Sharvari", "Plava", "Shubhakrit",
    "Shobhakrit", "Krodhi", "Vishvavasu", "Parabhava", "Plavanga", "Kilaka",
    "Saumya", "Sadharana", "Virodhikrit", "Paridhavi", "Pramadicha", "Ananda",
    "Rakshasa", "Nala", "Pingala", "Kalayukti", "Siddharthi", "Raudri",
    "Durmati", "Dundubhi", "Rudhirodgari", "Raktakshi", "Krodhana", "Akshaya",
)

TABLES: Dict[str, Tuple[str, ...]] = {
    "tithi": TITHI,
    "nakshatra": NAKSHATRA,
    "yoga": YOGA,
    "karana": KARANA,
    "rashi": RASHI,
    "masa": MASA,
    "paksha": PAKSHA,
    "ritu": RITU,
    "ayana": AYANA,
    "vara": VARA,
    "graha": GRAHA,
    "guna": GUNA,
    "gana": GANA,
    "trinity": TRINITY,
    "samvatsara": SAMVATSARA,
}

_LOCALES: Dict[str, Dict[str, Tuple[str, ...]]] = {}


def name(kind: str, index: int) -> str:
    if kind not in TABLES:
        raise ConfigurationError(f"Unknown name table '{kind}'. Available: {sorted(TABLES)}")
    table = TABLES[kind]
    return table[index % len(table)]


def register_locale(locale: str, kind: str, names: Sequence[str]) -> None:
    """Install a translation table for one element kind."""
    if kind not in TABLES:
        raise ConfigurationError(f"Unknown name table '{kind}'. Available: {sorted(TABLES)}")
    if len(names) != len(TABLES[kind]):
        raise ConfigurationError(
            f"Locale '{locale}' table for '{kind}' has {len(names)} names, expected {len(TABLES[kind])}"
        )
    _LOCALES.setdefault(locale, {})[kind] = tuple(names)


def unregister_locale(locale: str) -> None:
    _LOCALES.pop(locale, None)


def localized_name(kind: str, index: int, locale: str = "en") -> str:
    """Translated name, falling back to the English transliteration."""
    table = _LOCALES.get(locale, {}).get(kind)
    if table is None:
        return name(kind, index)
    return table[index % len(table)]
