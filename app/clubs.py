"""
Static table of the padel clubs the finder knows about.

Coordinates are used by the aggregator's radius filter; ``type`` /
``court_type`` are the club-level defaults used when an adapter cannot tell
what kind of court a slot is on.
"""

from __future__ import annotations

from app.models import INDOOR, MIXED, OUTDOOR, ClubDescriptor

MONKEYPADEL = "monkeypadel"
COMPLEXEPADEL = "complexepadel"
P4PADELINDOOR = "p4padelindoor"
ENJOYPADEL = "enjoypadel"
PADELGENTLE = "padelgentle"
PADELTWINS = "padeltwins"
COUNTRYCLUBPADEL = "countryclubpadel"

CLUBS: tuple[ClubDescriptor, ...] = (
    ClubDescriptor(
        id=MONKEYPADEL,
        name="Monkey Padel",
        latitude=43.64458478670538,
        longitude=5.163387292364317,
        address="Route de Salon, 13116 Vernègues",
        type=OUTDOOR,
        court_type=OUTDOOR,
    ),
    ClubDescriptor(
        id=COMPLEXEPADEL,
        name="Complexe Padel",
        latitude=43.63111698073711,
        longitude=5.096043339977537,
        address="Rue de l'Estamaire, 13300 Salon-de-Provence",
        # Mixed venue; slots without a type are assumed to be the indoor halls.
        type=INDOOR,
        court_type=INDOOR,
    ),
    ClubDescriptor(
        id=P4PADELINDOOR,
        name="P4 Padel Indoor",
        latitude=43.5865781080817,
        longitude=5.109412766870975,
        address="ZI les sardenas, 133 Allée de la carreto LOT A, 13680 Lançon-Provence",
        type=INDOOR,
        court_type=INDOOR,
    ),
    ClubDescriptor(
        id=ENJOYPADEL,
        name="Enjoy Padel",
        latitude=43.581236750376625,
        longitude=5.210554114062894,
        address="200 Rue des Oliviers, 13680 Lançon-Provence",
        type=OUTDOOR,
        court_type=OUTDOOR,
    ),
    ClubDescriptor(
        id=PADELGENTLE,
        name="Padel Gentle",
        latitude=43.60544814765865,
        longitude=5.098444841051269,
        address="Quartier de la Garenne, RN 113, 13300 Salon-de-Provence, France",
        type=OUTDOOR,
        court_type=OUTDOOR,
    ),
    ClubDescriptor(
        id=PADELTWINS,
        name="Padel Twins",
        latitude=43.54955982167091,
        longitude=5.2563952803531055,
        address="1050 Rte de Velaux, 13111 Coudoux",
        type=OUTDOOR,
        court_type=OUTDOOR,
    ),
    ClubDescriptor(
        id=COUNTRYCLUBPADEL,
        name="Country Club Padel",
        latitude=43.56886117433774,
        longitude=5.416675539201542,
        address="1195 Chem. des Cruyes, 13090 Aix-en-Provence",
        type=MIXED,
        court_type=MIXED,
    ),
)

_BY_ID: dict[str, ClubDescriptor] = {club.id: club for club in CLUBS}


def get_club(club_id: str) -> ClubDescriptor | None:
    return _BY_ID.get(club_id)
