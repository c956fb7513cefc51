"""
Static catalogs behind swappable providers.
Each in-memory catalog takes an optional fixture list; without one it serves the seed data below.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from camper_planner.api.models.schemas import Camper, Location, RentalLocation


class LocationCatalog(ABC):
    @abstractmethod
    def get_all(self) -> List[Location]:
        raise NotImplementedError

    @abstractmethod
    def find_by_id(self, location_id: str) -> Optional[Location]:
        raise NotImplementedError


class RentalLocationCatalog(ABC):
    @abstractmethod
    def get_all(self) -> List[RentalLocation]:
        raise NotImplementedError

    @abstractmethod
    def find_by_id(self, location_id: str) -> Optional[RentalLocation]:
        raise NotImplementedError


class CamperCatalog(ABC):
    @abstractmethod
    def get_all(self) -> List[Camper]:
        raise NotImplementedError


SEED_LOCATIONS: List[Location] = [
    Location(id="it-tuscany", name="Toscana Slow Roads", countryCode="IT", region="Toscana",
             latitude=43.7711, longitude=11.2486, description="Borghi, colline e strade panoramiche."),
    Location(id="it-dolomites", name="Dolomiti & Passi", countryCode="IT", region="Trentino-Alto Adige",
             latitude=46.4102, longitude=11.8440, description="Panorami alpini e passi leggendari."),
    Location(id="it-puglia", name="Puglia Coste & Masserie", countryCode="IT", region="Puglia",
             latitude=40.8518, longitude=17.1220, description="Mare, trulli e cucina locale."),
    Location(id="fr-provence", name="Provence (fuori rotta)", countryCode="FR", region="Provence-Alpes-Côte d'Azur",
             latitude=43.9493, longitude=4.8055, description="Lavanda, villaggi e mercati."),
]


def _station(station_id: str, name: str, city: str, country: str, lat: float, lng: float, label: str = "") -> RentalLocation:
    return RentalLocation(
        id=station_id,
        name=name,
        city=city,
        country=country,
        latitude=lat,
        longitude=lng,
        address=f"RoadSurfer Station {label or city}",
    )


SEED_RENTAL_LOCATIONS: List[RentalLocation] = [
    # Austria
    _station("at-graz", "Graz", "Graz", "Austria", 47.0707, 15.4395),
    _station("at-innsbruck", "Innsbruck", "Innsbruck", "Austria", 47.2692, 11.4041),
    _station("at-salzburg", "Salisburgo", "Salzburg", "Austria", 47.8095, 13.0550),
    _station("at-vienna", "Vienna", "Wien", "Austria", 48.2082, 16.3738),
    # Francia
    _station("fr-bordeaux", "Bordeaux", "Bordeaux", "Francia", 44.8378, -0.5792),
    _station("fr-geneva-gex", "Geneva-Gex", "Geneva-Gex", "Francia", 46.2044, 6.1432),
    _station("fr-lille", "Lille", "Lille", "Francia", 50.6292, 3.0573),
    _station("fr-lyon", "Lione", "Lyon", "Francia", 45.7640, 4.8357),
    _station("fr-marseille", "Marsiglia-Aix", "Marseille", "Francia", 43.2965, 5.3698, "Marseille-Aix"),
    _station("fr-nantes", "Nantes", "Nantes", "Francia", 47.2184, -1.5536),
    _station("fr-nice", "Nizza", "Nice", "Francia", 43.7102, 7.2620),
    _station("fr-paris", "Parigi", "Paris", "Francia", 48.8566, 2.3522),
    _station("fr-toulouse", "Toulouse", "Toulouse", "Francia", 43.6047, 1.4442),
    # Germania
    _station("de-aachen", "Aachen", "Aachen", "Germania", 50.7753, 6.0839),
    _station("de-augsburg", "Augsburg", "Augsburg", "Germania", 48.3705, 10.8978),
    _station("de-berlin", "Berlino", "Berlin", "Germania", 52.5200, 13.4050),
    _station("de-bielefeld", "Bielefeld", "Bielefeld", "Germania", 52.0302, 8.5325),
    _station("de-bochum", "Bochum", "Bochum", "Germania", 51.4818, 7.2162),
    _station("de-bremen", "Brema", "Bremen", "Germania", 53.0793, 8.8017),
    _station("de-cologne", "Colonia", "Köln", "Germania", 50.9375, 6.9603),
    _station("de-cologne-bonn", "Colonia-Bonn", "Köln-Bonn", "Germania", 50.8659, 7.1428),
    _station("de-cologne-dusseldorf", "Colonia-Düsseldorf", "Köln-Düsseldorf", "Germania", 51.2277, 6.7735),
    _station("de-constance", "Costanza (Aach)", "Konstanz", "Germania", 47.6779, 8.8937),
    _station("de-dresden", "Dresda", "Dresden", "Germania", 51.0504, 13.7373),
    _station("de-duisburg", "Duisburg", "Duisburg", "Germania", 51.4344, 6.7623),
    _station("de-erfurt", "Erfurt", "Erfurt", "Germania", 50.9848, 11.0299),
    _station("de-frankfurt", "Francoforte", "Frankfurt", "Germania", 50.1109, 8.6821),
    _station("de-freiburg", "Friburgo", "Freiburg", "Germania", 47.9990, 7.8421),
    _station("de-freiburg-basel", "Friburgo-Basilea", "Freiburg-Basel", "Germania", 47.9959, 7.8494),
    _station("de-hamburg", "Amburgo", "Hamburg", "Germania", 53.5511, 9.9937),
    _station("de-hanover", "Hannover", "Hannover", "Germania", 52.3759, 9.7320),
    _station("de-heidelberg", "Heidelberg", "Heidelberg", "Germania", 49.3988, 8.6724),
    _station("de-karlsruhe", "Karlsruhe-Ettlingen", "Karlsruhe", "Germania", 49.0069, 8.4037),
    _station("de-kassel", "Kassel", "Kassel", "Germania", 51.3127, 9.4797),
    _station("de-kiel", "Kiel", "Kiel", "Germania", 54.3233, 10.1228),
    _station("de-leipzig", "Lipsia", "Leipzig", "Germania", 51.3397, 12.3731),
    _station("de-lindau", "Lindau-Wangen", "Lindau", "Germania", 47.5460, 9.6842),
    _station("de-lubeck", "Lubecca", "Lübeck", "Germania", 53.8655, 10.6866),
    _station("de-mainz", "Magonza", "Mainz", "Germania", 49.9929, 8.2473),
    _station("de-munich", "Monaco di Baviera", "München", "Germania", 48.1351, 11.5820),
    _station("de-nuremberg", "Norimberga", "Nürnberg", "Germania", 49.4521, 11.0767),
    _station("de-regensburg", "Ratisbona", "Regensburg", "Germania", 49.0134, 12.0961),
    _station("de-stuttgart", "Stoccarda", "Stuttgart", "Germania", 48.7758, 9.1829),
    _station("de-trier", "Treviri", "Trier", "Germania", 49.7596, 6.6441),
    _station("de-ulm", "Ulm", "Ulm", "Germania", 48.3984, 9.9917),
    _station("de-wurzburg", "Würzburg", "Würzburg", "Germania", 49.7913, 9.9534),
    # Italia
    _station("it-florence", "Firenze", "Firenze", "Italia", 43.7696, 11.2558),
    _station("it-milan", "Milano", "Milano", "Italia", 45.4642, 9.1900),
    _station("it-rome", "Roma", "Roma", "Italia", 41.9028, 12.4964),
    _station("it-turin", "Torino", "Torino", "Italia", 45.0703, 7.6869),
    _station("it-venice", "Venezia", "Venezia", "Italia", 45.4408, 12.3155),
    # Portogallo
    _station("pt-faro", "Faro", "Faro", "Portogallo", 37.0194, -7.9322),
    _station("pt-lisbon", "Lisbona", "Lisboa", "Portogallo", 38.7223, -9.1393),
    _station("pt-porto", "Porto", "Porto", "Portogallo", 41.1579, -8.6291),
    # Spagna
    _station("es-barcelona", "Barcellona", "Barcelona", "Spagna", 41.3851, 2.1734),
    _station("es-bilbao", "Bilbao", "Bilbao", "Spagna", 43.2627, -2.9253),
    _station("es-madrid", "Madrid", "Madrid", "Spagna", 40.4168, -3.7038),
    _station("es-malaga", "Malaga", "Málaga", "Spagna", 36.7213, -4.4214),
    _station("es-seville", "Siviglia", "Sevilla", "Spagna", 37.3891, -5.9845),
    _station("es-valencia", "Valencia", "Valencia", "Spagna", 39.4699, -0.3763),
    # Stati Uniti
    _station("us-dallas", "Dallas", "Dallas", "Stati Uniti", 32.7767, -96.7970, "Dallas, TX"),
    _station("us-denver", "Denver", "Denver", "Stati Uniti", 39.7392, -104.9903, "Denver, CO"),
    _station("us-las-vegas", "Las Vegas", "Las Vegas", "Stati Uniti", 36.1699, -115.1398, "Las Vegas, NV"),
    _station("us-los-angeles", "Los Angeles", "Los Angeles", "Stati Uniti", 34.0522, -118.2437, "Los Angeles, CA"),
    _station("us-miami", "Miami", "Miami", "Stati Uniti", 25.7617, -80.1918, "Miami, FL"),
    _station("us-new-york", "New York City", "New York", "Stati Uniti", 40.7128, -74.0060, "New York, NY"),
    _station("us-phoenix", "Phoenix", "Phoenix", "Stati Uniti", 33.4484, -112.0740, "Phoenix, AZ"),
    _station("us-salt-lake-city", "Salt Lake City", "Salt Lake City", "Stati Uniti", 40.7608, -111.8910, "Salt Lake City, UT"),
    _station("us-san-francisco", "San Francisco", "San Francisco", "Stati Uniti", 37.7749, -122.4194, "San Francisco, CA"),
    _station("us-seattle", "Seattle", "Seattle", "Stati Uniti", 47.6062, -122.3321, "Seattle, WA"),
    # Canada
    _station("ca-calgary", "Calgary", "Calgary", "Canada", 51.0447, -114.0719, "Calgary, AB"),
    _station("ca-vancouver", "Vancouver", "Vancouver", "Canada", 49.2827, -123.1207, "Vancouver, BC"),
]


def _camper(camper_id: str, model: str, category: str, sleeps: int, length: float, notes: str) -> Camper:
    return Camper(id=camper_id, modelName=model, category=category, sleeps=sleeps, lengthMeters=length, notes=notes)


SEED_CAMPERS: List[Camper] = [
    _camper("surfer-suite", "Surfer Suite", "Campervan", 4, 5.99, "VW T6.1 California Ocean - Iconico van con tetto a soffietto, cucina integrata."),
    _camper("sunrise-suite", "Sunrise Suite", "Campervan", 4, 5.99, "Nuovo VW California Ocean / Coast - Design moderno e funzionale."),
    _camper("beach-hostel", "Beach Hostel", "Campervan", 4, 5.99, "VW T6.1 California Beach - Perfetto per piccoli gruppi e famiglie."),
    _camper("camper-cabin", "Camper Cabin", "Campervan", 4, 5.40, "Ford Nugget - Compatto e versatile per ogni destinazione."),
    _camper("camper-cabin-deluxe", "Camper Cabin Deluxe", "Campervan", 4, 5.40, "Ford Nugget Plus - Versione premium con comfort extra."),
    _camper("travel-home", "Travel Home", "Campervan", 4, 5.14, "Mercedes Marco Polo - Eleganza e tecnologia per viaggiatori esigenti."),
    _camper("family-finca", "Family Finca", "Van", 4, 6.00, "Furgonato spazioso per famiglie con cucina completa e bagno interno."),
    _camper("couple-cottage", "Couple Cottage", "Van", 2, 5.40, "Van compatto ideale per coppie, design moderno e pratico."),
    _camper("road-house", "Road House", "Van", 4, 6.00, "Furgonato versatile con multiple configurazioni disponibili."),
    _camper("couple-condo", "Couple Condo", "Van", 2, 5.40, "Van premium per coppie con tutti i comfort."),
    _camper("liberty-lodge", "Liberty Lodge", "Van", 4, 6.00, "Furgonato con ampi spazi e dotazioni complete."),
    _camper("horizon-hopper", "Horizon Hopper", "Van", 2, 5.49, "Winnebago Revel 44E - Van 4x4 per avventure off-road."),
    _camper("couple-cottage-offroad", "Couple Cottage Offroad", "Van", 2, 5.40, "Versione offroad (4x4) per coppie avventurose."),
    _camper("camper-castle", "Camper Castle", "SemiIntegrated", 4, 7.00, "Semi-integrato spazioso con bagno separato e cucina attrezzata."),
    _camper("cozy-cottage", "Cozy Cottage", "SemiIntegrated", 4, 6.80, "Semi-integrato confortevole ideale per famiglie."),
    _camper("van-villa", "Van Villa", "SemiIntegrated", 4, 5.99, "VW T6.1 Knaus Tourer Van - Compatto ma completo."),
    _camper("family-freedom", "Family Freedom", "Motorhome", 5, 7.50, "Thor Four Winds 22E - Mansardato con alcova, cucina/soggiorno e bagno completo."),
]


class InMemoryLocationCatalog(LocationCatalog):
    def __init__(self, locations: Optional[Sequence[Location]] = None):
        self._locations: List[Location] = list(SEED_LOCATIONS if locations is None else locations)

    def get_all(self) -> List[Location]:
        return list(self._locations)

    def find_by_id(self, location_id: str) -> Optional[Location]:
        target = location_id.casefold()
        return next((loc for loc in self._locations if loc.id.casefold() == target), None)


class InMemoryRentalLocationCatalog(RentalLocationCatalog):
    def __init__(self, locations: Optional[Sequence[RentalLocation]] = None):
        self._locations: List[RentalLocation] = list(SEED_RENTAL_LOCATIONS if locations is None else locations)

    def get_all(self) -> List[RentalLocation]:
        return sorted(self._locations, key=lambda loc: (loc.country, loc.city))

    def find_by_id(self, location_id: str) -> Optional[RentalLocation]:
        target = location_id.casefold()
        return next((loc for loc in self._locations if loc.id.casefold() == target), None)


class InMemoryCamperCatalog(CamperCatalog):
    def __init__(self, campers: Optional[Sequence[Camper]] = None):
        self._campers: List[Camper] = list(SEED_CAMPERS if campers is None else campers)

    def get_all(self) -> List[Camper]:
        return list(self._campers)
