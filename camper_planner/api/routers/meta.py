from typing import List

from fastapi import APIRouter, Depends

from camper_planner.api.models.schemas import Camper, Location, RentalLocation
from camper_planner.dependencies import get_camper_catalog, get_location_catalog, get_rental_location_catalog
from camper_planner.domain.catalogs import CamperCatalog, LocationCatalog, RentalLocationCatalog

router = APIRouter(tags=["catalog"])


@router.get("/locations", response_model=List[Location])
async def list_locations(catalog: LocationCatalog = Depends(get_location_catalog)):
    return catalog.get_all()


@router.get("/rentallocations", response_model=List[RentalLocation])
async def list_rental_locations(catalog: RentalLocationCatalog = Depends(get_rental_location_catalog)):
    return catalog.get_all()


@router.get("/campers", response_model=List[Camper])
async def list_campers(catalog: CamperCatalog = Depends(get_camper_catalog)):
    return catalog.get_all()
