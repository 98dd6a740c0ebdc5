"""Card routes; list responses carry masked numbers only."""

from typing import List

from fastapi import APIRouter, Depends, Response

from ...schemas.card_schemas import CardCreate, CardRead, CardSummary, CardUpdate
from ...services.card_service import CardService
from ..deps import get_card_service, get_principal

router = APIRouter(prefix="/api/user", tags=["cards"], dependencies=[Depends(get_principal)])


@router.put("/card", status_code=202)
def add_card(body: CardCreate, service: CardService = Depends(get_card_service)):
    service.create(body)
    return Response(status_code=202)


@router.get("/cards", response_model=List[CardSummary])
def list_cards(service: CardService = Depends(get_card_service)):
    return service.list_all()


@router.get("/card/{title}", response_model=CardRead)
def get_card(title: str, service: CardService = Depends(get_card_service)):
    return service.get_by_title(title)


@router.post("/card/update/{title}", status_code=202)
def update_card(title: str, body: CardUpdate, service: CardService = Depends(get_card_service)):
    service.update(title, body)
    return Response(status_code=202)


@router.delete("/card/{title}")
def delete_card(title: str, service: CardService = Depends(get_card_service)):
    service.delete(title)
    return Response(status_code=200)
