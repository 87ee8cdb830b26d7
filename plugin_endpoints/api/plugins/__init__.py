"""Plugin API - aggregated router"""
from fastapi import APIRouter
from . import crud

router = APIRouter(tags=["Plugins"])

# crud declares the collection route as "", so the prefix goes here
router.include_router(crud.router, prefix="/plugins")
