"""Adaptadores de fuentes de consultas (Citizen Space, Civiq RSS)."""

from consultationradar.adapters.base import Adapter
from consultationradar.adapters.citizen_space import CitizenSpaceAdapter
from consultationradar.adapters.civiq_rss import CiviqRSSAdapter
from consultationradar.adapters.end_date import extract_end_date

__all__ = [
    "Adapter",
    "CitizenSpaceAdapter",
    "CiviqRSSAdapter",
    "extract_end_date",
]
