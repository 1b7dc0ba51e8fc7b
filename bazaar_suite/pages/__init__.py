"""
Page objects for the HamroBazaar UI.
"""
from .base import BasePage, ClickStrategy
from .filters import FilterPage
from .home import HomePage
from .results import ResultsPage

__all__ = ["BasePage", "ClickStrategy", "FilterPage", "HomePage", "ResultsPage"]
